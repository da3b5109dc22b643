"""Checks the player's selection and discloses the hint."""
import logging
from typing import AbstractSet

from domgame.graph import GraphRecord
from domgame.state import RoundState, Verdict
from domgame.util import SessionError

logger = logging.getLogger("domgame.verifier")


def _require_graph(graph: GraphRecord | None) -> GraphRecord:
    if graph is None:
        raise SessionError("There is no active graph to check against.")
    return graph


def domination_number(graph: GraphRecord) -> int:
    """Size of the smallest stored minimum dominating set."""
    return min(len(members) for members in _require_graph(graph).min_dominating_sets)


def canonical_set(graph: GraphRecord) -> frozenset[int]:
    """The first stored set of minimum size, this is the one revealed to the player."""
    size = domination_number(graph)
    return next(members for members in graph.dominating_sets if len(members) == size)


def undominated(selection: AbstractSet[int], graph: GraphRecord) -> frozenset[int]:
    """Nodes of the graph that are neither selected nor adjacent to a selected node."""
    dominated: set[int] = set()
    for node in selection:
        if graph.has_node(node):
            dominated |= graph.closed_neighbourhood(node)
    return frozenset(range(graph.node_count)) - dominated


def verify(selection: AbstractSet[int], graph: GraphRecord | None) -> Verdict:
    """Checks whether the selection is one of the minimum dominating sets of the graph.

    A selection matches a stored set if both have the same size and every selected node is in the stored set. The
    verdict always contains the canonical minimum dominating set, independent of what was selected.

    Raises:
        SessionError: If there is no graph to check against.
    """
    graph = _require_graph(graph)
    chosen = frozenset(selection)
    correct = any(len(chosen) == len(members) and chosen <= members for members in graph.dominating_sets)
    verdict = Verdict(
        correct=correct,
        reveal_set=canonical_set(graph),
        selection=chosen,
        undominated=undominated(chosen, graph),
        domination_number=domination_number(graph),
    )
    logger.debug("Checked selection %s: %s", sorted(chosen), "correct" if correct else "incorrect")
    return verdict


def reveal_hint(round: RoundState | None) -> int | None:
    """Discloses the domination number, but only the first time it is asked for in a round.

    Raises:
        SessionError: If there is no active round.
    """
    if round is None:
        raise SessionError("There is no active round to give a hint for.")
    if round.hint_revealed:
        return None
    round.hint_revealed = True
    return domination_number(round.graph)
