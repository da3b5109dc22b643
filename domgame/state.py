"""State of a single round of the puzzle."""
from dataclasses import dataclass
from typing import Iterable, Iterator

from domgame.graph import GraphRecord


class Selection:
    """The nodes the player currently has selected."""

    def __init__(self, nodes: Iterable[int] = ()) -> None:
        self._nodes = set(nodes)

    def toggle(self, index: int) -> None:
        """Removes the node if it is selected, selects it otherwise."""
        if index in self._nodes:
            self._nodes.remove(index)
        else:
            self._nodes.add(index)

    def clear(self) -> None:
        """Deselects every node."""
        self._nodes.clear()

    def frozen(self) -> frozenset[int]:
        """Snapshot of the current selection."""
        return frozenset(self._nodes)

    def __contains__(self, index: object) -> bool:
        return index in self._nodes

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._nodes))

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Selection):
            return self._nodes == other._nodes
        if isinstance(other, (set, frozenset)):
            return self._nodes == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"Selection({sorted(self._nodes)})"


@dataclass(frozen=True, slots=True)
class Verdict:
    """Outcome of checking a selection against the minimum dominating sets of a graph."""

    correct: bool
    """Whether the selection is one of the minimum dominating sets."""
    reveal_set: frozenset[int]
    """The canonical minimum dominating set that is shown if the selection was wrong."""
    selection: frozenset[int] = frozenset()
    """The selection that was checked."""
    undominated: frozenset[int] = frozenset()
    """Nodes the selection does not dominate."""
    domination_number: int = 0
    """Size of the minimum dominating sets."""

    @property
    def dominating(self) -> bool:
        """Whether the selection is a dominating set at all."""
        return not self.undominated


@dataclass
class RoundState:
    """Everything belonging to the graph that is currently played.

    A new object is created for every round, only `hint_revealed` and `last_verdict` change during it.
    """

    graph: GraphRecord
    graph_index: int
    previous_graph_index: int | None = None
    hint_revealed: bool = False
    last_verdict: Verdict | None = None
