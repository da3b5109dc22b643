"""Schema of the graph records the puzzle is played on.

A record is produced offline and contains the graph, optional drawing coordinates and every minimum dominating set
of it. They are validated once when the catalog is loaded, after that they are never mutated.
"""
import logging
from math import isfinite
from typing import Annotated, Any, Iterator

from pydantic import AfterValidator, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from domgame.util import BaseModel

logger = logging.getLogger("domgame.graph")


class Point(BaseModel):
    """A point in the source coordinate space of a record, with the y axis pointing up."""

    x: float
    y: float


def _distinct_members(members: tuple[int, ...]) -> tuple[int, ...]:
    if len(set(members)) != len(members):
        raise ValueError("A minimum dominating set lists the same node more than once.")
    return members


NodeSet = Annotated[tuple[int, ...], AfterValidator(_distinct_members)]
"""A set of node indices, encoded as a list without repetitions."""


def _is_coordinate(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and isfinite(value)


class GraphRecord(BaseModel):
    """A single graph of the catalog together with its precomputed minimum dominating sets."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    node_count: int = Field(alias="nodes", ge=0)
    """Number of nodes, they are labeled `0 <= i < node_count`."""
    adjacency: dict[int, list[int]] = Field(alias="adjList")
    """Neighbours of every node, must be symmetric."""
    min_dominating_sets: list[NodeSet] = Field(alias="minDominatingSets", min_length=1)
    """Every minimum dominating set of the graph, in catalog order."""
    positions: dict[int, Point] | None = None
    """Optional drawing coordinates, nodes without an entry are placed by the layout."""

    @field_validator("positions", mode="before")
    @classmethod
    def _drop_unusable_positions(cls, value: Any, info: ValidationInfo) -> Any:
        """Discards coordinates that aren't usable instead of rejecting the whole record."""
        if value is None:
            return None
        if not isinstance(value, dict):
            logger.warning("Ignoring positions given as %s instead of a mapping.", type(value).__name__)
            return None
        node_count = info.data.get("node_count")
        usable: dict[int, dict[str, float]] = {}
        for key, point in value.items():
            try:
                index = int(key)
            except (TypeError, ValueError):
                logger.warning("Ignoring position with non numeric key %r.", key)
                continue
            if node_count is not None and not 0 <= index < node_count:
                logger.warning("Ignoring position of node %d, the graph has %d nodes.", index, node_count)
                continue
            if not (isinstance(point, dict) and _is_coordinate(point.get("x")) and _is_coordinate(point.get("y"))):
                logger.warning("Ignoring malformed position of node %d: %r", index, point)
                continue
            usable[index] = {"x": point["x"], "y": point["y"]}
        return usable

    @model_validator(mode="after")
    def _check_graph(self) -> "GraphRecord":
        """Validates the adjacency and the minimum dominating sets."""
        for node, neighbours in self.adjacency.items():
            for other in neighbours:
                if other == node:
                    logger.warning("Ignoring self loop of node %d.", node)
                elif not (self.has_node(node) and self.has_node(other)):
                    logger.warning("Ignoring edge %d-%d, the graph has %d nodes.", node, other, self.node_count)
                elif node not in self.adjacency.get(other, ()):
                    raise ValueError(
                        f"The adjacency is not symmetric, {other} is a neighbour of {node} but not vice versa."
                    )

        sizes = {len(members) for members in self.min_dominating_sets}
        if len(sizes) > 1:
            raise ValueError(f"The minimum dominating sets have differing sizes {sorted(sizes)}.")
        for members in self.min_dominating_sets:
            if any(not self.has_node(node) for node in members):
                raise ValueError(f"The minimum dominating set {list(members)} contains nodes that aren't in the graph.")
        return self

    def has_node(self, index: int) -> bool:
        """Checks whether the index is a node of this graph."""
        return 0 <= index < self.node_count

    @property
    def dominating_sets(self) -> list[frozenset[int]]:
        """The minimum dominating sets as python sets, in catalog order."""
        return [frozenset(members) for members in self.min_dominating_sets]

    @property
    def num_edges(self) -> int:
        """Number of undirected edges between nodes of the graph."""
        return sum(1 for _ in self.edges())

    def edges(self) -> Iterator[tuple[int, int]]:
        """Yields every undirected edge once, as `(i, j)` with `i < j`.

        Neighbours that aren't nodes of the graph are skipped.
        """
        seen: set[tuple[int, int]] = set()
        for node, neighbours in self.adjacency.items():
            for other in neighbours:
                edge = (node, other)
                if node < other and self.has_node(node) and self.has_node(other) and edge not in seen:
                    seen.add(edge)
                    yield edge

    def closed_neighbourhood(self, index: int) -> set[int]:
        """The node itself together with all of its neighbours."""
        return {index} | {other for other in self.adjacency.get(index, ()) if self.has_node(other)}
