"""Module mapping graph records onto a drawing surface.

All coordinates produced here are logical (density independent) units with the origin in the top left corner and the
y axis pointing down. The drawing surface itself may have a higher resolution, see :class:`Viewport`.
"""
from dataclasses import dataclass
from math import cos, hypot, isfinite, pi, sin
from typing import Sequence

from domgame.graph import GraphRecord


MIN_MARGIN = 16
"""Smallest distance between a node centre and the edge of the viewport."""


@dataclass
class LayoutPosition:
    """Where a node is drawn, in logical units."""

    x: float
    y: float
    emphasis: float = 1
    """Transient visual scale of the node, only changed by animations."""


@dataclass(frozen=True, slots=True)
class Viewport:
    """Logical size of the drawing surface and its pixel density."""

    width: float
    height: float
    pixel_ratio: float = 1

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("The viewport must have a positive size.")
        if self.pixel_ratio <= 0:
            raise ValueError("The pixel ratio must be positive.")

    @property
    def surface_size(self) -> tuple[int, int]:
        """Size of the backing surface in device pixels."""
        return max(1, round(self.width * self.pixel_ratio)), max(1, round(self.height * self.pixel_ratio))


def layout_margin(node_radius: float) -> float:
    """Margin kept free around the drawing."""
    return max(MIN_MARGIN, 3 * node_radius)


def circular_layout(count: int, width: float, height: float) -> list[LayoutPosition]:
    """Places the nodes evenly on a circle around the centre of the viewport."""
    radius = 0.35 * min(width, height)
    positions = []
    for i in range(count):
        angle = i / max(count, 1) * 2 * pi
        positions.append(LayoutPosition(width / 2 + radius * cos(angle), height / 2 + radius * sin(angle)))
    return positions


def compute_layout(graph: GraphRecord, width: float, height: float, node_radius: float) -> list[LayoutPosition]:
    """Computes where each node of the graph is drawn.

    If the record provides coordinates they are scaled uniformly so that the drawing fits into the viewport with a
    margin on every side and is centred in it, inverting the y axis. Nodes without coordinates are spread on a circle
    around the centre of the provided ones. Records without any coordinates, or with coordinates spanning more than
    a float can represent, are drawn on a circle instead.

    The result only depends on the arguments, calling it again after a resize gives the new layout.

    Args:
        graph: The graph to draw.
        width: Logical width of the viewport.
        height: Logical height of the viewport.
        node_radius: Radius nodes are drawn with.

    Returns:
        One position for every node, indexed by node.
    """
    provided = graph.positions or {}
    if not provided:
        return circular_layout(graph.node_count, width, height)

    xs = [point.x for point in provided.values()]
    ys = [point.y for point in provided.values()]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    range_x = (max_x - min_x) or 1
    range_y = (max_y - min_y) or 1
    if not (isfinite(range_x) and isfinite(range_y)):
        # the extent of the coordinates isn't representable, they can't be scaled
        return circular_layout(graph.node_count, width, height)
    centre_x = min_x + (max_x - min_x) / 2
    centre_y = min_y + (max_y - min_y) / 2

    margin = layout_margin(node_radius)
    # tiny viewports collapse the drawing onto the centre instead of mirroring it
    scale = max(0, min((width - 2 * margin) / range_x, (height - 2 * margin) / range_y))

    source = {index: (point.x, point.y) for index, point in provided.items()}
    missing = [i for i in range(graph.node_count) if i not in source]
    for j, index in enumerate(missing):
        angle = j / max(len(missing), 1) * 2 * pi
        source[index] = (centre_x + cos(angle) * range_x * 0.25, centre_y + sin(angle) * range_y * 0.25)

    positions = []
    for i in range(graph.node_count):
        x, y = source[i]
        positions.append(LayoutPosition((x - centre_x) * scale + width / 2, height / 2 - (y - centre_y) * scale))
    return positions


def hit_test(positions: Sequence[LayoutPosition], x: float, y: float, node_radius: float) -> int | None:
    """Finds the node drawn at the given point.

    Returns:
        The first node in index order whose disc contains the point, or `None` if the point doesn't hit any node.
    """
    for index, position in enumerate(positions):
        if hypot(x - position.x, y - position.y) <= node_radius * position.emphasis:
            return index
    return None
