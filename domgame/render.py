"""Drawing the current round to the terminal."""
from dataclasses import dataclass
from math import ceil
from typing import Container, Iterator, Sequence

from rich.text import Text

from domgame.graph import GraphRecord
from domgame.layout import LayoutPosition, Viewport
from domgame.state import Verdict


@dataclass(frozen=True, slots=True)
class Segment:
    """An edge between two node centres."""

    start: tuple[float, float]
    end: tuple[float, float]


@dataclass(frozen=True, slots=True)
class NodeShape:
    """A node as it should be drawn."""

    index: int
    x: float
    y: float
    radius: float
    selected: bool
    revealed: bool
    """Whether the node belongs to the set shown after a wrong answer."""


@dataclass(frozen=True, slots=True)
class Scene:
    """Everything a renderer needs to draw a round."""

    edges: list[Segment]
    nodes: list[NodeShape]


def build_scene(
    graph: GraphRecord,
    positions: Sequence[LayoutPosition],
    selection: Container[int],
    verdict: Verdict | None,
    node_radius: float,
) -> Scene:
    """Describes how the round is drawn.

    Every edge is drawn once, edges to nodes without a position are left out. The canonical minimum dominating set is
    only marked if the last verdict was incorrect.
    """
    reveal = verdict.reveal_set if verdict is not None and not verdict.correct else frozenset()
    edges = [
        Segment((positions[i].x, positions[i].y), (positions[j].x, positions[j].y))
        for i, j in graph.edges()
        if j < len(positions)
    ]
    nodes = [
        NodeShape(
            index=index,
            x=position.x,
            y=position.y,
            radius=node_radius * position.emphasis,
            selected=index in selection,
            revealed=index in reveal,
        )
        for index, position in enumerate(positions)
    ]
    return Scene(edges, nodes)


def _line(x0: int, y0: int, x1: int, y1: int) -> Iterator[tuple[int, int]]:
    """Bresenham's line algorithm."""
    dx, dy = abs(x1 - x0), -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


class TerminalCanvas:
    """Rasterises scenes into a grid of terminal cells.

    Scenes use logical units, each cell covers `cell_width` by `cell_height` of them. This plays the role of the
    device pixels of a graphical surface.
    """

    def __init__(self, viewport: Viewport, cell_width: float = 8, cell_height: float = 16) -> None:
        self.cell_width = cell_width
        self.cell_height = cell_height
        self.columns = 1
        self.rows = 1
        self.resize(viewport)

    def resize(self, viewport: Viewport) -> None:
        """Matches the size of the grid to the viewport."""
        self.columns = max(1, ceil(viewport.width / self.cell_width))
        self.rows = max(1, ceil(viewport.height / self.cell_height))

    def _cell(self, x: float, y: float) -> tuple[int, int]:
        column = min(max(int(x / self.cell_width), 0), self.columns - 1)
        row = min(max(int(y / self.cell_height), 0), self.rows - 1)
        return column, row

    def draw(self, scene: Scene, node_radius: float = 15) -> Text:
        """Draws the scene.

        Selected nodes are drawn reversed, revealed ones in red brackets and nodes that are being animated in bold.
        """
        chars = [[" "] * self.columns for _ in range(self.rows)]
        styles = [[""] * self.columns for _ in range(self.rows)]

        for segment in scene.edges:
            for column, row in _line(*self._cell(*segment.start), *self._cell(*segment.end)):
                chars[row][column] = "·"
                styles[row][column] = "dim"

        for node in scene.nodes:
            column, row = self._cell(node.x, node.y)
            label = f"[{node.index}]" if node.revealed else f"({node.index})"
            style = " ".join(
                part
                for part, active in (
                    ("bold", node.radius > node_radius),
                    ("red", node.revealed),
                    ("reverse", node.selected),
                )
                if active
            )
            start = min(max(column - len(label) // 2, 0), max(self.columns - len(label), 0))
            for offset, char in enumerate(label[: self.columns]):
                chars[row][start + offset] = char
                styles[row][start + offset] = style

        text = Text(no_wrap=True, overflow="crop")
        for row in range(self.rows):
            for column in range(self.columns):
                text.append(chars[row][column], styles[row][column] or None)
            if row < self.rows - 1:
                text.append("\n")
        return text
