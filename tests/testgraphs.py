"""Graph records used throughout the tests."""
from typing import Any

from domgame.graph import GraphRecord


def path_graph(**extra: Any) -> GraphRecord:
    """The path 0 - 1 - 2, only dominated minimally by its middle node."""
    return GraphRecord.model_validate(
        {
            "nodes": 3,
            "adjList": {"0": [1], "1": [0, 2], "2": [1]},
            "minDominatingSets": [[1]],
        }
        | extra
    )


def cycle_graph(**extra: Any) -> GraphRecord:
    """The cycle 0 - 1 - 2 - 3 - 4 - 0, dominated by any two nodes at distance two."""
    return GraphRecord.model_validate(
        {
            "nodes": 5,
            "adjList": {"0": [1, 4], "1": [0, 2], "2": [1, 3], "3": [2, 4], "4": [3, 0]},
            "minDominatingSets": [[1, 3], [0, 2], [2, 4], [0, 3], [1, 4]],
        }
        | extra
    )


def square_positions() -> dict[str, dict[str, float]]:
    """Corners of the unit square, for a four node graph."""
    return {
        "0": {"x": 0, "y": 0},
        "1": {"x": 1, "y": 0},
        "2": {"x": 1, "y": 1},
        "3": {"x": 0, "y": 1},
    }


def square_graph(**extra: Any) -> GraphRecord:
    """The cycle 0 - 1 - 2 - 3 - 0 drawn as a square."""
    return GraphRecord.model_validate(
        {
            "nodes": 4,
            "adjList": {"0": [1, 3], "1": [0, 2], "2": [1, 3], "3": [2, 0]},
            "positions": square_positions(),
            "minDominatingSets": [[0, 1], [0, 2], [0, 3], [1, 2], [1, 3], [2, 3]],
        }
        | extra
    )
