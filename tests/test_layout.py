"""Tests for the layout engine."""
from itertools import combinations
from math import atan2, dist, isclose, isfinite, pi
from unittest import TestCase, main

from domgame.graph import GraphRecord
from domgame.layout import LayoutPosition, Viewport, circular_layout, compute_layout, hit_test, layout_margin
from .testgraphs import cycle_graph, path_graph, square_graph


def graph_with_positions(count: int, positions: dict[int, tuple[float, float]]) -> GraphRecord:
    """An edgeless graph with the given coordinates."""
    return GraphRecord.model_validate(
        {
            "nodes": count,
            "adjList": {},
            "positions": {str(i): {"x": x, "y": y} for i, (x, y) in positions.items()},
            "minDominatingSets": [list(range(count))],
        }
    )


class FallbackTests(TestCase):
    """Tests for graphs without coordinates."""

    def test_circle(self):
        for count in (1, 2, 5, 12):
            for width, height in ((600, 400), (100, 300), (1, 1)):
                positions = compute_layout(graph_with_positions(count, {}), width, height, 15)
                self.assertEqual(len(positions), count)
                points = {(round(p.x, 9), round(p.y, 9)) for p in positions}
                self.assertEqual(len(points), count)
                for p in positions:
                    self.assertTrue(0 <= p.x <= width and 0 <= p.y <= height)
                    self.assertTrue(isclose(dist((p.x, p.y), (width / 2, height / 2)), 0.35 * min(width, height)))

    def test_even_spacing(self):
        positions = compute_layout(cycle_graph(), 600, 400, 15)
        angles = [atan2(p.y - 200, p.x - 300) % (2 * pi) for p in positions]
        for i, angle in enumerate(angles):
            self.assertAlmostEqual(angle, i * 2 * pi / 5)

    def test_first_node_right_of_centre(self):
        positions = compute_layout(path_graph(), 600, 400, 15)
        self.assertAlmostEqual(positions[0].x, 300 + 140)
        self.assertAlmostEqual(positions[0].y, 200)

    def test_unusable_positions(self):
        graph = path_graph(positions={"0": {"x": "a", "y": 0}})
        self.assertEqual(compute_layout(graph, 600, 400, 15), circular_layout(3, 600, 400))

    def test_empty_graph(self):
        graph = GraphRecord.model_validate({"nodes": 0, "adjList": {}, "minDominatingSets": [[]]})
        self.assertEqual(compute_layout(graph, 600, 400, 15), [])
        self.assertEqual(circular_layout(0, 600, 400), [])


class ProvidedPositionTests(TestCase):
    """Tests for graphs with coordinates."""

    def test_square(self):
        positions = compute_layout(square_graph(), 200, 100, 10)
        self.assertEqual(positions[0], LayoutPosition(80, 70))
        self.assertEqual(positions[1], LayoutPosition(120, 70))
        self.assertEqual(positions[2], LayoutPosition(120, 30))
        self.assertEqual(positions[3], LayoutPosition(80, 30))

    def test_y_axis_inverted(self):
        positions = compute_layout(graph_with_positions(2, {0: (0, 0), 1: (0, 10)}), 300, 300, 15)
        self.assertLess(positions[1].y, positions[0].y)

    def test_within_margin(self):
        coordinates = {0: (-40, 3), 1: (12, 7.5), 2: (3, -100), 3: (55, 21), 4: (0, 0)}
        for width, height in ((600, 400), (400, 600), (97, 250)):
            for radius in (2, 15):
                margin = layout_margin(radius)
                for p in compute_layout(graph_with_positions(5, coordinates), width, height, radius):
                    self.assertGreaterEqual(p.x, margin - 1e-9)
                    self.assertLessEqual(p.x, width - margin + 1e-9)
                    self.assertGreaterEqual(p.y, margin - 1e-9)
                    self.assertLessEqual(p.y, height - margin + 1e-9)

    def test_centred(self):
        positions = compute_layout(graph_with_positions(2, {0: (1000, 1000), 1: (1010, 1020)}), 600, 400, 15)
        self.assertAlmostEqual((positions[0].x + positions[1].x) / 2, 300)
        self.assertAlmostEqual((positions[0].y + positions[1].y) / 2, 200)

    def test_geometry_preserved(self):
        coordinates = {0: (0, 0), 1: (3, 0), 2: (0, 4), 3: (5, 7)}
        positions = compute_layout(graph_with_positions(4, coordinates), 640, 480, 15)
        ratios = [
            dist((positions[i].x, positions[i].y), (positions[j].x, positions[j].y))
            / dist(coordinates[i], coordinates[j])
            for i, j in combinations(range(4), 2)
        ]
        for ratio in ratios:
            self.assertAlmostEqual(ratio, ratios[0])

    def test_huge_coordinates(self):
        for coordinates in ({0: (1e308, 0), 1: (1.5e308, 1)}, {0: (-1e308, 0), 1: (1e308, 1)}):
            positions = compute_layout(graph_with_positions(3, coordinates), 600, 400, 15)
            margin = layout_margin(15)
            for p in positions:
                self.assertTrue(isfinite(p.x) and isfinite(p.y))
                self.assertTrue(margin - 1e-9 <= p.x <= 600 - margin + 1e-9)
                self.assertTrue(margin - 1e-9 <= p.y <= 400 - margin + 1e-9)

    def test_margin(self):
        self.assertEqual(layout_margin(2), 16)
        self.assertEqual(layout_margin(15), 45)

    def test_idempotent(self):
        graph = square_graph()
        self.assertEqual(compute_layout(graph, 320, 240, 15), compute_layout(graph, 320, 240, 15))

    def test_tiny_viewport(self):
        positions = compute_layout(square_graph(), 20, 20, 15)
        for p in positions:
            self.assertEqual((p.x, p.y), (10, 10))


class MissingPositionTests(TestCase):
    """Tests for graphs where only some nodes have coordinates."""

    def test_missing_nodes_filled(self):
        graph = graph_with_positions(6, {0: (0, 0), 1: (4, 0), 2: (4, 2)})
        positions = compute_layout(graph, 600, 400, 15)
        self.assertEqual(len(positions), 6)
        points = {(round(p.x, 9), round(p.y, 9)) for p in positions}
        self.assertEqual(len(points), 6)
        margin = layout_margin(15)
        for p in positions:
            self.assertTrue(margin <= p.x <= 600 - margin)
            self.assertTrue(margin <= p.y <= 400 - margin)

    def test_missing_on_circle_in_source_space(self):
        graph = graph_with_positions(3, {0: (0, 0), 1: (4, 2)})
        positions = compute_layout(graph, 600, 400, 15)
        # scale is min(510 / 4, 310 / 2) = 127.5, the missing node sits at (2 + 0.25 * 4, 1)
        self.assertAlmostEqual(positions[2].x, 300 + 1 * 127.5)
        self.assertAlmostEqual(positions[2].y, 200)

    def test_single_position(self):
        graph = graph_with_positions(3, {1: (5, 5)})
        positions = compute_layout(graph, 600, 400, 15)
        self.assertEqual(positions[1], LayoutPosition(300, 200))
        self.assertEqual(len({(round(p.x, 9), round(p.y, 9)) for p in positions}), 3)


class HitTests(TestCase):
    """Tests for finding the node under a point."""

    def test_hit(self):
        positions = [LayoutPosition(10, 10), LayoutPosition(100, 100)]
        self.assertEqual(hit_test(positions, 12, 9, 5), 0)
        self.assertEqual(hit_test(positions, 100, 105, 5), 1)
        self.assertIsNone(hit_test(positions, 50, 50, 5))

    def test_first_match_wins(self):
        positions = [LayoutPosition(10, 10), LayoutPosition(12, 10)]
        self.assertEqual(hit_test(positions, 11, 10, 5), 0)

    def test_emphasis_grows_disc(self):
        positions = [LayoutPosition(10, 10, emphasis=2)]
        self.assertEqual(hit_test(positions, 18, 10, 5), 0)
        self.assertIsNone(hit_test([LayoutPosition(10, 10)], 18, 10, 5))


class ViewportTests(TestCase):
    """Tests for the viewport."""

    def test_surface_size(self):
        self.assertEqual(Viewport(600, 400).surface_size, (600, 400))
        self.assertEqual(Viewport(600, 400, 2).surface_size, (1200, 800))
        self.assertEqual(Viewport(0.2, 0.2, 1).surface_size, (1, 1))

    def test_invalid(self):
        with self.assertRaises(ValueError):
            Viewport(0, 100)
        with self.assertRaises(ValueError):
            Viewport(100, 100, 0)


if __name__ == "__main__":
    main()
