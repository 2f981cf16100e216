import os
import tempfile
import unittest
import matplotlib
matplotlib.use("Agg")

from forcegraph.config import LayoutConfig
from forcegraph.models import Bounds, Graph, LayoutResult, Node, NodeMetadata, NodeRole
from forcegraph import visualization
from forcegraph.visualization import (node_labels, render_positions, visualize_layout,
                                      visualize_layout_interactive)


def make_result():
    graph = Graph(draw_scale=2.0)
    layout_nodes = [
        ("A", (0.0, 0.0), NodeRole.ANCHORED, 1),
        ("B", (40.0, -25.0), NodeRole.FREE, 1),
        ("X", (0.0, 0.0), NodeRole.DISCONNECTED, 0),
        ("Y", (0.0, 30.0), NodeRole.DISCONNECTED, 0),
    ]
    for name, pos, role, degree in layout_nodes:
        meta = NodeMetadata(name, 12, 0.456, 1.234, (1.0, 0.0, 0.5), degree)
        graph.add_node(Node(meta, pos, 1.2 * degree, role))
    graph.add_edge("A -- B", "A", "B")
    return LayoutResult(graph, Bounds(top=0.0, bottom=-25.0, left=0.0, right=40.0), iterations=20)


class TestRenderPositions(unittest.TestCase):
    def test_disconnected_nodes_go_to_lower_right(self):
        positions = render_positions(make_result())
        self.assertEqual(positions["A"], (0.0, 0.0))
        self.assertEqual(positions["B"], (40.0, -25.0))
        self.assertEqual(positions["X"], (70.0, -25.0))
        self.assertEqual(positions["Y"], (70.0, 5.0))

    def test_custom_spacing(self):
        positions = render_positions(make_result(), LayoutConfig(disconnected_spacing=5.0))
        self.assertEqual(positions["X"], (50.0, -25.0))

    def test_labels(self):
        node = make_result().graph.nodes["A"]
        self.assertEqual(node_labels(node), ("A", "card: 12", "rad: 0.46", "lfd: 1.23"))

    def test_edge_positions(self):
        self.assertEqual(list(make_result().graph.edge_positions()), [((0.0, 0.0), (40.0, -25.0))])


class TestDrawing(unittest.TestCase):
    def test_static_png(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "layout.png")
            fig = visualize_layout(make_result(), output_filename=path, show=False)
            self.assertIsNotNone(fig)
            self.assertTrue(os.path.getsize(path) > 0)

    @unittest.skipIf(visualization.go is None, "plotly not installed")
    def test_interactive_html(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "layout.html")
            fig = visualize_layout_interactive(make_result(), output_filename=path)
            self.assertEqual(len(fig.data), 2)
            with open(path) as f:
                self.assertIn("card: 12", f.read())


if __name__ == '__main__':
    unittest.main()
