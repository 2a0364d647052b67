import unittest

from rtlcallgraph.exceptions import DuplicateNodeError, MalformedEdgeError, NodeLookupError
from rtlcallgraph.model import Edge, Graph, Props, palette_index


def chain(graph, *names):
    nodes = [graph.create_node(n) for n in names]
    for a, b in zip(nodes, nodes[1:]):
        graph.create_edge(a, b)
    return nodes


class TestProps(unittest.TestCase):
    def test_render_skips_empty(self):
        props = Props()
        props.set("shape", "box")
        props.set("label", "")
        props["color"] = None
        props.set("height", 0.5)
        self.assertEqual(props.to_graphviz(), 'shape="box"; height="0.5"')

    def test_last_write_wins_keeps_order(self):
        props = Props()
        props.set("style", "dashed")
        props.set("color", "red")
        props.set("style", "bold")
        self.assertEqual(props.get("style"), "bold")
        self.assertEqual(props.to_graphviz(), 'style="bold"; color="red"')

    def test_get_default(self):
        self.assertIsNone(Props().get("missing"))
        self.assertEqual(Props().get("missing", 3), 3)


class TestGraph(unittest.TestCase):
    def test_create_and_lookup(self):
        g = Graph()
        created = [g.create_node(name) for name in ("a", "b", "c")]
        for node in created:
            self.assertTrue(g.has_node(node.name))
            self.assertIs(g.get_node(node.name), node)
        self.assertEqual([n.name for n in g.get_nodes()], ["a", "b", "c"])
        self.assertEqual(list(g), created)
        self.assertEqual(len(g), 3)

    def test_duplicate_node(self):
        g = Graph()
        g.create_node("a")
        with self.assertRaises(DuplicateNodeError):
            g.create_node("a")

    def test_unknown_node(self):
        g = Graph()
        self.assertFalse(g.has_node("nope"))
        with self.assertRaises(LookupError):
            g.get_node("nope")
        with self.assertRaises(NodeLookupError):
            g.get_node("nope")

    def test_malformed_edge(self):
        g = Graph()
        a, b = g.create_node("a"), g.create_node("b")
        with self.assertRaises(MalformedEdgeError):
            b.add_edge(Edge(a, b))

    def test_parallel_edges_kept(self):
        g = Graph()
        a, b = g.create_node("a"), g.create_node("b")
        g.create_edge(a, b)
        g.create_edge(a, b)
        self.assertEqual(len(g.find_all_edges()), 2)

    def test_find_all_edges_order(self):
        g = Graph()
        a, b, c = g.create_node("a"), g.create_node("b"), g.create_node("c")
        e1 = g.create_edge(b, c)
        e2 = g.create_edge(a, c)
        e3 = g.create_edge(a, b)
        self.assertEqual(g.find_all_edges(), [e2, e3, e1])

    def test_palette_index_wraps(self):
        self.assertEqual(palette_index(1), 1)
        self.assertEqual(palette_index(12), 12)
        self.assertEqual(palette_index(13), 1)


class TestTraversal(unittest.TestCase):
    def test_bfs_single(self):
        g = Graph()
        x = g.create_node("x")
        g.create_node("y")
        self.assertEqual(g.bfs(x), [x])

    def test_bfs_chain(self):
        g = Graph()
        a, b, c = chain(g, "a", "b", "c")
        self.assertEqual(a.bfs(), [a, b, c])

    def test_bfs_visits_once(self):
        g = Graph()
        a, b = chain(g, "a", "b")
        g.create_edge(a, b)
        g.create_edge(b, a)
        self.assertEqual(a.bfs(), [a, b])

    def test_bfs_fifo(self):
        g = Graph()
        a, b, c, d = (g.create_node(n) for n in "abcd")
        g.create_edge(a, b)
        g.create_edge(a, c)
        g.create_edge(b, d)
        self.assertEqual(a.bfs(), [a, b, c, d])

    def test_cycle_ring(self):
        g = Graph()
        a, b, c = chain(g, "a", "b", "c")
        back = g.create_edge(c, a)
        cycles = g.find_edges_of_cycles()
        for edge in g.find_all_edges():
            self.assertIn(edge, cycles)
        self.assertIn(back, cycles)

    def test_cycle_acyclic(self):
        g = Graph()
        a, b, c = chain(g, "a", "b", "c")
        g.create_edge(a, c)
        self.assertEqual(g.find_edges_of_cycles(), [])

    def test_cycle_self_loop(self):
        g = Graph()
        a, b = chain(g, "a", "b")
        loop = g.create_edge(a, a)
        self.assertEqual(g.find_edges_of_cycles(), [loop])

    def test_cycle_duplicates_kept(self):
        # a <-> b: each edge returns to one root, both roots reach both edges
        g = Graph()
        a, b = chain(g, "a", "b")
        g.create_edge(b, a)
        self.assertEqual(len(g.find_edges_of_cycles()), 2)
        # parallel back edges into the same root are all reported
        g.create_edge(b, a)
        self.assertEqual(len(g.find_edges_of_cycles()), 3)


class TestGraphviz(unittest.TestCase):
    def build(self):
        g = Graph()
        g.nodeprops.set("shape", "box")
        a = g.create_node("a", module=1)
        a.size = 4
        a.props.set("fillcolor", 1)
        b = g.create_node("b")
        edge = g.create_edge(a, b)
        edge.props.set("style", "dashed")
        return g

    def test_document(self):
        g = self.build()
        self.assertEqual(
            g.to_graphviz(),
            'strict digraph {\n'
            'node [ shape="box" ]\n'
            '"a" [ fillcolor="1" ]  // size=4\n'
            '"b" [  ]\n'
            '"a" -> "b" [ style="dashed" ]\n'
            '}\n',
        )

    def test_legend_block(self):
        g = self.build()
        g.add_legend("main.c", 1)
        legend = g.add_legend("util.c", 14)
        legend.props.set("fillcolor", 2)
        dot = g.to_graphviz()
        self.assertIn("subgraph cluster_legend {\n", dot)
        self.assertIn('  rank = "source"; style = "filled"; fillcolor = "#EEEEEE";\n', dot)
        self.assertIn('"cluster_legend_0" [ label = "main.c"; fillcolor = "1"; ]', dot)
        self.assertIn('"cluster_legend_1" [ label = "util.c"; fillcolor = "2"; ]', dot)
        self.assertLess(dot.index("cluster_legend"), dot.index('"a" ['))

    def test_no_legend_block(self):
        self.assertNotIn("cluster_legend", self.build().to_graphviz())

    def test_quotes_escaped(self):
        g = Graph()
        g.create_node('operator"" _km(unsigned long long)')
        self.assertIn('"operator\\"\\" _km(unsigned long long)" [  ]', g.to_graphviz())

    def test_visual_source(self):
        source = self.build()._build_visual(format="svg").source
        self.assertTrue(source.startswith("strict digraph"))


if __name__ == "__main__":
    unittest.main()
