"""Derive Graphviz styling from the structure of a call graph."""

import logging
import math

from .model import Graph, palette_index

logger = logging.getLogger(__name__)


class Annotator:
    """Set colors, sizes and line styles on an already built :class:`Graph`.

    The steps run in a fixed order and later ones overwrite attributes set by
    earlier ones (a cycle edge is bold even if it was dashed before).
    """

    shape = "box"
    style = "filled"
    colorscheme = "set312"
    library_shape = "ellipse"
    library_fillcolor = "#EEEEEE"
    indirect_style = "dashed"
    cycle_color = "red"
    cycle_style = "bold"
    unreachable_style = "dashed, filled, radial"
    entry_point = "main"

    def annotate(self, graph: Graph) -> Graph:
        self.set_defaults(graph)
        self.mark_library_functions(graph)
        self.color_modules(graph)
        self.set_heights(graph)
        self.mark_indirect_edges(graph)
        self.mark_cycles(graph)
        self.mark_unreachable(graph)
        return graph

    def set_defaults(self, graph):
        graph.nodeprops.set("shape", self.shape)
        graph.nodeprops.set("style", self.style)
        graph.nodeprops.set("colorscheme", self.colorscheme)

    def mark_library_functions(self, graph):
        for node in graph:
            if node.always:
                node.props.set("shape", self.library_shape)
                node.props.set("fillcolor", self.library_fillcolor)

    def color_modules(self, graph):
        for node in graph.get_nodes() + graph.get_legends():
            if node.module:
                node.props.set("fillcolor", palette_index(node.module))

    def set_heights(self, graph):
        for node in graph:
            if node.size > 0:
                node.props.set("height", math.sqrt(node.size) / 10)

    def mark_indirect_edges(self, graph):
        for edge in graph.find_all_edges():
            if edge.indirect:
                edge.props.set("style", self.indirect_style)

    def mark_cycles(self, graph):
        edges = graph.find_edges_of_cycles()
        for edge in edges:
            edge.props.set("color", self.cycle_color)
            edge.props.set("style", self.cycle_style)
        logger.debug("%d cycle edges", len(edges))

    def mark_unreachable(self, graph):
        """Fade out every node that cannot be reached from ``main``."""
        if not graph.has_node(self.entry_point):
            logger.debug("No %s() in graph, skipping reachability", self.entry_point)
            return []
        reachable = {node.name for node in graph.get_node(self.entry_point).bfs()}
        unreachable = [node for node in graph if node.name not in reachable]
        for node in unreachable:
            node.props.set("style", self.unreachable_style)
            node.props.set("fillcolor", f"white:{node.props.get('fillcolor', '')}")
        return unreachable
