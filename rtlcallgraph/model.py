"""Call graph classes for functions found in RTL dumps."""

from collections import deque

import graphviz as gv

from .exceptions import DuplicateNodeError, MalformedEdgeError, NodeLookupError

PALETTE_SIZE = 12


def palette_index(module):
    """Color index of ``module`` in a 12 color Graphviz scheme (1-based)."""
    return (module - 1) % PALETTE_SIZE + 1


def quote(text):
    text = str(text).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


class Props:
    """Ordered attribute bag rendered as Graphviz attributes."""

    def __init__(self):
        self._props = {}

    def __setitem__(self, key, value):
        self._props[key] = value

    def __contains__(self, key):
        return key in self._props

    def __repr__(self):
        return f"Props({self._props!r})"

    def get(self, key, default=None):
        return self._props.get(key, default)

    def set(self, key, value):
        self._props[key] = value

    def to_graphviz(self):
        strs = []
        for key, value in self._props.items():
            if value == "" or value is None:
                continue
            strs.append(f"{key}={quote(value)}")
        return "; ".join(strs)


class Node:
    __slots__ = ["name", "props", "always", "size", "module", "_out_edges"]

    def __init__(self, name, module=None):
        self.name = name
        self.props = Props()
        self.always = False
        self.size = 0
        self.module = module
        self._out_edges = []

    def __str__(self):
        return f"node:{self.name}"

    def __repr__(self):
        txt = f"{str(self)} with {len(self._out_edges)} out edges"
        if self.module is not None:
            txt += f", module={self.module}"
        return txt

    def add_edge(self, edge):
        if edge.from_node is not self:
            raise MalformedEdgeError(f"Invalid edge for node {self.name}")
        self._out_edges.append(edge)

    def get_out_edges(self):
        return list(self._out_edges)

    def bfs(self):
        """Breadth-first walk from this node.

        Returns the nodes reachable from here, this node first, in the order
        they were visited. Every node appears once.
        """
        seen = set()
        visited = []
        to_process = deque([self])
        while to_process:
            currnode = to_process.popleft()
            if currnode.name in seen:
                continue
            seen.add(currnode.name)
            visited.append(currnode)
            for edge in currnode._out_edges:
                to_process.append(edge.to_node)
        return visited

    def to_graphviz(self):
        comment = ""
        if self.size != 0:
            comment = f"  // size={self.size}"
        return f"{quote(self.name)} [ {self.props.to_graphviz()} ]{comment}\n"


class Edge:
    __slots__ = ["from_node", "to_node", "props", "indirect"]

    def __init__(self, from_node, to_node):
        assert isinstance(from_node, Node)
        assert isinstance(to_node, Node)
        self.from_node = from_node
        self.to_node = to_node
        self.props = Props()
        self.indirect = True

    def __str__(self):
        return f"edge from {self.from_node} to {self.to_node}"

    def __repr__(self):
        if self.indirect:
            return f"{self}, indirect"
        return str(self)

    def to_graphviz(self):
        return (
            f"{quote(self.from_node.name)} -> {quote(self.to_node.name)} "
            f"[ {self.props.to_graphviz()} ]\n"
        )


class Legend:
    """Display-only entry naming a source module."""

    __slots__ = ["name", "module", "props"]

    def __init__(self, name, module):
        self.name = name
        self.module = module
        self.props = Props()

    def __str__(self):
        return f"legend:{self.name}@{self.module}"

    __repr__ = __str__

    def fillcolor(self):
        return self.props.get("fillcolor", palette_index(self.module))


class Graph:
    def __init__(self):
        self._nodes = {}
        self._legends = []
        self.nodeprops = Props()

    def __str__(self):
        return f"call graph with {len(self._nodes)} nodes"

    def __iter__(self):
        return iter(self._nodes.values())

    def __len__(self):
        return len(self._nodes)

    # Nodes and edges
    def has_node(self, name):
        return name in self._nodes

    def create_node(self, name, module=None):
        if self.has_node(name):
            raise DuplicateNodeError(f"Node already exists: {name}")
        newnode = Node(name, module)
        self._nodes[name] = newnode
        return newnode

    def get_node(self, name):
        try:
            return self._nodes[name]
        except KeyError:
            raise NodeLookupError(f"No such node: {name}") from None

    def get_nodes(self):
        return list(self._nodes.values())

    def create_edge(self, from_node, to_node):
        newedge = Edge(from_node, to_node)
        from_node.add_edge(newedge)
        return newedge

    def find_all_edges(self):
        edges = []
        for node in self._nodes.values():
            edges.extend(node.get_out_edges())
        return edges

    def add_legend(self, name, module):
        legend = Legend(name, module)
        self._legends.append(legend)
        return legend

    def get_legends(self):
        return list(self._legends)

    # Traversal
    def bfs(self, start):
        return start.bfs()

    def find_edges_of_cycles(self):
        """Edges that lead back to the root of some breadth-first walk.

        Every node is used as a root once; an edge closing a loop through
        several roots is reported once per root.
        """
        edges_of_cycles = []
        for startnode in self._nodes.values():
            seen = set()
            to_process = deque([startnode])
            while to_process:
                currnode = to_process.popleft()
                if currnode.name in seen:
                    continue
                seen.add(currnode.name)
                for edge in currnode.get_out_edges():
                    to_process.append(edge.to_node)
                    if edge.to_node is startnode:
                        edges_of_cycles.append(edge)
        return edges_of_cycles

    # Graphviz output
    def _legends_to_graphviz(self):
        if not self._legends:
            return ""
        out = "subgraph cluster_legend {\n"
        out += '  rank = "source"; style = "filled"; fillcolor = "#EEEEEE";\n'
        out += '  node [ style = "filled"; shape = "note"; ]\n'
        for idx, legend in enumerate(self._legends):
            out += (
                f'  "cluster_legend_{idx}" [ label = {quote(legend.name)}; '
                f"fillcolor = {quote(legend.fillcolor())}; ]\n"
            )
        out += "}\n"
        return out

    def to_graphviz(self):
        out = "strict digraph {\n"
        out += f"node [ {self.nodeprops.to_graphviz()} ]\n"
        out += self._legends_to_graphviz()
        for node in self._nodes.values():
            out += node.to_graphviz()
        for node in self._nodes.values():
            for edge in node.get_out_edges():
                out += edge.to_graphviz()
        out += "}\n"
        return out

    def _build_visual(self, format="svg"):
        return gv.Source(self.to_graphviz(), format=format)

    def build_visual(self, filepath, format="svg", show=False):
        graph = self._build_visual(format)
        return graph.render(filepath, view=show, cleanup=True)
