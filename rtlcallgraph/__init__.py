"""Function call graphs from GCC RTL expand dumps."""

from .annotator import Annotator
from .builder import CallGraphBuilder, ReaderConfig, ScanState
from .demangle import Demangler
from .exceptions import (
    CallGraphError,
    DuplicateNodeError,
    ExternalToolError,
    MalformedEdgeError,
    NodeLookupError,
)
from .model import Edge, Graph, Legend, Node, Props
from .pipeline import create_graph, output_format, save, write_dot

__all__ = [
    "Annotator",
    "CallGraphBuilder",
    "ReaderConfig",
    "ScanState",
    "Demangler",
    "CallGraphError",
    "DuplicateNodeError",
    "ExternalToolError",
    "MalformedEdgeError",
    "NodeLookupError",
    "Edge",
    "Graph",
    "Legend",
    "Node",
    "Props",
    "create_graph",
    "output_format",
    "save",
    "write_dot",
]
