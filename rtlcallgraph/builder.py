"""Call graph builder for GCC RTL expand dumps.

Each dump describes one compiled module. The builder makes two passes over
all modules: the first registers every defined function as a node and counts
its instructions, the second adds an edge for every function referenced from
inside another function's body. Names defined in several modules end up in a
single node, since the dumps carry no linkage information.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .demangle import Demangler
from .model import Graph, Node

logger = logging.getLogger(__name__)

FUNC_DEF_RE = re.compile(r"^;; Function .*? \(([^,]+), funcdef_no=")
FUNC_REFER_RE = re.compile(r'symbol_ref:DI \("([^"]+)"\) \[[^\]]+\]  <function_decl ')
CALL_RE = re.compile(r"\s+\(call ")
INSN_RE = re.compile(r"^\((insn|call_insn) ")
DUMP_SUFFIX_RE = re.compile(r"(\.\d+r)?\.expand$")


@dataclass
class ReaderConfig:
    ignore: str = r"(^_GLOBAL_|^__static_initialization_|\bstd::)"
    always_on_graph: List[str] = field(
        default_factory=lambda: ["fopen", "fclose", "malloc", "free", "exit"]
    )
    translate: Dict[str, str] = field(
        default_factory=lambda: {"calloc": "malloc", "realloc": "malloc"}
    )
    demangle_names: bool = True


class ScanState:
    """Function the line scanner is currently inside of, if any."""

    __slots__ = ["function"]

    def __init__(self):
        self.function = None

    def __repr__(self):
        if self.function is None:
            return "NoCurrentFunction"
        return f"InFunction({self.function.name})"

    def enter(self, node: Node):
        self.function = node

    def leave(self):
        self.function = None

    def in_function(self) -> bool:
        return self.function is not None


class CallGraphBuilder:
    def __init__(self, config: Optional[ReaderConfig] = None, demangler=None):
        self.config = config or ReaderConfig()
        self.ignore_re = re.compile(self.config.ignore)
        self.demangler = demangler or Demangler()
        self.graph = None

    # Line matching
    def demangle(self, name: str) -> str:
        if self.config.demangle_names:
            return self.demangler(name)
        return name

    def translate(self, name: str) -> str:
        return self.config.translate.get(name, name)

    def ignore_func(self, name: str) -> bool:
        return self.ignore_re.search(name) is not None

    def match_func_def(self, line: str) -> Optional[str]:
        m = FUNC_DEF_RE.search(line)
        if m is None:
            return None
        return self.demangle(m.group(1))

    def match_func_refer(self, line: str) -> Optional[str]:
        m = FUNC_REFER_RE.search(line)
        if m is None:
            return None
        return self.demangle(m.group(1))

    def match_call(self, line: str) -> bool:
        return CALL_RE.search(line) is not None

    def match_insn(self, line: str) -> bool:
        return INSN_RE.search(line) is not None

    # Pass 1: definitions
    def add_always_functions(self):
        for name in self.config.always_on_graph:
            node = self.graph.create_node(name)
            node.always = True

    def scan_definition_line(self, state: ScanState, line: str, module: int) -> int:
        """Feed one line to the definition pass.

        Returns the number of instructions the line adds to the module total.
        """
        name = self.match_func_def(line)
        if name is not None:
            state.leave()
            if self.ignore_func(name) or name in self.config.always_on_graph:
                return 0
            if self.graph.has_node(name):
                state.enter(self.graph.get_node(name))
            else:
                state.enter(self.graph.create_node(name, module))
            return 0
        if self.match_insn(line):
            if state.in_function():
                state.function.size += 1
            return 1
        return 0

    def add_functions(self, lines: Sequence[str], module: int) -> int:
        state = ScanState()
        sizesum = 0
        for line in lines:
            sizesum += self.scan_definition_line(state, line, module)
        return sizesum

    def add_module(self, filename: str, module: int):
        label = os.path.basename(DUMP_SUFFIX_RE.sub("", filename))
        return self.graph.add_legend(label, module)

    # Pass 2: references and calls
    def scan_call_line(self, state: ScanState, line: str):
        """Feed one line to the call pass; returns the new edge, if any."""
        name = self.match_func_def(line)
        if name is not None:
            state.leave()
            # filtered out in the definition pass
            if self.graph.has_node(name):
                state.enter(self.graph.get_node(name))
            return None
        name = self.match_func_refer(line)
        if name is None:
            return None
        name = self.translate(name)
        if not state.in_function() or not self.graph.has_node(name):
            return None
        edge = self.graph.create_edge(state.function, self.graph.get_node(name))
        if self.match_call(line):
            edge.indirect = False
        return edge

    def add_calls(self, lines: Sequence[str]):
        state = ScanState()
        for line in lines:
            self.scan_call_line(state, line)

    # Build methods
    def build(self, modules: Sequence[Tuple[str, Sequence[str]]]) -> Graph:
        """Build a :class:`Graph` from ``(filename, lines)`` pairs."""
        modules = list(modules)
        self.graph = Graph()
        self.add_always_functions()

        for module, (filename, lines) in enumerate(modules, start=1):
            sizesum = self.add_functions(lines, module)
            self.add_module(filename, module)
            logger.debug("Module %d (%s): %d instructions", module, filename, sizesum)

        for filename, lines in modules:
            self.add_calls(lines)

        logger.info(
            "Built call graph from %d modules: %d functions, %d edges",
            len(modules), len(self.graph), len(self.graph.find_all_edges()),
        )
        return self.graph

    def build_from_src(self, filename: str, src: str) -> Graph:
        return self.build([(filename, src.splitlines())])

    def build_from_files(self, filepaths: Sequence[str]) -> Graph:
        modules = []
        for filepath in filepaths:
            with open(filepath, "r") as dump_file:
                modules.append((filepath, dump_file.read().splitlines()))
        return self.build(modules)
