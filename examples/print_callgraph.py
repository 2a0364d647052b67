#!/usr/bin/env python3
"""Create a function call graph from GCC RTL expand dumps.

Dumps are produced with ``gcc -c -fdump-rtl-expand file.c``.
"""

import argparse
import logging
import subprocess
import sys

import graphviz as gv

from rtlcallgraph import CallGraphError, ReaderConfig, create_graph, save

parser = argparse.ArgumentParser(description="Creates a function call graph for C/C++ code")
parser.add_argument("input_files", nargs="+", help="RTL dumps (*.expand)")
parser.add_argument("-o", "--output", default="output.svg",
                    help="Output file; .dot/.gv writes the graph text, anything else is rendered")
parser.add_argument("--no-demangle", dest="demangle", action="store_false",
                    help="Keep C++ names mangled")
parser.add_argument("-v", "--verbose", action="store_true")
args = parser.parse_args()

logging.basicConfig(
    level=logging.DEBUG if args.verbose else logging.INFO,
    format="%(levelname)s %(name)s: %(message)s",
)

try:
    graph = create_graph(args.input_files, ReaderConfig(demangle_names=args.demangle))
    save(graph, args.output)
except (CallGraphError, OSError, ValueError,
        gv.ExecutableNotFound, subprocess.CalledProcessError) as e:
    logging.error("%s", e)
    sys.exit(1)
