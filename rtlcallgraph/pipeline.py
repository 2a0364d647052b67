"""Read RTL dumps, annotate the call graph and write it out."""

import logging
import os

from .annotator import Annotator
from .builder import CallGraphBuilder

logger = logging.getLogger(__name__)


def create_graph(filenames, config=None, demangler=None):
    """Build and annotate the call graph of the given ``.expand`` files."""
    graph = CallGraphBuilder(config, demangler).build_from_files(filenames)
    return Annotator().annotate(graph)


def write_dot(graph, filepath):
    # render first so that a failure leaves no file behind
    text = graph.to_graphviz()
    with open(filepath, "w") as dot_file:
        dot_file.write(text)
    logger.info("Wrote %s", filepath)
    return filepath


DOT_SUFFIXES = (".dot", ".gv")


def output_format(filepath):
    """Split ``filepath`` into the render target name and the Graphviz format."""
    name, ext = os.path.splitext(filepath)
    if not ext:
        return filepath, "svg"
    return name, ext[1:]


def save(graph, filepath):
    """Write DOT text for ``.dot``/``.gv`` paths, render anything else."""
    if filepath.endswith(DOT_SUFFIXES):
        return write_dot(graph, filepath)
    name, fmt = output_format(filepath)
    rendered = graph.build_visual(name, format=fmt, show=False)
    logger.info("Rendered %s", rendered)
    return rendered
