"""
Exceptions raised while building and rendering call graphs.
"""


class CallGraphError(Exception):
    """Base exception class for call graph errors."""
    pass


class DuplicateNodeError(CallGraphError):
    """Raised when a node name is registered twice."""
    pass


class NodeLookupError(CallGraphError, LookupError):
    """Raised when looking up a node that does not exist."""
    pass


class MalformedEdgeError(CallGraphError):
    """Raised when an edge is attached to a node it does not start from."""
    pass


class ExternalToolError(CallGraphError):
    """Raised when an external helper program fails."""

    def __init__(self, message: str, returncode: int = None):
        super().__init__(message)
        self.returncode = returncode
