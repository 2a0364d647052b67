"""C++ symbol demangling through ``c++filt``."""

import logging
import subprocess

from .exceptions import ExternalToolError

logger = logging.getLogger(__name__)

MANGLED_PREFIX = "_Z"


def cxxfilt(mangled: str, program: str = "c++filt") -> str:
    """Demangle one symbol by running ``program`` on it."""
    try:
        proc = subprocess.run(
            [program, mangled], capture_output=True, text=True, check=False
        )
    except OSError as e:
        raise ExternalToolError(f"Cannot run {program}: {e}") from e
    if proc.returncode != 0:
        raise ExternalToolError(
            f"Cannot demangle name: {mangled}", returncode=proc.returncode
        )
    return proc.stdout.strip()


class Demangler:
    """Memoizing front end for a demangling function.

    Names without the Itanium ``_Z`` prefix are returned unchanged and never
    reach the backend. Each mangled name is looked up at most once.
    """

    def __init__(self, backend=None):
        self.backend = backend or cxxfilt
        self.cache = {}

    def __call__(self, name: str) -> str:
        if not name.startswith(MANGLED_PREFIX):
            return name
        if name not in self.cache:
            demangled = self.backend(name)
            logger.debug("Demangled %s -> %s", name, demangled)
            self.cache[name] = demangled
        return self.cache[name]
