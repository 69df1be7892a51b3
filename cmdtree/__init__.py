"""
cmdtree: hierarchical command dispatch with generated, word-wrapped help.

Build a tree of Command nodes (each with its own options, children, topics
and handler) once, then execute argument vectors against it:

    from cmdtree import Command, Flag, main

    program = Command("prog", short="Prog program.", children=[...])
    main(program)

Every command with children answers "help", "help <name>..." and
"help ..." (the whole tree). Usage failures are printed with the usage of
the failing command and raised as UsageError.
"""
from collections import namedtuple

__title__ = 'cmdtree'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .commands import *
from .faults import *
from .options import *

VersionInfo = namedtuple("VersionInfo", ("major", "minor", "micro", "releaselevel", "serial", "metadata"))

version_info = VersionInfo(*map(int, __version__.split(".")), "final", 0, "")

__all__ = (
    "__version__",
    "version_info",
    *commands.__all__,  # type: ignore[name-defined]
    *faults.__all__,  # type: ignore[name-defined]
    *options.__all__,  # type: ignore[name-defined]
)
