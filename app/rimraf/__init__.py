"""rimraf - recursive path removal with `rm -rf` semantics.

Exposes a blocking entry point (:func:`rimraf_sync`) and an asyncio one
(:func:`rimraf`) that share a single removal state machine.
"""

__version__ = "0.1.0"

from rimraf.api import rimraf, rimraf_sync
from rimraf.core.capabilities import AsyncFileSystem, FileSystem
from rimraf.core.errors import ErrorKind, RimrafError, classify
from rimraf.core.options import GlobOptions, RimrafOptions

__all__ = [
    "AsyncFileSystem",
    "ErrorKind",
    "FileSystem",
    "GlobOptions",
    "RimrafError",
    "RimrafOptions",
    "__version__",
    "classify",
    "rimraf",
    "rimraf_sync",
]
