"""Removal engine.

This package holds the error taxonomy, the capability sets, the
single-path state machine, the retry policy and the two strategies
that drive the machine over a tree.
"""

from rimraf.core.capabilities import AsyncFileSystem, FileSystem
from rimraf.core.concurrent import ConcurrentRemover
from rimraf.core.errors import ErrorKind, RimrafError, classify
from rimraf.core.options import GlobOptions, RimrafOptions
from rimraf.core.retry import EMFILE_COUNTER, EmfileCounter, ErrorState, RetryPolicy, RetryState
from rimraf.core.sequential import SequentialRemover

__all__ = [
    "EMFILE_COUNTER",
    "AsyncFileSystem",
    "ConcurrentRemover",
    "EmfileCounter",
    "ErrorKind",
    "ErrorState",
    "FileSystem",
    "GlobOptions",
    "RetryPolicy",
    "RetryState",
    "RimrafError",
    "RimrafOptions",
    "SequentialRemover",
    "classify",
]
