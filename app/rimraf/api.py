"""Public entry points.

``rimraf_sync`` removes targets with the blocking strategy; ``rimraf``
removes them concurrently on the running event loop. Both resolve glob
patterns first and treat missing paths as already removed.
"""

import logging
import os
from collections.abc import Iterable
from typing import TypeAlias

from rimraf.core.concurrent import ConcurrentRemover
from rimraf.core.errors import RimrafError
from rimraf.core.options import RimrafOptions
from rimraf.core.resolver import resolve_targets, resolve_targets_async
from rimraf.core.sequential import SequentialRemover

logger = logging.getLogger(__name__)

StrPath: TypeAlias = str | os.PathLike[str]


def _normalize_paths(paths: StrPath | Iterable[StrPath]) -> list[str]:
    """Turn the paths argument into a list of non-empty strings.

    Raises:
        TypeError: If a path is neither a string nor path-like.
        ValueError: If no path is given or a path is empty.
    """
    if isinstance(paths, (str, bytes, os.PathLike)) or not isinstance(paths, Iterable):
        items: list[object] = [paths]
    else:
        items = list(paths)

    if not items:
        msg = "rimraf: missing path"
        raise ValueError(msg)

    result: list[str] = []
    for item in items:
        if not isinstance(item, (str, os.PathLike)):
            msg = f"rimraf: path should be a string, got {type(item).__name__}"
            raise TypeError(msg)
        path = os.fspath(item)
        if not isinstance(path, str):
            msg = "rimraf: path should be a string, got bytes"
            raise TypeError(msg)
        if not path:
            msg = "rimraf: missing path"
            raise ValueError(msg)
        result.append(path)
    return result


def rimraf_sync(paths: StrPath | Iterable[StrPath], options: RimrafOptions | None = None) -> None:
    """Remove paths like ``rm -rf``, blocking until done.

    Args:
        paths: A path or glob pattern, or several of them.
        options: Removal options. Defaults to RimrafOptions().

    Raises:
        RimrafError: With the first error that could not be resolved.
        TypeError: If a path is not a string.
        ValueError: If a path is empty.
    """
    opts = options or RimrafOptions()
    targets: list[str] = []
    for path in _normalize_paths(paths):
        targets.extend(resolve_targets(path, opts.glob, opts.fs))

    if not targets:
        logger.debug("Nothing to remove")
        return

    try:
        SequentialRemover(opts).remove(targets)
    except OSError as err:
        raise RimrafError.from_os_error(err) from err


async def rimraf(paths: StrPath | Iterable[StrPath], options: RimrafOptions | None = None) -> None:
    """Remove paths like ``rm -rf``, concurrently.

    Every target and every directory entry is removed in its own task.
    The call completes once all of them are done.

    Args:
        paths: A path or glob pattern, or several of them.
        options: Removal options. Defaults to RimrafOptions().

    Raises:
        RimrafError: With the first error that could not be resolved.
        TypeError: If a path is not a string.
        ValueError: If a path is empty.
    """
    opts = options or RimrafOptions()
    targets: list[str] = []
    for path in _normalize_paths(paths):
        targets.extend(await resolve_targets_async(path, opts.glob, opts.afs))

    if not targets:
        logger.debug("Nothing to remove")
        return

    try:
        await ConcurrentRemover(opts).remove(targets)
    except OSError as err:
        raise RimrafError.from_os_error(err) from err
