"""Target resolution.

Turns a caller-supplied path or pattern into the ordered list of paths
to remove. Pattern matching is delegated to :mod:`glob`.
"""

import asyncio
import glob
import logging

from rimraf.core.capabilities import AsyncFileSystem, FileSystem
from rimraf.core.options import GlobOptions

logger = logging.getLogger(__name__)


def has_pattern(path: str) -> bool:
    """Check whether a path contains glob metacharacters."""
    return glob.has_magic(path)


def expand(pattern: str, options: GlobOptions) -> list[str]:
    """Expand a pattern into matching paths.

    Results keep filesystem order and an empty match is not an error.

    Args:
        pattern: Glob pattern.
        options: Expansion options.

    Returns:
        Matching paths, possibly empty.
    """
    matches = glob.glob(
        pattern,
        recursive=options.recursive,
        include_hidden=options.include_hidden,
    )
    logger.debug("Pattern %s matched %d paths", pattern, len(matches))
    return matches


def resolve_targets(path: str, options: GlobOptions | None, fs: FileSystem) -> list[str]:
    """Resolve a path or pattern into concrete targets.

    A literal path is returned as is when expansion is disabled or the
    path has no metacharacters. An entry whose name only looks like a
    pattern (``[a-z0-9].txt``) is also taken literally when it exists.

    Args:
        path: Path or pattern given by the caller.
        options: Expansion options, or None to disable expansion.
        fs: Capability set used to check for a literal entry.

    Returns:
        Paths to remove, possibly empty.
    """
    if options is None or not has_pattern(path):
        return [path]
    try:
        fs.lstat(path)
    except OSError:
        return expand(path, options)
    return [path]


async def resolve_targets_async(
    path: str, options: GlobOptions | None, afs: AsyncFileSystem
) -> list[str]:
    """Async counterpart of :func:`resolve_targets`.

    Expansion runs in a worker thread.
    """
    if options is None or not has_pattern(path):
        return [path]
    try:
        await afs.lstat(path)
    except OSError:
        return await asyncio.to_thread(expand, path, options)
    return [path]
