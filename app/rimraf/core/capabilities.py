"""Pluggable filesystem capability sets.

The removal engine never touches ``os`` directly. It goes through one of
two capability sets, each exposing the six primitives the state machine
needs: unlink, chmod, stat, lstat, rmdir and readdir.

Override a primitive by subclassing and replacing the method; every slot
not overridden falls back to the real filesystem.

Example:
    >>> class KeepLogs(FileSystem):
    ...     def unlink(self, path: str) -> None:
    ...         if not path.endswith(".log"):
    ...             super().unlink(path)
"""

import asyncio
import os


class FileSystem:
    """Blocking filesystem primitives backed by ``os``.

    Every method raises OSError on failure; the engine classifies it.
    """

    def unlink(self, path: str) -> None:
        """Remove a non-directory entry."""
        os.unlink(path)

    def chmod(self, path: str, mode: int) -> None:
        """Change permission bits of an entry."""
        os.chmod(path, mode)

    def stat(self, path: str) -> os.stat_result:
        """Stat an entry, following symlinks."""
        return os.stat(path)

    def lstat(self, path: str) -> os.stat_result:
        """Stat an entry without following symlinks."""
        return os.lstat(path)

    def rmdir(self, path: str) -> None:
        """Remove an empty directory."""
        os.rmdir(path)

    def readdir(self, path: str) -> list[str]:
        """List entry names of a directory, in filesystem order."""
        return os.listdir(path)


class AsyncFileSystem:
    """Non-blocking filesystem primitives.

    The default implementation delegates each call to a blocking
    FileSystem via :func:`asyncio.to_thread`, so the event loop is never
    blocked by disk I/O.

    Attributes:
        _sync: Blocking capability set the calls are delegated to.
    """

    def __init__(self, sync: FileSystem | None = None) -> None:
        """Initialize the async capability set.

        Args:
            sync: Blocking primitives to run in worker threads.
                Defaults to the real filesystem.
        """
        self._sync = sync or FileSystem()

    async def unlink(self, path: str) -> None:
        await asyncio.to_thread(self._sync.unlink, path)

    async def chmod(self, path: str, mode: int) -> None:
        await asyncio.to_thread(self._sync.chmod, path, mode)

    async def stat(self, path: str) -> os.stat_result:
        return await asyncio.to_thread(self._sync.stat, path)

    async def lstat(self, path: str) -> os.stat_result:
        return await asyncio.to_thread(self._sync.lstat, path)

    async def rmdir(self, path: str) -> None:
        await asyncio.to_thread(self._sync.rmdir, path)

    async def readdir(self, path: str) -> list[str]:
        return await asyncio.to_thread(self._sync.readdir, path)
