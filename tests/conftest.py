"""Pytest configuration and shared fixtures.

This module contains fake capability sets and tree builders used across
all test modules.
"""

import asyncio
import errno
import os
import stat
from collections.abc import Callable, Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest
from rimraf.core.capabilities import AsyncFileSystem, FileSystem
from rimraf.core.retry import EMFILE_COUNTER


class MemoryFileSystem(FileSystem):
    """In-memory tree with injectable failures.

    Entries are keyed by their full path and are either "dir" or "file".
    Every primitive call is recorded in ``calls`` as ``(op, path)``.
    Errors mimic Linux: unlink on a directory raises EISDIR, rmdir on a
    file raises ENOTDIR.
    """

    def __init__(self, dirs: tuple[str, ...] = (), files: tuple[str, ...] = ()) -> None:
        self.entries: dict[str, str] = {d: "dir" for d in dirs}
        self.entries.update({f: "file" for f in files})
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[tuple[str, str], list[object]] = {}
        self._global_failure: list[object] | None = None
        self._vanishing: set[str] = set()

    def vanish_on_rmdir(self, path: str) -> None:
        """Make the first rmdir of ``path`` delete its subtree but report ENOTEMPTY.

        Mimics another process removing the directory concurrently.
        """
        self._vanishing.add(path)

    def fail(self, op: str, path: str, code: int, times: int | None = 1) -> None:
        """Make ``op`` on ``path`` raise ``code``; ``times=None`` means always."""
        self._failures[(op, path)] = [code, times]

    def fail_all(self, code: int, times: int | None) -> None:
        """Make the next ``times`` primitive calls raise ``code``, whatever they are."""
        self._global_failure = [code, times]

    def ops(self, op: str) -> list[str]:
        """Paths ``op`` was called on, in call order."""
        return [path for name, path in self.calls if name == op]

    def _consume(self, failure: list[object] | None, path: str) -> None:
        if failure is None:
            return
        code, times = failure
        if times is not None:
            if times <= 0:
                return
            failure[1] = times - 1
        raise OSError(code, os.strerror(code), path)

    def _enter(self, op: str, path: str) -> str:
        self.calls.append((op, path))
        self._consume(self._global_failure, path)
        self._consume(self._failures.get((op, path)), path)
        if path not in self.entries:
            raise OSError(errno.ENOENT, os.strerror(errno.ENOENT), path)
        return self.entries[path]

    def _children(self, path: str) -> list[str]:
        prefix = path + os.sep
        return [
            p[len(prefix) :]
            for p in self.entries
            if p.startswith(prefix) and os.sep not in p[len(prefix) :]
        ]

    def _stat(self, kind: str) -> SimpleNamespace:
        mode = stat.S_IFDIR | 0o755 if kind == "dir" else stat.S_IFREG | 0o644
        return SimpleNamespace(st_mode=mode)

    def unlink(self, path: str) -> None:
        if self._enter("unlink", path) == "dir":
            raise OSError(errno.EISDIR, os.strerror(errno.EISDIR), path)
        del self.entries[path]

    def chmod(self, path: str, mode: int) -> None:
        self._enter("chmod", path)

    def stat(self, path: str) -> SimpleNamespace:  # type: ignore[override]
        return self._stat(self._enter("stat", path))

    def lstat(self, path: str) -> SimpleNamespace:  # type: ignore[override]
        return self._stat(self._enter("lstat", path))

    def rmdir(self, path: str) -> None:
        if self._enter("rmdir", path) == "file":
            raise OSError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
        if path in self._vanishing:
            self._vanishing.discard(path)
            prefix = path + os.sep
            for entry in [p for p in self.entries if p == path or p.startswith(prefix)]:
                del self.entries[entry]
            raise OSError(errno.ENOTEMPTY, os.strerror(errno.ENOTEMPTY), path)
        if self._children(path):
            raise OSError(errno.ENOTEMPTY, os.strerror(errno.ENOTEMPTY), path)
        del self.entries[path]

    def readdir(self, path: str) -> list[str]:
        if self._enter("readdir", path) == "file":
            raise OSError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
        return self._children(path)


class InlineAsyncFileSystem(AsyncFileSystem):
    """Async capability set calling a blocking one on the loop thread.

    Each call yields to the event loop first, so concurrent removals
    interleave deterministically without worker threads.
    """

    def __init__(self, sync: FileSystem) -> None:
        super().__init__(sync)
        self.in_flight = 0
        self.max_in_flight = 0

    async def _call(self, fn: Callable[..., object], *args: object) -> object:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            return fn(*args)
        finally:
            self.in_flight -= 1

    async def unlink(self, path: str) -> None:
        await self._call(self._sync.unlink, path)

    async def chmod(self, path: str, mode: int) -> None:
        await self._call(self._sync.chmod, path, mode)

    async def stat(self, path: str) -> os.stat_result:
        return await self._call(self._sync.stat, path)  # type: ignore[return-value]

    async def lstat(self, path: str) -> os.stat_result:
        return await self._call(self._sync.lstat, path)  # type: ignore[return-value]

    async def rmdir(self, path: str) -> None:
        await self._call(self._sync.rmdir, path)

    async def readdir(self, path: str) -> list[str]:
        return await self._call(self._sync.readdir, path)  # type: ignore[return-value]


def fill(target: Path, depth: int = 3, files: int = 4, folders: int = 2) -> None:
    """Populate a directory tree with files, symlinks and nested folders.

    Every level gets ``files`` regular files, a valid and a dangling
    symlink, and a file whose name looks like a glob pattern.
    """
    target.mkdir(parents=True, exist_ok=True)
    for f in range(files, 0, -1):
        (target / f"f-{depth}-{f}").write_text("")
    (target / f"link-{depth}-good").symlink_to(f"f-{depth}-1")
    (target / f"link-{depth}-bad").symlink_to("does-not-exist")
    (target / "[a-z0-9].txt").write_text("")

    depth -= 1
    if depth <= 0:
        return
    for f in range(folders, 0, -1):
        (target / f"folder-{depth}-{f}").mkdir()
        fill(target / f"d-{depth}-{f}", depth, files, folders)


@pytest.fixture(autouse=True)
def reset_emfile_counter() -> Iterator[None]:
    """Keep the process-wide EMFILE counter from leaking between tests."""
    EMFILE_COUNTER.reset()
    yield
    EMFILE_COUNTER.reset()


@pytest.fixture
def memory_fs() -> Callable[..., MemoryFileSystem]:
    """Factory for in-memory filesystems."""
    return MemoryFileSystem


@pytest.fixture
def inline_afs() -> Callable[[FileSystem], InlineAsyncFileSystem]:
    """Factory for loop-thread async wrappers around a blocking fake."""
    return InlineAsyncFileSystem


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """A populated directory tree under tmp_path."""
    root = tmp_path / "target"
    fill(root)
    return root
