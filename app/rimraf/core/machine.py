"""Single-path removal state machine.

The machine decides, for one path, whether it is a file, a directory or
already gone, and walks it through unlink/rmdir/chmod until it is removed
or an error has to be surfaced.

It performs no I/O itself. :func:`remove_path` returns a generator that
yields :class:`Call` requests; a driver executes each request against a
capability set and sends the result back, or throws the OSError the
primitive raised into the generator. The same machine therefore serves
the blocking and the asyncio strategy, which only differ in how they
execute calls and how they fan out over children.

Two guesses are in play. An entry is assumed to be a file unless lstat
says otherwise, since most entries are files; if unlink then reports a
directory the machine switches to the directory path. In the other
direction, if rmdir reports that the entry is not a directory, the error
that sent the machine down the directory path is surfaced instead.
"""

import logging
import stat
import sys
from collections.abc import Generator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from rimraf.core.errors import ErrorKind, classify

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"

# Windows releases handles lazily, so a just-emptied directory may still
# report NOT_EMPTY for a while
WINDOWS_RMDIR_ATTEMPTS = 100

FIX_PERM_MODE = 0o666

# rmdir outcomes that mean the children have to go first
_RMKIDS_KINDS = frozenset(
    {ErrorKind.NOT_EMPTY, ErrorKind.ALREADY_EXISTS, ErrorKind.PERMISSION_DENIED}
)


class Op(str, Enum):
    """Request kinds a machine can yield.

    The primitive values match the method names of the capability sets.
    """

    LSTAT = "lstat"
    STAT = "stat"
    UNLINK = "unlink"
    RMDIR = "rmdir"
    READDIR = "readdir"
    CHMOD = "chmod"
    REMOVE_CHILDREN = "remove_children"


class State(str, Enum):
    """States of the removal machine."""

    START = "start"
    UNLINK = "unlink"
    FIX_PERM = "fix_perm"
    RMDIR = "rmdir"
    RMKIDS = "rmkids"
    FINAL_RMDIR = "final_rmdir"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class Call:
    """A request for the driver.

    Attributes:
        op: What to do.
        path: Path the request applies to.
        args: Extra arguments: the mode for CHMOD, the child names for
            REMOVE_CHILDREN.
    """

    op: Op
    path: str
    args: tuple[Any, ...] = ()


Machine = Generator[Call, Any, None]


def is_directory(st: Any) -> bool:
    """Check whether a stat result describes a directory."""
    return stat.S_ISDIR(st.st_mode)


def rmdir_attempts(windows: bool | None = None) -> int:
    """Number of final rmdir attempts after the children are gone."""
    if windows is None:
        windows = IS_WINDOWS
    return WINDOWS_RMDIR_ATTEMPTS if windows else 1


def remove_path(
    path: str, windows: bool | None = None, retry_final_rmdir: bool = True
) -> Machine:
    """Build the removal machine for one path.

    The generator returns normally once the path is gone (including when
    it never existed) and raises the OSError to surface otherwise.

    Args:
        path: Path to remove.
        windows: Whether Windows quirks apply. Defaults to the running platform.
        retry_final_rmdir: Whether the rmdir after emptying a directory is
            retried on Windows. The concurrent strategy tries it once.

    Returns:
        Generator yielding Call requests.
    """
    if windows is None:
        windows = IS_WINDOWS
    final_attempts = rmdir_attempts(windows) if retry_final_rmdir else 1

    state = State.START
    # Error that sent the machine down a fix-up or directory path
    original: OSError | None = None
    # FIX_PERM leaves the last unlink unguarded
    guarded_unlink = True

    while state is not State.DONE:
        logger.debug("%s: %s", path, state.value)

        if state is State.START:
            try:
                st = yield Call(Op.LSTAT, path)
            except OSError as err:
                kind = classify(err)
                if kind is ErrorKind.NOT_FOUND:
                    state = State.DONE
                elif kind is ErrorKind.PERMISSION_DENIED and windows:
                    original = err
                    state = State.FIX_PERM
                else:
                    # Nothing known about the entry; guess it is a file
                    state = State.UNLINK
                continue
            state = State.RMDIR if is_directory(st) else State.UNLINK

        elif state is State.UNLINK:
            try:
                yield Call(Op.UNLINK, path)
            except OSError as err:
                kind = classify(err)
                if kind is ErrorKind.NOT_FOUND:
                    state = State.DONE
                elif not guarded_unlink:
                    raise
                elif kind is ErrorKind.PERMISSION_DENIED:
                    original = err
                    # SunOS reports EPERM when unlinking a directory
                    state = State.FIX_PERM if windows else State.RMDIR
                elif kind is ErrorKind.IS_A_DIRECTORY:
                    original = err
                    state = State.RMDIR
                else:
                    raise
                continue
            state = State.DONE

        elif state is State.FIX_PERM:
            assert original is not None
            try:
                yield Call(Op.CHMOD, path, (FIX_PERM_MODE,))
            except OSError as err:
                if classify(err) is ErrorKind.NOT_FOUND:
                    state = State.DONE
                    continue
                raise original from err
            try:
                st = yield Call(Op.STAT, path)
            except OSError as err:
                if classify(err) is ErrorKind.NOT_FOUND:
                    state = State.DONE
                    continue
                raise original from err
            if is_directory(st):
                state = State.RMDIR
            else:
                guarded_unlink = False
                state = State.UNLINK

        elif state is State.RMDIR:
            try:
                yield Call(Op.RMDIR, path)
            except OSError as err:
                kind = classify(err)
                if kind is ErrorKind.NOT_FOUND:
                    state = State.DONE
                elif kind in _RMKIDS_KINDS:
                    state = State.RMKIDS
                elif kind is ErrorKind.NOT_A_DIRECTORY and original is not None:
                    raise original from err
                else:
                    raise
                continue
            state = State.DONE

        elif state is State.RMKIDS:
            try:
                names = yield Call(Op.READDIR, path)
            except OSError as err:
                # Removed by someone else since the rmdir attempt
                if classify(err) is ErrorKind.NOT_FOUND:
                    state = State.DONE
                    continue
                raise
            if names:
                yield Call(Op.REMOVE_CHILDREN, path, tuple(names))
            state = State.FINAL_RMDIR

        elif state is State.FINAL_RMDIR:
            attempts = final_attempts
            for attempt in range(1, attempts + 1):
                try:
                    yield Call(Op.RMDIR, path)
                except OSError as err:
                    if classify(err) is ErrorKind.NOT_FOUND:
                        break
                    if attempt == attempts:
                        raise
                    logger.debug("%s: rmdir attempt %d failed: %s", path, attempt, err)
                    continue
                break
            state = State.DONE
