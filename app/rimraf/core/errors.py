"""Error taxonomy for filesystem removal.

Every OSError raised by a capability is classified into one of a small
set of abstract kinds. The state machine and the retry policy only ever
branch on these kinds, never on raw errno values.
"""

import errno
import sys
from enum import Enum


class ErrorKind(str, Enum):
    """Abstract kind of a filesystem error.

    Attributes:
        NOT_FOUND: Entry does not exist. Always normalized to success.
        PERMISSION_DENIED: Operation not permitted (EPERM; EACCES on Windows).
        NOT_EMPTY: Directory still has entries.
        ALREADY_EXISTS: SunOS flavour of NOT_EMPTY for rmdir.
        IS_A_DIRECTORY: unlink() was called on a directory.
        NOT_A_DIRECTORY: rmdir() or readdir() was called on a non-directory.
        BUSY: Entry is locked by another process.
        TOO_MANY_OPEN_FILES: Process ran out of file descriptors.
        OTHER: Anything else. Fatal.
    """

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    NOT_EMPTY = "not_empty"
    ALREADY_EXISTS = "already_exists"
    IS_A_DIRECTORY = "is_a_directory"
    NOT_A_DIRECTORY = "not_a_directory"
    BUSY = "busy"
    TOO_MANY_OPEN_FILES = "too_many_open_files"
    OTHER = "other"


_ERRNO_KINDS: dict[int, ErrorKind] = {
    errno.ENOENT: ErrorKind.NOT_FOUND,
    errno.EPERM: ErrorKind.PERMISSION_DENIED,
    errno.ENOTEMPTY: ErrorKind.NOT_EMPTY,
    errno.EEXIST: ErrorKind.ALREADY_EXISTS,
    errno.EISDIR: ErrorKind.IS_A_DIRECTORY,
    errno.ENOTDIR: ErrorKind.NOT_A_DIRECTORY,
    errno.EBUSY: ErrorKind.BUSY,
    errno.EMFILE: ErrorKind.TOO_MANY_OPEN_FILES,
}

# Windows reports sharing violations and read-only entries as EACCES
if sys.platform == "win32":
    _ERRNO_KINDS[errno.EACCES] = ErrorKind.PERMISSION_DENIED


def classify(exc: BaseException) -> ErrorKind:
    """Classify an exception into an ErrorKind.

    Args:
        exc: Exception raised by a filesystem capability.

    Returns:
        The matching ErrorKind, or ErrorKind.OTHER for anything unknown.
    """
    if not isinstance(exc, OSError) or exc.errno is None:
        return ErrorKind.OTHER
    return _ERRNO_KINDS.get(exc.errno, ErrorKind.OTHER)


class RimrafError(OSError):
    """Raised when a removal cannot be completed.

    Keeps errno, strerror and filename of the underlying OSError so
    callers catching OSError keep working, and adds the classified kind.
    """

    @property
    def kind(self) -> ErrorKind:
        """Classified kind of this error."""
        return classify(self)

    @classmethod
    def from_os_error(cls, exc: OSError) -> "RimrafError":
        """Build a RimrafError mirroring an OSError.

        Args:
            exc: The error surfaced by the engine.

        Returns:
            RimrafError with the same errno, strerror and filename.
        """
        if exc.errno is None:
            return cls(str(exc))
        return cls(exc.errno, exc.strerror, exc.filename)
