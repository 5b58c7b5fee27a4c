"""Retry and backoff policy for top-level removals.

Two independent budgets bound the retrying:

- BUSY, NOT_EMPTY and PERMISSION_DENIED outcomes are retried per target,
  up to ``max_retries`` times, with a linear backoff of ``100 * tries`` units.
- TOO_MANY_OPEN_FILES outcomes share one process-wide counter. Each retry
  waits the current counter value and bumps it, so every removal in the
  process backs off together while file descriptors are scarce. Any
  successful removal resets the counter.

The shared counter is only safe because all removals run on one thread
(blocking calls, or cooperative tasks on one event loop). Callers driving
removals from several threads must serialize access to it.
"""

import logging
from dataclasses import dataclass

from rimraf.core.errors import ErrorKind, classify

logger = logging.getLogger(__name__)

# Outcomes that usually clear once another process lets go of the entry
BUSY_KINDS = frozenset({ErrorKind.BUSY, ErrorKind.NOT_EMPTY, ErrorKind.PERMISSION_DENIED})

BUSY_BACKOFF_STEP = 100


class EmfileCounter:
    """Backoff counter shared by every removal in the process.

    Attributes:
        value: Delay, in time units, the next EMFILE retry will wait.
    """

    def __init__(self) -> None:
        self.value = 0

    def bump(self) -> int:
        """Return the current delay and increase it for the next caller."""
        delay = self.value
        self.value += 1
        return delay

    def reset(self) -> None:
        """Drop the delay back to zero."""
        self.value = 0


EMFILE_COUNTER = EmfileCounter()


@dataclass(slots=True)
class RetryState:
    """Mutable retry bookkeeping for one top-level target.

    Attributes:
        busy_tries: Busy retries already scheduled for the target.
    """

    busy_tries: int = 0


@dataclass(slots=True)
class ErrorState:
    """First error seen across a batch of concurrent removals.

    Later errors never replace the first one.

    Attributes:
        error: The retained error, or None while everything succeeded.
    """

    error: OSError | None = None

    def record(self, error: OSError) -> bool:
        """Retain an error if none is retained yet.

        Args:
            error: Error reported by a removal.

        Returns:
            True if the error was retained, False if it was discarded.
        """
        if self.error is None:
            self.error = error
            return True
        return False


class RetryPolicy:
    """Decides whether and when a failed top-level removal is retried.

    Attributes:
        _max_retries: Busy retries allowed per target.
        _emfile_wait: Upper bound for the shared EMFILE counter.
        _counter: Shared EMFILE backoff counter.
    """

    def __init__(
        self,
        max_retries: int = 3,
        emfile_wait: int = 1000,
        counter: EmfileCounter | None = None,
    ) -> None:
        """Initialize the policy.

        Args:
            max_retries: Busy retries allowed per target.
            emfile_wait: Upper bound for the shared EMFILE counter.
            counter: EMFILE counter to use. Defaults to the process-wide one.
        """
        self._max_retries = max_retries
        self._emfile_wait = emfile_wait
        self._counter = counter if counter is not None else EMFILE_COUNTER

    @property
    def counter(self) -> EmfileCounter:
        """The EMFILE counter this policy coordinates through."""
        return self._counter

    def backoff(self, error: OSError, state: RetryState) -> int | None:
        """Compute the delay before retrying a failed removal.

        Args:
            error: Error the removal ended with.
            state: Retry bookkeeping of the failed target. Updated in place.

        Returns:
            Delay in time units, or None if the error must be surfaced.
        """
        kind = classify(error)

        if kind in BUSY_KINDS and state.busy_tries < self._max_retries:
            state.busy_tries += 1
            return state.busy_tries * BUSY_BACKOFF_STEP

        if kind is ErrorKind.TOO_MANY_OPEN_FILES and self._counter.value < self._emfile_wait:
            return self._counter.bump()

        return None

    def succeeded(self) -> None:
        """Record a successful removal, releasing the EMFILE backoff."""
        self._counter.reset()
