"""Blocking removal strategy.

Removes resolved targets one at a time, in resolver order, and the
children of each directory one at a time, in readdir order. Retries
block the calling thread for the backoff delay.
"""

import logging
import os
import time

from rimraf.core.capabilities import FileSystem
from rimraf.core.errors import ErrorKind, classify
from rimraf.core.machine import Call, Op, remove_path
from rimraf.core.options import RimrafOptions
from rimraf.core.retry import RetryPolicy, RetryState

logger = logging.getLogger(__name__)


class SequentialRemover:
    """Drives the removal machine with blocking primitives.

    Attributes:
        _fs: Blocking capability set.
        _policy: Retry policy applied to each top-level target.
        _time_unit: Seconds per backoff time unit.
    """

    def __init__(self, options: RimrafOptions, policy: RetryPolicy | None = None) -> None:
        """Initialize the remover.

        Args:
            options: Removal options.
            policy: Retry policy. Defaults to one built from the options,
                sharing the process-wide EMFILE counter.
        """
        self._fs: FileSystem = options.fs
        self._policy = policy or RetryPolicy(options.max_retries, options.emfile_wait)
        self._time_unit = options.time_unit

    def remove(self, targets: list[str]) -> None:
        """Remove every target, stopping at the first surfaced error.

        A target that does not exist counts as removed, and the remaining
        targets are still processed.

        Args:
            targets: Resolved paths to remove.

        Raises:
            OSError: The first error that retries could not resolve.
        """
        for target in targets:
            self.remove_target(target)

    def remove_target(self, path: str) -> None:
        """Remove one top-level target, retrying transient failures.

        Args:
            path: Path to remove.

        Raises:
            OSError: If the removal failed and the retry budget is spent.
        """
        state = RetryState()
        while True:
            try:
                self._run(path)
            except OSError as err:
                delay = self._policy.backoff(err, state)
                if delay is None:
                    if classify(err) is ErrorKind.NOT_FOUND:
                        return
                    raise
                logger.info("Retrying %s in %d units after %s", path, delay, classify(err).value)
                time.sleep(delay * self._time_unit)
                continue
            self._policy.succeeded()
            return

    def _run(self, path: str) -> None:
        """Run the removal machine for one path to completion."""
        machine = remove_path(path)
        reply: object = None
        error: OSError | None = None
        while True:
            try:
                call = machine.send(reply) if error is None else machine.throw(error)
            except StopIteration:
                return
            reply, error = None, None
            try:
                reply = self._perform(call)
            except OSError as err:
                error = err

    def _perform(self, call: Call) -> object:
        """Execute one request of the machine."""
        if call.op is Op.REMOVE_CHILDREN:
            for name in call.args:
                self._run(os.path.join(call.path, name))
            return None
        primitive = getattr(self._fs, call.op.value)
        return primitive(call.path, *call.args)
