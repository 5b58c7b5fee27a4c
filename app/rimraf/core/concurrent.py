"""Concurrent removal strategy.

Every resolved target, and every child of a directory being emptied, is
removed in its own asyncio task, all started at once. Nothing is ever
cancelled: when a child fails, its directory reports that first error
right away, but the siblings already started keep running. Those tasks
are tracked and awaited before the top-level call returns, so no work is
left pending when the event loop shuts down.
"""

import asyncio
import contextlib
import logging
import os

from rimraf.core.capabilities import AsyncFileSystem
from rimraf.core.errors import ErrorKind, classify
from rimraf.core.machine import Call, Op, remove_path
from rimraf.core.options import RimrafOptions
from rimraf.core.retry import ErrorState, RetryPolicy, RetryState

logger = logging.getLogger(__name__)


class ConcurrentRemover:
    """Drives removal machines as concurrent asyncio tasks.

    A remover instance handles a single call to :meth:`remove`.

    Attributes:
        _afs: Non-blocking capability set.
        _policy: Retry policy applied to each top-level target.
        _time_unit: Seconds per backoff time unit.
        _limiter: Optional cap on in-flight primitive calls.
        _stragglers: Child tasks still running after their directory failed.
    """

    def __init__(self, options: RimrafOptions, policy: RetryPolicy | None = None) -> None:
        """Initialize the remover.

        Args:
            options: Removal options.
            policy: Retry policy. Defaults to one built from the options,
                sharing the process-wide EMFILE counter.
        """
        self._afs: AsyncFileSystem = options.afs
        self._policy = policy or RetryPolicy(options.max_retries, options.emfile_wait)
        self._time_unit = options.time_unit
        self._limiter = (
            asyncio.Semaphore(options.concurrency_limit)
            if options.concurrency_limit is not None
            else None
        )
        self._stragglers: set[asyncio.Task[None]] = set()

    async def remove(self, targets: list[str]) -> None:
        """Remove every target concurrently.

        All targets run to completion even after one of them failed.

        Args:
            targets: Resolved paths to remove.

        Raises:
            OSError: The first error, in completion order, that retries
                could not resolve.
        """
        errors = ErrorState()
        await asyncio.gather(*(self._remove_target(target, errors) for target in targets))
        await self._drain_stragglers()
        if errors.error is not None:
            raise errors.error

    async def _remove_target(self, path: str, errors: ErrorState) -> None:
        """Remove one top-level target, retrying transient failures."""
        state = RetryState()
        while True:
            try:
                await self._run(path)
            except OSError as err:
                delay = self._policy.backoff(err, state)
                if delay is not None:
                    logger.info(
                        "Retrying %s in %d units after %s", path, delay, classify(err).value
                    )
                    await asyncio.sleep(delay * self._time_unit)
                    continue
                if classify(err) is not ErrorKind.NOT_FOUND and not errors.record(err):
                    logger.warning("Discarding later error for %s: %s", path, err)
                return
            self._policy.succeeded()
            return

    async def _run(self, path: str) -> None:
        """Run the removal machine for one path to completion."""
        machine = remove_path(path, retry_final_rmdir=False)
        reply: object = None
        error: OSError | None = None
        while True:
            try:
                call = machine.send(reply) if error is None else machine.throw(error)
            except StopIteration:
                return
            reply, error = None, None
            try:
                reply = await self._perform(call)
            except OSError as err:
                error = err

    async def _perform(self, call: Call) -> object:
        """Execute one request of the machine."""
        if call.op is Op.REMOVE_CHILDREN:
            await self._remove_children(call.path, call.args)
            return None
        primitive = getattr(self._afs, call.op.value)
        async with self._limiter or contextlib.nullcontext():
            return await primitive(call.path, *call.args)

    async def _remove_children(self, parent: str, names: tuple[str, ...]) -> None:
        """Remove all children of a directory concurrently.

        Returns once every child is gone, or raises as soon as the first
        child fails, leaving its siblings running.
        """
        logger.debug("%s: removing %d children", parent, len(names))
        tasks = [asyncio.create_task(self._run(os.path.join(parent, name))) for name in names]
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        self._stragglers.update(pending)

        first: BaseException | None = None
        for task in tasks:
            if task in done and task.exception() is not None and first is None:
                first = task.exception()
        if first is not None:
            raise first

    async def _drain_stragglers(self) -> None:
        """Wait for child tasks left running by failed directories."""
        while self._stragglers:
            batch = list(self._stragglers)
            self._stragglers.clear()
            results = await asyncio.gather(*batch, return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException):
                    logger.warning("Discarding error from abandoned removal: %s", result)
