"""
Retry coordination for sync passes.

Every pass for a family goes through RetryCoordinator.run(), which:
- refuses to start a second pass for a family that already has one in flight
- retries exactly once, after a fixed delay, when the first attempt fails
  with a retryable error (ConnectivityError, RemoteServerError)
- surfaces terminal errors immediately
- returns as soon as the first attempt settles, so callers are not held up
  for the retry delay
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional, Set

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from application.exceptions import is_retryable_error
from application.sync.results import ReconcileResult, RunOutcome, RunStatus
from domain.models import SyncFamily

logger = logging.getLogger(__name__)

# Default retry configuration
DEFAULT_RETRY_DELAY_SECONDS = 30.0
MAX_ATTEMPTS = 2

SyncTask = Callable[[], Awaitable[ReconcileResult]]


class RetryCoordinator:
    """
    Run sync passes with an in-flight guard and a single delayed retry.

    The guard for a family is held from the first attempt until the final
    outcome, including the retry delay.

    Usage:
        >>> coordinator = RetryCoordinator(retry_delay_seconds=30)
        >>> outcome = await coordinator.run(SyncFamily.CATALOG, task)
        >>> if outcome.status == RunStatus.RETRY_SCHEDULED:
        ...     outcome = await outcome.wait()
    """

    def __init__(
        self,
        retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if retry_delay_seconds < 0:
            raise ValueError(f"retry_delay_seconds must be >= 0, got {retry_delay_seconds}")
        self._retry_delay = retry_delay_seconds
        self._sleep = sleep
        self._in_flight: Set[SyncFamily] = set()
        self._tasks: Dict[SyncFamily, "asyncio.Task[RunOutcome]"] = {}

    def is_running(self, family: SyncFamily) -> bool:
        return family in self._in_flight

    async def run(self, family: SyncFamily, task: SyncTask) -> RunOutcome:
        """
        Run a sync pass for a family.

        Args:
            family: Family the pass belongs to (guard key)
            task: Zero-argument coroutine function performing one attempt

        Returns:
            SKIPPED if the family is busy, SUCCEEDED or FAILED once the first
            attempt settles without a retry, RETRY_SCHEDULED otherwise.
        """
        if family in self._in_flight:
            logger.warning(f"Sync already in flight for {family.value}, skipping")
            return RunOutcome(family=family, status=RunStatus.SKIPPED)

        self._in_flight.add(family)
        loop = asyncio.get_running_loop()
        retry_scheduled: "asyncio.Future[BaseException]" = loop.create_future()

        attempt_task = asyncio.create_task(self._attempt(family, task, retry_scheduled))
        self._tasks[family] = attempt_task

        await asyncio.wait({attempt_task, retry_scheduled}, return_when=asyncio.FIRST_COMPLETED)

        if attempt_task.done():
            return attempt_task.result()

        return RunOutcome(
            family=family,
            status=RunStatus.RETRY_SCHEDULED,
            error=retry_scheduled.result(),
            attempts=1,
            pending=attempt_task,
        )

    async def drain(self) -> None:
        """Wait for every outstanding pass (including scheduled retries) to settle."""
        tasks = [t for t in self._tasks.values() if not t.done()]
        if tasks:
            await asyncio.gather(*tasks)

    def _before_sleep(
        self,
        family: SyncFamily,
        retry_scheduled: "asyncio.Future[BaseException]",
    ) -> Callable[[RetryCallState], None]:
        log_retry = before_sleep_log(logger, logging.WARNING)

        def before_sleep(retry_state: RetryCallState) -> None:
            log_retry(retry_state)
            logger.warning(f"Retrying {family.value} sync in {self._retry_delay:.0f}s")
            if not retry_scheduled.done():
                retry_scheduled.set_result(retry_state.outcome.exception())

        return before_sleep

    async def _attempt(
        self,
        family: SyncFamily,
        task: SyncTask,
        retry_scheduled: "asyncio.Future[BaseException]",
    ) -> RunOutcome:
        attempts = 0
        try:
            retrying = AsyncRetrying(
                stop=stop_after_attempt(MAX_ATTEMPTS),
                wait=wait_fixed(self._retry_delay),
                retry=retry_if_exception(is_retryable_error),
                before_sleep=self._before_sleep(family, retry_scheduled),
                sleep=self._sleep,
                reraise=True,
            )
            result: Optional[ReconcileResult] = None
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    result = await task()

            return RunOutcome(
                family=family,
                status=RunStatus.SUCCEEDED,
                result=result,
                attempts=attempts,
            )
        except Exception as e:
            logger.error(f"Sync of {family.value} failed after {attempts} attempt(s): {e}")
            return RunOutcome(
                family=family,
                status=RunStatus.FAILED,
                error=e,
                attempts=attempts,
            )
        finally:
            self._in_flight.discard(family)
