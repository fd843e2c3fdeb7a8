"""
Sync scheduling: when to run a family's pass.

Triggers:
- sync_if_needed: the local cache is empty, or the last successful sync is
  older than the family threshold
- force_sync: explicit user action, no staleness check
- on_foreground: the application came back to the foreground
- the Ticker: periodic sync_if_needed for every family

The last-successful-sync timestamp is written only when a pass succeeds.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, Mapping, Optional

from application.context import SyncContext
from application.ports import LocalStore
from application.sync.reconciliation import ReconciliationEngine
from application.sync.results import ReconcileResult, RunOutcome, RunStatus
from application.sync.retry import RetryCoordinator
from domain.models import SyncFamily

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLDS: Dict[SyncFamily, timedelta] = {
    SyncFamily.SESSIONS: timedelta(hours=4),
    SyncFamily.TEMPLATES: timedelta(minutes=10),
    SyncFamily.PERSONAL_BESTS: timedelta(hours=4),
    SyncFamily.CATALOG: timedelta(hours=2),
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Ticker:
    """
    Call a coroutine function every `interval` seconds until stopped.

    stop() interrupts the wait between ticks only. A tick that is already
    running is allowed to finish.
    """

    def __init__(self, interval: float, callback: Callable[[], Awaitable[None]]) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._interval = interval
        self._callback = callback
        self._stopping = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._interval)
                return
            except asyncio.TimeoutError:
                pass

            try:
                await self._callback()
            except Exception as e:
                logger.exception(f"Periodic sync tick failed: {e}")


class SyncScheduler:
    """
    Decide when each family syncs and run its pass through the coordinator.

    Usage:
        >>> scheduler = SyncScheduler(context, engines, store, coordinator)
        >>> outcome = await scheduler.force_sync(SyncFamily.TEMPLATES)
        >>> outcome.status
        <RunStatus.SUCCEEDED: 'succeeded'>
    """

    def __init__(
        self,
        context: SyncContext,
        engines: Mapping[SyncFamily, ReconciliationEngine],
        local_store: LocalStore,
        coordinator: RetryCoordinator,
        *,
        thresholds: Optional[Mapping[SyncFamily, timedelta]] = None,
        tick_interval_seconds: float = 4 * 3600,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._context = context
        self._engines = dict(engines)
        self._store = local_store
        self._coordinator = coordinator
        self._thresholds = {**DEFAULT_THRESHOLDS, **(thresholds or {})}
        self._clock = clock
        self._ticker = Ticker(tick_interval_seconds, self._tick)

    @property
    def context(self) -> SyncContext:
        return self._context

    @property
    def families(self):
        return list(self._engines)

    @property
    def ticker(self) -> Ticker:
        return self._ticker

    def _engine(self, family: SyncFamily) -> ReconciliationEngine:
        try:
            return self._engines[family]
        except KeyError:
            raise ValueError(f"No engine registered for family {family.value}") from None

    async def needs_sync(self, family: SyncFamily) -> bool:
        """True if the family's cache is empty or its last sync is stale."""
        engine = self._engine(family)
        if not await self._store.query(engine.entity_type):
            logger.info(f"Local {family.value} cache is empty, sync needed")
            return True

        last_sync = await self._store.last_sync_timestamp(family)
        if last_sync is None:
            return True

        age = self._clock() - _as_utc(last_sync)
        return age >= self._thresholds[family]

    async def sync_if_needed(self, family: SyncFamily) -> RunOutcome:
        if not await self.needs_sync(family):
            logger.debug(f"{family.value} is up to date")
            return RunOutcome(family=family, status=RunStatus.UP_TO_DATE)
        return await self._run(family)

    async def force_sync(self, family: SyncFamily) -> RunOutcome:
        logger.info(f"Forced sync of {family.value}")
        return await self._run(family)

    async def on_foreground(self) -> Dict[SyncFamily, RunOutcome]:
        logger.info("Application foregrounded, checking all families")
        return {family: await self.sync_if_needed(family) for family in self._engines}

    async def status(self) -> Dict[SyncFamily, dict]:
        """Last successful sync time and in-flight state per family."""
        report = {}
        for family in self._engines:
            last_sync = await self._store.last_sync_timestamp(family)
            report[family] = {
                "last_sync": last_sync,
                "in_flight": self._coordinator.is_running(family),
                "threshold_seconds": self._thresholds[family].total_seconds(),
            }
        return report

    def start(self) -> None:
        """Start the periodic ticker."""
        self._ticker.start()

    async def stop(self) -> None:
        """Stop the periodic ticker and wait for outstanding passes."""
        await self._ticker.stop()
        await self._coordinator.drain()

    async def _tick(self) -> None:
        for family in self._engines:
            await self.sync_if_needed(family)

    async def _run(self, family: SyncFamily) -> RunOutcome:
        engine = self._engine(family)

        async def sync_pass() -> ReconcileResult:
            result = await engine.reconcile(self._context)
            await self._store.set_last_sync_timestamp(family, self._clock())
            return result

        outcome = await self._coordinator.run(family, sync_pass)
        if outcome.status == RunStatus.FAILED:
            logger.error(f"Sync of {family.value} failed: {outcome.error}")
        return outcome
