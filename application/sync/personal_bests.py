"""Personal-best refresh after a session upload."""

import logging
from datetime import datetime, timezone
from typing import Callable

from application.context import SyncContext
from application.ports import LocalStore
from application.sync.reconciliation import ReconciliationEngine
from application.sync.results import RunOutcome, RunStatus
from application.sync.retry import RetryCoordinator
from domain.converters import base_exercise_name
from domain.models import PersonalBestRecord, SyncFamily, WorkoutSession, exercise_type_key

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PersonalBestDeriver:
    """
    Pull personal bests once the remote store has seen a new session.

    The remote store computes bests from uploaded sessions; this only
    triggers the personal-bests family pass. It goes through the
    RetryCoordinator so that it never overlaps a scheduled pass. When the
    pass succeeds right away, results of the session that now hold a best
    are flagged.
    """

    def __init__(
        self,
        coordinator: RetryCoordinator,
        engine: ReconciliationEngine,
        local_store: LocalStore,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if engine.family != SyncFamily.PERSONAL_BESTS:
            raise ValueError(f"PersonalBestDeriver needs the personal_bests engine, got {engine.family}")
        self._coordinator = coordinator
        self._engine = engine
        self._store = local_store
        self._clock = clock

    async def after_session_upload(self, context: SyncContext, session: WorkoutSession) -> RunOutcome:
        logger.info(f"Refreshing personal bests after upload of session {session.canonical_id}")

        async def refresh():
            result = await self._engine.reconcile(context)
            await self._store.set_last_sync_timestamp(SyncFamily.PERSONAL_BESTS, self._clock())
            return result

        outcome = await self._coordinator.run(SyncFamily.PERSONAL_BESTS, refresh)
        if outcome.status == RunStatus.SUCCEEDED:
            await self._mark_personal_bests(session)
        return outcome

    async def _mark_personal_bests(self, session: WorkoutSession) -> None:
        """Flag the session's results whose exercise type holds a best set by this session."""
        if session.canonical_id is None:
            return

        records = await self._store.query(
            PersonalBestRecord, lambda p: p.session_id == session.canonical_id
        )
        held = {p.exercise_type for p in records}
        if not held:
            return

        stored = await self._store.get(WorkoutSession, session.local_id)
        if stored is None:
            return

        marked = 0
        for result in stored.results:
            key = exercise_type_key(
                base_exercise_name(result.exercise_name), result.distance, result.repetitions
            )
            if key in held and not result.is_personal_best:
                result.is_personal_best = True
                marked += 1

        if marked:
            async with self._store.transaction() as tx:
                tx.update(stored)
            logger.info(f"Session {session.canonical_id} set {marked} personal best(s)")
