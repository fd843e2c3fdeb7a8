"""
Identity remapping after a session is first accepted by the remote store.

The remote store assigns ids to the exercise rows of a created session in
the order they were sent. The local results were sent sorted by
(round, order), so pairing local results in that order with remote rows
sorted by `order` gives each local result its canonical id.
"""

import logging

from application.exceptions import LocalStoreError, RemapFailure
from application.ports import LocalStore
from domain.models import RemoteSession, WorkoutSession

logger = logging.getLogger(__name__)


class IdentityRemapper:
    """
    Assign canonical ids to a session and its results in one transaction.

    local_id never changes; canonical_id is filled in. Either every id is
    written together with the synced flags or nothing is.
    """

    def __init__(self, local_store: LocalStore) -> None:
        self._store = local_store

    async def remap(self, session: WorkoutSession, remote: RemoteSession) -> WorkoutSession:
        """
        Remap a local session to the remote record it was created as.

        Args:
            session: Local session with upload_in_flight set
            remote: Remote record returned by the create (or found by recovery)

        Returns:
            The committed session: synced, canonical ids assigned,
            upload_in_flight cleared and needs_result_push set.

        Raises:
            RemapFailure: Result counts differ, or the local commit failed
        """
        local_results = session.ordered_results()
        remote_results = sorted(remote.exercises, key=lambda e: e.order)

        if len(local_results) != len(remote_results):
            raise RemapFailure(
                f"Session {session.local_id} has {len(local_results)} results, "
                f"remote {remote.id} has {len(remote_results)}",
                session_local_id=session.local_id,
            )

        remapped = session.model_copy(deep=True)
        results_by_local_id = {r.local_id: r for r in remapped.results}

        for local, remote_result in zip(local_results, remote_results):
            target = results_by_local_id[local.local_id]
            target.canonical_id = remote_result.id
            target.is_synced = True

        remapped.canonical_id = remote.id
        remapped.is_synced = True
        remapped.upload_in_flight = False
        remapped.needs_result_push = True

        try:
            async with self._store.transaction() as tx:
                tx.update(remapped)
        except LocalStoreError as e:
            raise RemapFailure(
                f"Could not commit remap of session {session.local_id}: {e.message}",
                session_local_id=session.local_id,
            ) from e

        logger.info(
            f"Remapped session {session.local_id} -> {remote.id} "
            f"({len(local_results)} results)"
        )
        return remapped
