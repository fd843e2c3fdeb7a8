"""
Family adapters: per-entity-type knowledge used by the ReconciliationEngine.

Each adapter answers:
- how to fetch the full remote snapshot
- which key matches a cached entity with a remote record
- how to build or overwrite a cached entity from a remote record
- which cached entities hold local changes the snapshot must not clobber
- how to push those local changes (push phase, before the snapshot)

Sessions and templates have push phases. Personal bests and the catalog are
remote-derived and only ever pulled.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Dict, Generic, List, Optional, Type, TypeVar

from application.context import SyncContext
from application.exceptions import RemoteNotFoundError, RemoteRejectedError
from application.ports import ExerciseLookup, LocalStore, RemoteStoreClient
from application.sync.identity_remapper import IdentityRemapper
from application.sync.results import PushResult
from domain.converters import (
    apply_remote_catalog,
    apply_remote_personal_best,
    apply_remote_session,
    apply_remote_template,
    remote_catalog_to_local,
    remote_personal_best_to_local,
    remote_session_to_local,
    remote_template_to_local,
    session_to_create_request,
    session_to_update_request,
    template_to_create_request,
)
from domain.models import (
    CachedEntity,
    ExerciseCatalogEntry,
    PersonalBestRecord,
    RemoteCatalogEntry,
    RemotePersonalBest,
    RemoteSession,
    RemoteTemplate,
    SyncFamily,
    WorkoutSession,
    WorkoutTemplate,
)

if TYPE_CHECKING:
    from application.sync.personal_bests import PersonalBestDeriver

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=CachedEntity)
R = TypeVar("R")

# Remote timestamps may be truncated to whole seconds
STARTED_AT_TOLERANCE = timedelta(seconds=1)
CREATED_AT_TOLERANCE = timedelta(seconds=1)


class FamilyAdapter(Generic[E, R]):
    """Defaults shared by all families. Subclasses set family and entity_type."""

    family: SyncFamily
    entity_type: Type[E]

    async def fetch_snapshot(self, context: SyncContext) -> List[R]:
        raise NotImplementedError

    def local_key(self, entity: E) -> Optional[str]:
        return entity.canonical_id

    def remote_key(self, record: R) -> str:
        return record.id

    def to_local(self, record: R, context: SyncContext) -> E:
        raise NotImplementedError

    def apply_remote(self, entity: E, record: R) -> None:
        raise NotImplementedError

    def is_pending(self, entity: E) -> bool:
        """True while the entity holds local changes the remote store has not accepted."""
        return not entity.is_synced

    async def push_pending(self, context: SyncContext) -> PushResult:
        return PushResult()


async def _resolve_exercise_ids(lookup: ExerciseLookup, names: List[str]) -> Dict[str, str]:
    """Resolve each distinct name once. Unresolved names are left out."""
    resolved: Dict[str, str] = {}
    for name in dict.fromkeys(names):
        exercise_id = await lookup.resolve(name)
        if exercise_id:
            resolved[name] = exercise_id
    return resolved


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =============================================================================
# Sessions
# =============================================================================


class SessionFamily(FamilyAdapter[WorkoutSession, RemoteSession]):
    """
    Completed workout sessions.

    Push phase, per local session (oldest first):
    1. Tombstoned: delete remotely (404 counts as done), then locally.
    2. upload_in_flight: a create may have landed without being recorded.
       Find it by started_at among remote sessions not known locally and
       remap to it; if there is none, upload again.
    3. Completed and unsynced: commit upload_in_flight, create, remap.
    4. needs_result_push: send measured values with an update.

    A connectivity or server error aborts the pass (the coordinator decides
    about retrying). A rejection is recorded and the pass moves on.
    """

    family = SyncFamily.SESSIONS
    entity_type = WorkoutSession

    def __init__(
        self,
        remote: RemoteStoreClient,
        local_store: LocalStore,
        remapper: IdentityRemapper,
        exercise_lookup: ExerciseLookup,
        *,
        page_size: int = 50,
        deriver: Optional["PersonalBestDeriver"] = None,
    ) -> None:
        self._remote = remote
        self._store = local_store
        self._remapper = remapper
        self._lookup = exercise_lookup
        self._page_size = page_size
        self.deriver = deriver

    async def fetch_snapshot(self, context: SyncContext) -> List[RemoteSession]:
        return await self._list_all(context, include_incomplete=False)

    def to_local(self, record: RemoteSession, context: SyncContext) -> WorkoutSession:
        return remote_session_to_local(record)

    def apply_remote(self, entity: WorkoutSession, record: RemoteSession) -> None:
        apply_remote_session(entity, record)

    def is_pending(self, entity: WorkoutSession) -> bool:
        return (
            not entity.is_synced
            or entity.is_deleted
            or entity.upload_in_flight
            or entity.needs_result_push
        )

    async def _list_all(self, context: SyncContext, *, include_incomplete: bool) -> List[RemoteSession]:
        """Page through every remote session until a short page."""
        sessions: List[RemoteSession] = []
        offset = 0
        while True:
            page = await self._remote.list_sessions(
                context,
                include_incomplete=include_incomplete,
                limit=self._page_size,
                offset=offset,
            )
            sessions.extend(page)
            if len(page) < self._page_size:
                break
            offset += len(page)
        return sessions

    async def push_pending(self, context: SyncContext) -> PushResult:
        push = PushResult()
        sessions = await self._store.query(WorkoutSession)

        for session in sorted(sessions, key=lambda s: _as_utc(s.started_at)):
            if session.is_deleted:
                await self._push_deletion(context, session, push)
                continue

            if session.upload_in_flight:
                session = await self._recover_in_flight(context, session, push)
            elif session.is_pending_upload:
                session = await self._upload(context, session, push)

            if session is not None and session.is_synced and session.needs_result_push:
                pushed = await self._push_results(context, session, push)
                if pushed:
                    push.uploaded += 1
                    if self.deriver is not None:
                        await self.deriver.after_session_upload(context, session)

        return push

    async def _find_created(self, context: SyncContext, session: WorkoutSession) -> Optional[RemoteSession]:
        """Look for a remote session created from this one but never recorded locally."""
        known = {
            s.canonical_id
            for s in await self._store.query(WorkoutSession)
            if s.canonical_id is not None
        }
        started_at = _as_utc(session.started_at)
        for candidate in await self._list_all(context, include_incomplete=True):
            if candidate.id in known:
                continue
            if abs(_as_utc(candidate.started_at) - started_at) <= STARTED_AT_TOLERANCE:
                return candidate
        return None

    async def _recover_in_flight(
        self, context: SyncContext, session: WorkoutSession, push: PushResult
    ) -> Optional[WorkoutSession]:
        created = await self._find_created(context, session)
        if created is not None:
            logger.info(f"Recovered in-flight session {session.local_id} as {created.id}")
            return await self._remapper.remap(session, created)

        logger.info(f"In-flight session {session.local_id} never reached the remote store")
        session.upload_in_flight = False
        async with self._store.transaction() as tx:
            tx.update(session)
        if session.is_pending_upload:
            return await self._upload(context, session, push)
        return session

    async def _upload(self, context: SyncContext, session: WorkoutSession, push: PushResult) -> Optional[WorkoutSession]:
        exercise_ids = await _resolve_exercise_ids(
            self._lookup, [r.exercise_name for r in session.results]
        )
        payload = session_to_create_request(session, exercise_ids)

        session.upload_in_flight = True
        async with self._store.transaction() as tx:
            tx.update(session)

        try:
            created = await self._remote.create_session(context, payload)
        except RemoteRejectedError as e:
            logger.error(f"Remote store rejected session {session.local_id}: {e.message}")
            session.upload_in_flight = False
            async with self._store.transaction() as tx:
                tx.update(session)
            push.errors.append(f"session {session.local_id}: {e.message}")
            return None

        return await self._remapper.remap(session, created)

    async def _push_results(self, context: SyncContext, session: WorkoutSession, push: PushResult) -> bool:
        payload = session_to_update_request(session)
        try:
            await self._remote.update_session(context, session.canonical_id, payload)
        except RemoteNotFoundError:
            logger.warning(f"Session {session.canonical_id} no longer exists remotely, removing it")
            async with self._store.transaction() as tx:
                tx.delete(session)
            return False
        except RemoteRejectedError as e:
            logger.error(f"Remote store rejected results of session {session.canonical_id}: {e.message}")
            push.errors.append(f"session {session.local_id}: {e.message}")
            return False

        session.needs_result_push = False
        async with self._store.transaction() as tx:
            tx.update(session)
        logger.info(f"Uploaded session {session.local_id} as {session.canonical_id}")
        return True

    async def _push_deletion(self, context: SyncContext, session: WorkoutSession, push: PushResult) -> None:
        canonical_id = session.canonical_id
        if session.is_local_only and session.upload_in_flight:
            created = await self._find_created(context, session)
            canonical_id = created.id if created else None

        if canonical_id is not None:
            try:
                await self._remote.delete_session(context, canonical_id)
            except RemoteNotFoundError:
                logger.debug(f"Session {canonical_id} was already deleted remotely")
            except RemoteRejectedError as e:
                push.errors.append(f"session {session.local_id}: {e.message}")
                return

        async with self._store.transaction() as tx:
            tx.delete(session)
        logger.info(f"Deleted session {session.local_id}")


# =============================================================================
# Templates
# =============================================================================


class TemplateFamily(FamilyAdapter[WorkoutTemplate, RemoteTemplate]):
    """
    Personal and coach-assigned templates.

    The snapshot is the union of both lists. Only personal templates are
    pushed, oldest first:
    1. Tombstoned: delete remotely (404 counts as done), then locally.
    2. upload_in_flight: a create may have landed without being recorded.
       Find it by name among remote personal templates not known locally
       and created no earlier than the local one; if there is none, upload
       again.
    3. Unsynced: commit upload_in_flight, create, record the canonical id.
    """

    family = SyncFamily.TEMPLATES
    entity_type = WorkoutTemplate

    def __init__(
        self,
        remote: RemoteStoreClient,
        local_store: LocalStore,
        exercise_lookup: ExerciseLookup,
    ) -> None:
        self._remote = remote
        self._store = local_store
        self._lookup = exercise_lookup

    async def fetch_snapshot(self, context: SyncContext) -> List[RemoteTemplate]:
        personal = await self._remote.list_personal_templates(context)
        assigned = await self._remote.list_assigned_templates(context)

        templates: Dict[str, RemoteTemplate] = {}
        for template in personal + assigned:
            templates.setdefault(template.id, template)
        return list(templates.values())

    def to_local(self, record: RemoteTemplate, context: SyncContext) -> WorkoutTemplate:
        return remote_template_to_local(record)

    def apply_remote(self, entity: WorkoutTemplate, record: RemoteTemplate) -> None:
        apply_remote_template(entity, record)

    def is_pending(self, entity: WorkoutTemplate) -> bool:
        return not entity.is_synced or (entity.is_deleted and not entity.is_read_only)

    async def push_pending(self, context: SyncContext) -> PushResult:
        push = PushResult()
        templates = await self._store.query(WorkoutTemplate, lambda t: not t.is_read_only)

        for template in sorted(templates, key=lambda t: _as_utc(t.created_at)):
            if template.is_deleted:
                await self._push_deletion(context, template, push)
            elif template.upload_in_flight:
                await self._recover_in_flight(context, template, push)
            elif not template.is_synced:
                await self._upload(context, template, push)

        return push

    async def _find_created(self, context: SyncContext, template: WorkoutTemplate) -> Optional[RemoteTemplate]:
        """Look for a remote template created from this one but never recorded locally."""
        known = {
            t.canonical_id
            for t in await self._store.query(WorkoutTemplate)
            if t.canonical_id is not None
        }
        earliest = _as_utc(template.created_at) - CREATED_AT_TOLERANCE
        for candidate in await self._remote.list_personal_templates(context):
            if candidate.id in known or candidate.name != template.name:
                continue
            if candidate.created_at is None or _as_utc(candidate.created_at) >= earliest:
                return candidate
        return None

    async def _recover_in_flight(self, context: SyncContext, template: WorkoutTemplate, push: PushResult) -> None:
        created = await self._find_created(context, template)
        if created is not None:
            logger.info(f"Recovered in-flight template {template.name!r} as {created.id}")
            await self._record_created(template, created, push)
            return

        logger.info(f"In-flight template {template.name!r} never reached the remote store")
        template.upload_in_flight = False
        async with self._store.transaction() as tx:
            tx.update(template)
        await self._upload(context, template, push)

    async def _push_deletion(self, context: SyncContext, template: WorkoutTemplate, push: PushResult) -> None:
        canonical_id = template.canonical_id
        if template.is_local_only and template.upload_in_flight:
            created = await self._find_created(context, template)
            canonical_id = created.id if created else None

        if canonical_id is not None:
            try:
                await self._remote.delete_template(context, canonical_id)
            except RemoteNotFoundError:
                logger.debug(f"Template {canonical_id} was already deleted remotely")
            except RemoteRejectedError as e:
                push.errors.append(f"template {template.local_id}: {e.message}")
                return

        async with self._store.transaction() as tx:
            tx.delete(template)
        logger.info(f"Deleted template {template.name!r}")

    async def _upload(self, context: SyncContext, template: WorkoutTemplate, push: PushResult) -> None:
        exercise_ids = await _resolve_exercise_ids(
            self._lookup, [e.exercise_name for e in template.exercises]
        )
        payload = template_to_create_request(template, exercise_ids)

        template.upload_in_flight = True
        async with self._store.transaction() as tx:
            tx.update(template)

        try:
            created = await self._remote.create_template(context, payload)
        except RemoteRejectedError as e:
            logger.error(f"Remote store rejected template {template.name!r}: {e.message}")
            template.upload_in_flight = False
            async with self._store.transaction() as tx:
                tx.update(template)
            push.errors.append(f"template {template.local_id}: {e.message}")
            return

        await self._record_created(template, created, push)
        logger.info(f"Uploaded template {template.name!r} as {created.id}")

    async def _record_created(self, template: WorkoutTemplate, created: RemoteTemplate, push: PushResult) -> None:
        template.canonical_id = created.id
        template.is_synced = True
        template.upload_in_flight = False
        async with self._store.transaction() as tx:
            tx.update(template)
        push.uploaded += 1


# =============================================================================
# Personal bests
# =============================================================================


class PersonalBestFamily(FamilyAdapter[PersonalBestRecord, RemotePersonalBest]):
    """
    Personal bests, keyed by exercise type.

    Remote values are imported as they are, even when the cached value is
    lower. The remote store is the only place that decides what a best is.
    """

    family = SyncFamily.PERSONAL_BESTS
    entity_type = PersonalBestRecord

    def __init__(self, remote: RemoteStoreClient) -> None:
        self._remote = remote

    async def fetch_snapshot(self, context: SyncContext) -> List[RemotePersonalBest]:
        return await self._remote.list_personal_bests(context)

    def local_key(self, entity: PersonalBestRecord) -> Optional[str]:
        return entity.exercise_type

    def remote_key(self, record: RemotePersonalBest) -> str:
        return record.exercise_type

    def to_local(self, record: RemotePersonalBest, context: SyncContext) -> PersonalBestRecord:
        return remote_personal_best_to_local(record, context.athlete_id)

    def apply_remote(self, entity: PersonalBestRecord, record: RemotePersonalBest) -> None:
        apply_remote_personal_best(entity, record)


# =============================================================================
# Catalog
# =============================================================================


class CatalogFamily(FamilyAdapter[ExerciseCatalogEntry, RemoteCatalogEntry]):
    """Exercise catalog reference data."""

    family = SyncFamily.CATALOG
    entity_type = ExerciseCatalogEntry

    def __init__(self, remote: RemoteStoreClient) -> None:
        self._remote = remote

    async def fetch_snapshot(self, context: SyncContext) -> List[RemoteCatalogEntry]:
        return await self._remote.list_exercises(context)

    def to_local(self, record: RemoteCatalogEntry, context: SyncContext) -> ExerciseCatalogEntry:
        return remote_catalog_to_local(record)

    def apply_remote(self, entity: ExerciseCatalogEntry, record: RemoteCatalogEntry) -> None:
        apply_remote_catalog(entity, record)
