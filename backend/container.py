"""
Composition root for the sync engine.

Builds one explicit instance of every service from Settings. There is no
module-level singleton: the FastAPI app and the CLI each build their own
container, and tests build containers around fakes.

Usage:
    from backend.container import build_container
    from backend.settings import get_settings

    container = build_container(get_settings())
    outcome = await container.scheduler.force_sync(SyncFamily.SESSIONS)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from application.context import SyncContext
from application.ports import ExerciseLookup, LocalStore, RemoteStoreClient
from application.sync import (
    CatalogFamily,
    IdentityRemapper,
    PersonalBestDeriver,
    PersonalBestFamily,
    ReconciliationEngine,
    RetryCoordinator,
    SessionFamily,
    SyncScheduler,
    TemplateFamily,
)
from backend.settings import Settings
from domain.models import SyncFamily

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SyncContainer:
    """All wired services. Attributes are the ports and services, not globals."""

    settings: Settings
    context: SyncContext
    local_store: LocalStore
    remote: RemoteStoreClient
    exercise_lookup: ExerciseLookup
    coordinator: RetryCoordinator
    remapper: IdentityRemapper
    engines: Dict[SyncFamily, ReconciliationEngine]
    deriver: PersonalBestDeriver
    scheduler: SyncScheduler


def build_container(
    settings: Settings,
    *,
    local_store: Optional[LocalStore] = None,
    remote: Optional[RemoteStoreClient] = None,
    exercise_lookup: Optional[ExerciseLookup] = None,
    coordinator: Optional[RetryCoordinator] = None,
    clock: Callable[[], datetime] = _utc_now,
) -> SyncContainer:
    """
    Wire the sync engine.

    Args:
        settings: Application settings
        local_store: LocalStore override (default: SqliteLocalStore at local_store_path)
        remote: RemoteStoreClient override (default: HttpRemoteStoreClient)
        exercise_lookup: ExerciseLookup override (default: CatalogExerciseLookup)
        coordinator: RetryCoordinator override (default: uses retry_delay_seconds)
        clock: Source of "now" for sync timestamps

    Returns:
        SyncContainer with every service built
    """
    if local_store is None:
        from infrastructure.local import SqliteLocalStore

        local_store = SqliteLocalStore(settings.local_store_path)

    if remote is None:
        from infrastructure.remote import HttpRemoteStoreClient

        remote = HttpRemoteStoreClient(
            settings.api_base_url,
            timeout=settings.api_timeout_seconds,
        )

    if exercise_lookup is None:
        from infrastructure.catalog import CatalogExerciseLookup

        exercise_lookup = CatalogExerciseLookup(
            local_store, threshold=settings.exercise_match_threshold
        )

    if coordinator is None:
        coordinator = RetryCoordinator(retry_delay_seconds=settings.retry_delay_seconds)

    context = SyncContext(athlete_id=settings.athlete_id, auth_token=settings.api_token)
    remapper = IdentityRemapper(local_store)

    personal_best_engine = ReconciliationEngine(PersonalBestFamily(remote), local_store)
    deriver = PersonalBestDeriver(coordinator, personal_best_engine, local_store, clock=clock)

    session_family = SessionFamily(
        remote,
        local_store,
        remapper,
        exercise_lookup,
        page_size=settings.session_page_size,
        deriver=deriver,
    )

    # Catalog first: uploads resolve exercise ids against it
    engines: Dict[SyncFamily, ReconciliationEngine] = {
        SyncFamily.CATALOG: ReconciliationEngine(CatalogFamily(remote), local_store),
        SyncFamily.TEMPLATES: ReconciliationEngine(
            TemplateFamily(remote, local_store, exercise_lookup), local_store
        ),
        SyncFamily.SESSIONS: ReconciliationEngine(session_family, local_store),
        SyncFamily.PERSONAL_BESTS: personal_best_engine,
    }

    scheduler = SyncScheduler(
        context,
        engines,
        local_store,
        coordinator,
        thresholds=settings.sync_thresholds(),
        tick_interval_seconds=settings.sync_tick_interval_seconds,
        clock=clock,
    )

    logger.info(f"Sync engine wired for athlete {settings.athlete_id or '<unset>'}")
    return SyncContainer(
        settings=settings,
        context=context,
        local_store=local_store,
        remote=remote,
        exercise_lookup=exercise_lookup,
        coordinator=coordinator,
        remapper=remapper,
        engines=engines,
        deriver=deriver,
        scheduler=scheduler,
    )
