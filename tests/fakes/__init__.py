"""
Fake port implementations for testing.

This package provides in-memory fake implementations of the application
ports for fast, isolated testing. No SQLite or HTTP required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Failure injection (remote errors, lost create responses, commit failures)
- Factory functions for entities, remote records and a wired container

Usage:
    from tests.fakes import FakeRemoteStoreClient, InMemoryLocalStore, create_sync_container

    remote = FakeRemoteStoreClient()
    remote.seed_sessions([make_remote_session("s1")])
    container = create_sync_container(remote=remote)
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from application.sync import RetryCoordinator
from backend.container import SyncContainer, build_container
from backend.settings import Settings
from domain.models import (
    PersonalBestRecord,
    RemoteCatalogEntry,
    RemoteExerciseRef,
    RemoteExerciseResult,
    RemotePersonalBest,
    RemoteSession,
    RemoteTemplate,
    RemoteTemplateExercise,
    TemplateExerciseSpec,
    WorkoutExerciseResult,
    WorkoutSession,
    WorkoutTemplate,
)

# Import all fake implementations
from tests.fakes.exercise_lookup import FakeExerciseLookup
from tests.fakes.local_store import InMemoryLocalStore
from tests.fakes.remote_store import FakeRemoteStoreClient

ATHLETE_ID = "athlete-1"
BASE_TIME = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)

# (round, order, exercise_name, duration, distance, repetitions)
ResultSpec = Tuple[int, int, str, float, float, int]

DEFAULT_RESULTS: List[ResultSpec] = [
    (1, 0, "Run", 240.0, 1000.0, 0),
    (1, 1, "SkiErg", 250.0, 1000.0, 0),
    (2, 0, "Wall Balls", 300.0, 0.0, 100),
]


# =============================================================================
# Factory Functions - local entities
# =============================================================================


def make_session(
    *,
    started_at: Optional[datetime] = None,
    completed: bool = True,
    results: Sequence[ResultSpec] = DEFAULT_RESULTS,
    **overrides,
) -> WorkoutSession:
    """Create a local, never-synced session."""
    started_at = started_at or BASE_TIME
    completed_at = started_at + timedelta(minutes=30) if completed else None
    return WorkoutSession(
        started_at=started_at,
        completed_at=completed_at,
        total_duration=sum(r[3] for r in results),
        total_distance=sum(r[4] for r in results),
        total_rounds=max([r[0] for r in results], default=1),
        template_name="HYROX Sim",
        results=[
            WorkoutExerciseResult(
                round=round_number,
                order=order,
                exercise_name=name,
                duration=duration,
                distance=distance,
                repetitions=reps,
                completed_at=completed_at,
            )
            for round_number, order, name, duration, distance, reps in results
        ],
        **overrides,
    )


def make_template(name: str = "Leg Day", **overrides) -> WorkoutTemplate:
    """Create a local personal template."""
    return WorkoutTemplate(
        name=name,
        rounds=2,
        exercises=[
            TemplateExerciseSpec(exercise_name="Run", order=0, target_distance=1000),
            TemplateExerciseSpec(exercise_name="Wall Balls", order=1, target_repetitions=50),
        ],
        **overrides,
    )


def make_personal_best(exercise_type: str, value: float, **overrides) -> PersonalBestRecord:
    defaults = dict(
        canonical_id=f"pb-{exercise_type}",
        is_synced=True,
        athlete_id=ATHLETE_ID,
        achieved_at=BASE_TIME,
    )
    defaults.update(overrides)
    return PersonalBestRecord(exercise_type=exercise_type, value=value, **defaults)


# =============================================================================
# Factory Functions - remote records
# =============================================================================


def make_remote_session(
    session_id: str,
    *,
    started_at: Optional[datetime] = None,
    completed: bool = True,
    exercise_names: Sequence[str] = ("Run", "SkiErg"),
) -> RemoteSession:
    started_at = started_at or BASE_TIME
    return RemoteSession(
        id=session_id,
        name="HYROX Sim",
        started_at=started_at,
        completed_at=started_at + timedelta(minutes=30) if completed else None,
        total_duration=1800,
        exercises=[
            RemoteExerciseResult(
                id=f"{session_id}-ex-{order}",
                order=order,
                exercise=RemoteExerciseRef(id=name.lower(), name=name),
                duration_completed=240,
                distance_completed=1000,
            )
            for order, name in enumerate(exercise_names)
        ],
    )


def make_remote_template(template_id: str, name: str = "Coach Plan", *, is_personal: bool = True) -> RemoteTemplate:
    return RemoteTemplate(
        id=template_id,
        name=name,
        rounds=1,
        is_personal=is_personal,
        coach_id=None if is_personal else "coach-1",
        exercises=[
            RemoteTemplateExercise(
                order=0,
                exercise=RemoteExerciseRef(id="run", name="Run"),
                target_distance=1000,
            )
        ],
    )


def make_remote_personal_best(
    exercise_type: str,
    value: float,
    *,
    record_id: Optional[str] = None,
    workout_id: Optional[str] = None,
) -> RemotePersonalBest:
    return RemotePersonalBest(
        id=record_id or f"pb-{exercise_type}",
        exercise_type=exercise_type,
        value=value,
        achieved_at=BASE_TIME,
        workout_id=workout_id,
    )


def make_remote_exercise(entry_id: str, name: str, **overrides) -> RemoteCatalogEntry:
    return RemoteCatalogEntry(id=entry_id, name=name, **overrides)


# =============================================================================
# Container
# =============================================================================


def create_test_settings(**overrides) -> Settings:
    values = dict(
        environment="test",
        athlete_id=ATHLETE_ID,
        local_store_path=":memory:",
        retry_delay_seconds=0,
        session_page_size=2,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def create_sync_container(
    *,
    settings: Optional[Settings] = None,
    remote: Optional[FakeRemoteStoreClient] = None,
    local_store: Optional[InMemoryLocalStore] = None,
    exercise_lookup: Optional[FakeExerciseLookup] = None,
    coordinator: Optional[RetryCoordinator] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> SyncContainer:
    """
    Build a container wired to fakes.

    Defaults: empty fake remote, empty in-memory store, a lookup that
    resolves nothing, zero retry delay and a page size of 2 so that
    pagination is exercised.
    """
    kwargs = {}
    if clock is not None:
        kwargs["clock"] = clock
    return build_container(
        settings or create_test_settings(),
        local_store=local_store or InMemoryLocalStore(),
        remote=remote or FakeRemoteStoreClient(),
        exercise_lookup=exercise_lookup or FakeExerciseLookup(),
        coordinator=coordinator,
        **kwargs,
    )


__all__ = [
    # Fakes
    "InMemoryLocalStore",
    "FakeRemoteStoreClient",
    "FakeExerciseLookup",
    # Constants
    "ATHLETE_ID",
    "BASE_TIME",
    # Local factories
    "make_session",
    "make_template",
    "make_personal_best",
    # Remote factories
    "make_remote_session",
    "make_remote_template",
    "make_remote_personal_best",
    "make_remote_exercise",
    # Container
    "create_test_settings",
    "create_sync_container",
]
