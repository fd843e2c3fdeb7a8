"""
Shared fixtures for the sync engine tests.

Every fixture is function-scoped and built from the fakes package, so tests
never share state.
"""

import pytest

from application.context import SyncContext
from tests.fakes import (
    ATHLETE_ID,
    FakeExerciseLookup,
    FakeRemoteStoreClient,
    InMemoryLocalStore,
    create_sync_container,
)


@pytest.fixture
def context() -> SyncContext:
    return SyncContext(athlete_id=ATHLETE_ID)


@pytest.fixture
def remote() -> FakeRemoteStoreClient:
    return FakeRemoteStoreClient()


@pytest.fixture
def local_store() -> InMemoryLocalStore:
    return InMemoryLocalStore()


@pytest.fixture
def exercise_lookup() -> FakeExerciseLookup:
    return FakeExerciseLookup(
        {"Run": "run", "SkiErg": "skierg", "Wall Balls": "wall-balls"}
    )


@pytest.fixture
def container(remote, local_store, exercise_lookup):
    """Container wired to the fakes above, with a zero retry delay."""
    return create_sync_container(
        remote=remote,
        local_store=local_store,
        exercise_lookup=exercise_lookup,
    )
