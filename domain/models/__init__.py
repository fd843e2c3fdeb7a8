"""
Domain models for the workout sync engine.

This package contains pure models that are independent of infrastructure
concerns (local database, HTTP transport).

Cached entities (held in the on-device store):
- WorkoutSession: a performed workout with its WorkoutExerciseResult rows
- WorkoutTemplate: a plan made of TemplateExerciseSpec rows
- PersonalBestRecord: best time per exercise type, computed remotely
- ExerciseCatalogEntry: exercise reference data

Remote records (RemoteSession, RemoteTemplate, ...) mirror the remote
store's JSON and are converted by domain.converters.

Usage:
    >>> from datetime import datetime
    >>> from domain.models import WorkoutSession, WorkoutExerciseResult

    >>> session = WorkoutSession(
    ...     started_at=datetime(2025, 3, 1, 9, 0),
    ...     results=[WorkoutExerciseResult(exercise_name="Run", distance=1000)],
    ... )
    >>> session.is_synced
    False
"""

from domain.models.base import CachedEntity, new_local_id
from domain.models.catalog import ExerciseCatalogEntry
from domain.models.family import SyncFamily
from domain.models.personal_best import PersonalBestRecord, exercise_type_key
from domain.models.remote import (
    RemoteCatalogEntry,
    RemoteExerciseRef,
    RemoteExerciseResult,
    RemotePersonalBest,
    RemoteSession,
    RemoteTemplate,
    RemoteTemplateExercise,
    RemoteTemplateRef,
    SessionCreate,
    SessionExerciseCreate,
    SessionExerciseUpdate,
    SessionUpdate,
    TemplateCreate,
    TemplateExerciseCreate,
)
from domain.models.session import WorkoutExerciseResult, WorkoutSession
from domain.models.template import TemplateExerciseSpec, WorkoutTemplate

__all__ = [
    # Cached entities
    "CachedEntity",
    "WorkoutSession",
    "WorkoutExerciseResult",
    "WorkoutTemplate",
    "TemplateExerciseSpec",
    "PersonalBestRecord",
    "ExerciseCatalogEntry",
    # Families
    "SyncFamily",
    # Remote records
    "RemoteSession",
    "RemoteExerciseResult",
    "RemoteExerciseRef",
    "RemoteTemplate",
    "RemoteTemplateExercise",
    "RemoteTemplateRef",
    "RemotePersonalBest",
    "RemoteCatalogEntry",
    # Request payloads
    "SessionCreate",
    "SessionExerciseCreate",
    "SessionUpdate",
    "SessionExerciseUpdate",
    "TemplateCreate",
    "TemplateExerciseCreate",
    # Helpers
    "exercise_type_key",
    "new_local_id",
]
