"""
Domain layer for the workout sync engine.

This package contains pure domain models and converters that are
independent of infrastructure concerns (local database, HTTP, scheduling).
"""

from domain.models import (
    ExerciseCatalogEntry,
    PersonalBestRecord,
    SyncFamily,
    WorkoutExerciseResult,
    WorkoutSession,
    WorkoutTemplate,
)

__all__ = [
    "ExerciseCatalogEntry",
    "PersonalBestRecord",
    "SyncFamily",
    "WorkoutExerciseResult",
    "WorkoutSession",
    "WorkoutTemplate",
]
