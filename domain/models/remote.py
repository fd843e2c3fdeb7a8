"""
Records and request payloads exchanged with the remote store.

These mirror the remote store's JSON (camelCase keys). Field names are
snake_case in Python; aliases are generated, and either form is accepted
when validating.

Usage:
    >>> record = RemoteSession.model_validate(
    ...     {"id": "w-1", "startedAt": "2025-03-01T09:00:00Z", "exercises": []}
    ... )
    >>> sorted(record.model_dump(by_alias=True, exclude_none=True))
    ['exercises', 'id', 'startedAt']
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RemoteModel(BaseModel):
    """Base for remote payloads: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Canonical records (responses)
# =============================================================================


class RemoteExerciseRef(RemoteModel):
    """Catalog exercise embedded in session and template records."""

    id: Optional[str] = None
    name: str
    category: Optional[str] = None


class RemoteExerciseResult(RemoteModel):
    """One exercise row of a remote session."""

    id: str
    order: int
    round: Optional[int] = None
    exercise: RemoteExerciseRef
    reps_completed: Optional[int] = None
    duration_completed: Optional[float] = None
    distance_completed: Optional[float] = None
    completed_at: Optional[datetime] = None
    is_personal_best: Optional[bool] = None


class RemoteTemplateRef(RemoteModel):
    id: str
    name: Optional[str] = None


class RemoteSession(RemoteModel):
    """A workout session as stored remotely."""

    id: str
    name: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    total_duration: Optional[float] = None
    template_id: Optional[str] = None
    template: Optional[RemoteTemplateRef] = None
    exercises: List[RemoteExerciseResult] = Field(default_factory=list)

    @property
    def total_distance(self) -> float:
        return sum(e.distance_completed or 0 for e in self.exercises)


class RemoteTemplateExercise(RemoteModel):
    id: Optional[str] = None
    order: int = 0
    exercise: RemoteExerciseRef
    target_distance: Optional[float] = None
    target_reps: Optional[int] = None
    target_duration: Optional[float] = None


class RemoteTemplate(RemoteModel):
    """A template as stored remotely (personal or coach-assigned)."""

    id: str
    name: str
    rounds: int = 1
    is_personal: bool = True
    coach_id: Optional[str] = None
    created_at: Optional[datetime] = None
    exercises: List[RemoteTemplateExercise] = Field(default_factory=list)


class RemotePersonalBest(RemoteModel):
    """A personal best computed by the remote store."""

    id: str
    exercise_type: str
    value: float
    unit: str = "seconds"
    achieved_at: datetime
    workout_id: Optional[str] = None


class RemoteCatalogEntry(RemoteModel):
    """An exercise catalog entry."""

    id: str
    name: str
    category: str = "FUNCTIONAL"
    has_distance: bool = False
    has_repetitions: bool = False
    standard_distance: Optional[float] = None
    standard_repetitions: Optional[int] = None


# =============================================================================
# Request payloads
# =============================================================================


class SessionExerciseCreate(RemoteModel):
    exercise_id: str
    order: int
    target_reps: Optional[int] = None
    target_duration: Optional[int] = None
    target_distance: Optional[float] = None


class SessionCreate(RemoteModel):
    """Create request for a session. Exercises are sent in canonical order."""

    template_id: Optional[str] = None
    name: Optional[str] = None
    started_at: datetime
    exercises: List[SessionExerciseCreate] = Field(default_factory=list)


class SessionExerciseUpdate(RemoteModel):
    id: str
    reps_completed: Optional[int] = None
    duration_completed: Optional[int] = None
    distance_completed: Optional[float] = None
    completed_at: Optional[datetime] = None


class SessionUpdate(RemoteModel):
    """Partial update for a session (measured values after completion)."""

    completed_at: Optional[datetime] = None
    total_duration: Optional[int] = None
    exercises: Optional[List[SessionExerciseUpdate]] = None


class TemplateExerciseCreate(RemoteModel):
    exercise_id: str
    order: int
    target_repetitions: Optional[int] = None
    target_distance: Optional[int] = None
    target_time: Optional[int] = None


class TemplateCreate(RemoteModel):
    name: str
    rounds: int
    exercises: List[TemplateExerciseCreate] = Field(default_factory=list)
