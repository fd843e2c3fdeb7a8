"""Workout templates, either authored by the athlete or assigned by a coach."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.models.base import CachedEntity


class TemplateExerciseSpec(BaseModel):
    """One planned exercise in a template."""

    exercise_name: str = Field(..., min_length=1)
    order: int = Field(default=0, ge=0)
    target_distance: Optional[float] = Field(default=None, ge=0)
    target_repetitions: Optional[int] = Field(default=None, ge=0)
    target_duration: Optional[float] = Field(default=None, ge=0)

    @property
    def display_name(self) -> str:
        """Name with its targets, e.g. "Row : 500m" or "Wall Balls : 100 reps"."""
        parts = [self.exercise_name]
        if self.target_distance:
            parts.append(f"{int(self.target_distance)}m")
        if self.target_repetitions:
            parts.append(f"{self.target_repetitions} reps")
        return " : ".join(parts)


class WorkoutTemplate(CachedEntity):
    """
    A reusable workout plan.

    Coach-assigned templates arrive from the remote store and are read-only
    to the athlete. Personal templates can be created on the device and are
    uploaded by the templates family.
    """

    name: str = Field(..., min_length=1, max_length=200)
    rounds: int = Field(default=1, ge=1)
    exercises: List[TemplateExerciseSpec] = Field(default_factory=list)
    is_personal: bool = Field(default=True)
    coach_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    upload_in_flight: bool = Field(
        default=False,
        description="Create sent to the remote store, response not yet recorded",
    )
    is_deleted: bool = Field(
        default=False,
        description="Deleted by the athlete, remote deletion pending",
    )

    @property
    def is_read_only(self) -> bool:
        return not self.is_personal

    def ordered_exercises(self) -> List[TemplateExerciseSpec]:
        return sorted(self.exercises, key=lambda e: e.order)
