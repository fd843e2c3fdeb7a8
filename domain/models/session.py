"""
Workout session aggregate and its per-exercise results.

A session is created on the device when the athlete starts a workout and is
uploaded once it is completed. Its results are embedded, so deleting the
session removes them with it.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.models.base import CachedEntity, new_local_id


class WorkoutExerciseResult(BaseModel):
    """
    Measured result for one exercise within a session.

    (round, order) is unique within the session and defines the canonical
    ordering used when the remote store assigns identifiers.
    """

    model_config = ConfigDict(validate_assignment=True)

    local_id: str = Field(default_factory=new_local_id)
    canonical_id: Optional[str] = Field(default=None)
    is_synced: bool = Field(default=False)

    round: int = Field(default=1, ge=1, description="Round number (1-based)")
    order: int = Field(default=0, ge=0, description="Position within the round")
    exercise_name: str = Field(..., min_length=1)

    duration: float = Field(default=0, ge=0, description="Elapsed seconds")
    distance: float = Field(default=0, ge=0, description="Distance in meters")
    repetitions: int = Field(default=0, ge=0)
    completed_at: Optional[datetime] = None
    is_personal_best: Optional[bool] = Field(
        default=None,
        description="Set from the remote store when this result is a new best",
    )

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.round, self.order)


class WorkoutSession(CachedEntity):
    """
    A workout performed by the athlete.

    Examples:
        >>> session = WorkoutSession(
        ...     started_at=datetime(2025, 3, 1, 9, 0),
        ...     results=[
        ...         WorkoutExerciseResult(round=1, order=0, exercise_name="Run", distance=1000),
        ...         WorkoutExerciseResult(round=1, order=1, exercise_name="SkiErg", distance=1000),
        ...     ],
        ... )
        >>> session.is_completed
        False
    """

    started_at: datetime
    completed_at: Optional[datetime] = None
    total_duration: float = Field(default=0, ge=0)
    total_distance: float = Field(default=0, ge=0)
    total_rounds: int = Field(default=1, ge=1)
    template_id: Optional[str] = None
    template_name: Optional[str] = None
    results: List[WorkoutExerciseResult] = Field(default_factory=list)

    # Engine-local bookkeeping. Reconciliation never overwrites these.
    upload_in_flight: bool = Field(
        default=False,
        description="A create was sent whose outcome is not yet recorded locally",
    )
    needs_result_push: bool = Field(
        default=False,
        description="Measured results must still be pushed with an update",
    )
    is_deleted: bool = Field(
        default=False,
        description="Deleted by the athlete, remote deletion pending",
    )

    @model_validator(mode="after")
    def validate_result_positions(self) -> "WorkoutSession":
        """(round, order) must be unique within a session."""
        seen = set()
        for result in self.results:
            if result.sort_key in seen:
                raise ValueError(
                    f"Duplicate result position round={result.round} order={result.order}"
                )
            seen.add(result.sort_key)
        return self

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def is_pending_upload(self) -> bool:
        """Completed locally but not yet accepted by the remote store."""
        return self.is_completed and not self.is_synced and not self.is_deleted

    def ordered_results(self) -> List[WorkoutExerciseResult]:
        """Results sorted by (round, order)."""
        return sorted(self.results, key=lambda r: r.sort_key)
