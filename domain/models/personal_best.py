"""
Personal-best records and the exercise-type key they are indexed by.

The remote store decides whether a result is a new best. The device only
imports whatever the remote store reports, so there is no comparison logic
here.
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import Field

from domain.models.base import CachedEntity


def exercise_type_key(
    exercise_name: str,
    distance: Optional[float] = None,
    repetitions: Optional[int] = None,
) -> str:
    """
    Build the key that identifies "the same exercise" for personal bests.

    The name is lowercased with all whitespace removed, then suffixed with
    the distance if any, else the repetitions if any, else "timeonly".

    Examples:
        >>> exercise_type_key("Row", distance=500)
        'row_500m'
        >>> exercise_type_key("Wall Balls", repetitions=100)
        'wallballs_100reps'
        >>> exercise_type_key("Plank")
        'plank_timeonly'
    """
    clean_name = re.sub(r"\s+", "", exercise_name.lower())

    if distance and distance > 0:
        suffix = f"_{int(round(distance))}m"
    elif repetitions and repetitions > 0:
        suffix = f"_{repetitions}reps"
    else:
        suffix = "_timeonly"

    return f"{clean_name}{suffix}"


class PersonalBestRecord(CachedEntity):
    """Best (lowest) time for one exercise type, as computed by the remote store."""

    athlete_id: str
    exercise_type: str = Field(..., min_length=1)
    value: float = Field(..., description="Lower is better (seconds for timed records)")
    unit: str = Field(default="seconds")
    achieved_at: datetime
    session_id: Optional[str] = Field(
        default=None,
        description="Canonical identifier of the session the record came from",
    )
