"""Exercise catalog reference data."""

from typing import Optional

from pydantic import Field

from domain.models.base import CachedEntity


class ExerciseCatalogEntry(CachedEntity):
    """An exercise known to the remote store. Read-mostly, never created locally."""

    name: str = Field(..., min_length=1)
    category: str = Field(default="FUNCTIONAL")
    has_distance: bool = False
    has_repetitions: bool = False
    standard_distance: Optional[float] = None
    standard_repetitions: Optional[int] = None
