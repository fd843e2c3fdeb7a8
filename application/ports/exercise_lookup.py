"""
Exercise Lookup Interface (Port).

Resolves the display name of an exercise to its catalog identifier when
building create requests.
"""
from typing import Optional, Protocol


class ExerciseLookup(Protocol):
    """Abstract interface for catalog name resolution."""

    async def resolve(self, exercise_name: str) -> Optional[str]:
        """
        Find the catalog id for an exercise name.

        Args:
            exercise_name: Display name, possibly with parameters ("Row 500m")

        Returns:
            Catalog id, or None when no entry matches well enough
        """
        ...
