"""ExerciseLookup backed by the cached exercise catalog."""

import logging
from typing import Optional

from application.ports import LocalStore
from domain.models import ExerciseCatalogEntry
from infrastructure.catalog.name_matcher import best_match

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.85


class CatalogExerciseLookup:
    """
    Resolve exercise names against the catalog entries in the local store.

    Returns None below the confidence threshold; callers then fall back to
    a slug of the base name.
    """

    def __init__(self, local_store: LocalStore, threshold: float = DEFAULT_MATCH_THRESHOLD) -> None:
        self._store = local_store
        self._threshold = threshold

    async def resolve(self, exercise_name: str) -> Optional[str]:
        entries = await self._store.query(
            ExerciseCatalogEntry, lambda e: e.canonical_id is not None
        )
        if not entries:
            logger.debug(f"Catalog is empty, cannot resolve {exercise_name!r}")
            return None

        ids_by_name = {entry.name: entry.canonical_id for entry in entries}
        name, confidence = best_match(exercise_name, ids_by_name)

        if name is None or confidence < self._threshold:
            logger.warning(
                f"No catalog match for {exercise_name!r} "
                f"(best {name!r} at {confidence:.2f})"
            )
            return None

        logger.debug(f"Matched {exercise_name!r} -> {name!r} ({confidence:.2f})")
        return ids_by_name[name]
