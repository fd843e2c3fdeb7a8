"""Exercise catalog name resolution."""

from infrastructure.catalog.exercise_lookup import CatalogExerciseLookup
from infrastructure.catalog.name_matcher import best_match, normalize_name

__all__ = ["CatalogExerciseLookup", "best_match", "normalize_name"]
