"""
Unit tests for catalog name matching and CatalogExerciseLookup.
"""

import pytest

from domain.converters import remote_catalog_to_local
from infrastructure.catalog import CatalogExerciseLookup, best_match, normalize_name
from tests.fakes import make_remote_exercise

CATALOG = ["Run", "SkiErg", "RowErg", "Wall Balls", "Sled Push", "Burpee Broad Jump", "Pull-ups"]


@pytest.mark.unit
class TestNormalizeName:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Row 500m", "row"),
            ("Wall Balls 100 reps", "wall balls"),
            ("Pull-ups", "pull ups"),
            ("  Sled_Push!! ", "sled push"),
            ("", ""),
        ],
    )
    def test_normalize(self, name, expected):
        assert normalize_name(name) == expected


@pytest.mark.unit
class TestBestMatch:
    def test_exact_after_normalization(self):
        assert best_match("wall balls 100 reps", CATALOG) == ("Wall Balls", 1.0)

    def test_spaces_ignored(self):
        assert best_match("Ski Erg", CATALOG) == ("SkiErg", 1.0)

    def test_alias(self):
        assert best_match("Rowing 1000m", CATALOG) == ("RowErg", 1.0)

    def test_fuzzy_match_scores_below_one(self):
        choice, confidence = best_match("Burpee Broad Jumps", CATALOG)

        assert choice == "Burpee Broad Jump"
        assert 0.85 <= confidence < 1.0

    def test_empty_query(self):
        assert best_match("", CATALOG) == (None, 0.0)

    def test_no_choices(self):
        assert best_match("Run", []) == (None, 0.0)


@pytest.mark.unit
class TestCatalogExerciseLookup:
    @pytest.fixture
    def seeded_store(self, local_store):
        local_store.seed([
            remote_catalog_to_local(make_remote_exercise("ex-run", "Run")),
            remote_catalog_to_local(make_remote_exercise("ex-wall-balls", "Wall Balls")),
        ])
        return local_store

    @pytest.mark.asyncio
    async def test_resolves_by_name(self, seeded_store):
        lookup = CatalogExerciseLookup(seeded_store)

        assert await lookup.resolve("Wall Balls 100 reps") == "ex-wall-balls"

    @pytest.mark.asyncio
    async def test_low_confidence_returns_none(self, seeded_store):
        lookup = CatalogExerciseLookup(seeded_store)

        assert await lookup.resolve("Farmers Carry") is None

    @pytest.mark.asyncio
    async def test_threshold_is_configurable(self, seeded_store):
        lookup = CatalogExerciseLookup(seeded_store, threshold=0.0)

        assert await lookup.resolve("Farmers Carry") is not None

    @pytest.mark.asyncio
    async def test_empty_catalog_returns_none(self, local_store):
        assert await CatalogExerciseLookup(local_store).resolve("Run") is None
