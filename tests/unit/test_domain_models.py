"""
Unit tests for the cached domain models.

Tests for:
- CachedEntity identity defaults
- WorkoutSession result ordering and position uniqueness
- exercise_type_key
- SyncFamily.parse
- remote record aliases
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from domain.models import (
    RemoteSession,
    SessionCreate,
    SyncFamily,
    TemplateExerciseSpec,
    WorkoutExerciseResult,
    WorkoutSession,
    exercise_type_key,
)
from tests.fakes import make_session

pytestmark = pytest.mark.unit


class TestCachedEntity:
    def test_new_session_is_local_only(self):
        session = make_session()

        assert session.local_id
        assert session.canonical_id is None
        assert session.is_synced is False
        assert session.is_local_only is True

    def test_local_ids_are_unique(self):
        assert make_session().local_id != make_session().local_id


class TestWorkoutSession:
    def test_ordered_results_sorts_by_round_then_order(self):
        session = make_session(
            results=[
                (2, 0, "Wall Balls", 300.0, 0.0, 100),
                (1, 1, "SkiErg", 250.0, 1000.0, 0),
                (1, 0, "Run", 240.0, 1000.0, 0),
            ]
        )

        assert [r.sort_key for r in session.ordered_results()] == [(1, 0), (1, 1), (2, 0)]

    def test_duplicate_position_is_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate result position"):
            WorkoutSession(
                started_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
                results=[
                    WorkoutExerciseResult(round=1, order=0, exercise_name="Run"),
                    WorkoutExerciseResult(round=1, order=0, exercise_name="SkiErg"),
                ],
            )

    def test_pending_upload_requires_completion(self):
        assert make_session(completed=False).is_pending_upload is False
        assert make_session().is_pending_upload is True

    def test_deleted_session_is_not_pending_upload(self):
        assert make_session(is_deleted=True).is_pending_upload is False

    def test_bookkeeping_flags_default_off(self):
        session = make_session()

        assert session.upload_in_flight is False
        assert session.needs_result_push is False
        assert session.is_deleted is False


class TestExerciseTypeKey:
    """Key shared by personal bests for "the same exercise"."""

    @pytest.mark.parametrize(
        "name,distance,repetitions,expected",
        [
            ("Row", 500, None, "row_500m"),
            ("Wall Balls", None, 100, "wallballs_100reps"),
            ("Plank", None, None, "plank_timeonly"),
            ("Ski Erg", 1000, 20, "skierg_1000m"),
            ("Run", 0, 0, "run_timeonly"),
        ],
    )
    def test_key(self, name, distance, repetitions, expected):
        assert exercise_type_key(name, distance=distance, repetitions=repetitions) == expected


class TestSyncFamily:
    def test_parse_accepts_dashes_and_case(self):
        assert SyncFamily.parse("Personal-Bests") == SyncFamily.PERSONAL_BESTS
        assert SyncFamily.parse("sessions") == SyncFamily.SESSIONS

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError):
            SyncFamily.parse("workouts")


class TestTemplateExerciseSpec:
    def test_display_name_includes_targets(self):
        assert TemplateExerciseSpec(exercise_name="Row", target_distance=500).display_name == "Row : 500m"
        assert (
            TemplateExerciseSpec(exercise_name="Wall Balls", target_repetitions=100).display_name
            == "Wall Balls : 100 reps"
        )


class TestRemoteRecords:
    def test_camel_case_keys_are_accepted(self):
        record = RemoteSession.model_validate(
            {
                "id": "w-1",
                "startedAt": "2025-03-01T09:00:00Z",
                "completedAt": "2025-03-01T09:30:00Z",
                "unknownField": 1,
                "exercises": [
                    {"id": "e-1", "order": 0, "exercise": {"name": "Run"}, "distanceCompleted": 1000},
                ],
            }
        )

        assert record.completed_at is not None
        assert record.exercises[0].round is None
        assert record.total_distance == 1000

    def test_payload_dumps_with_aliases(self):
        payload = SessionCreate(started_at=datetime(2025, 3, 1, tzinfo=timezone.utc))

        dumped = payload.model_dump(mode="json", by_alias=True, exclude_none=True)

        assert "startedAt" in dumped
        assert "templateId" not in dumped
