"""
Converters: remote store records <-> cached domain entities.

Provides the conversions used by the reconciliation families:

- remote_*_to_local: build a new cached entity from a remote record
- apply_remote_*: overwrite the remote-owned fields of an existing entity
  in place. Engine bookkeeping fields (upload_in_flight, needs_result_push,
  is_deleted) are never touched.
- *_to_create_request / *_to_update_request: build request payloads from
  local entities

All converters are pure functions with no side effects beyond mutating the
entity passed to apply_remote_*.
"""

import re
from typing import List, Mapping, Optional

from domain.models import (
    ExerciseCatalogEntry,
    PersonalBestRecord,
    RemoteCatalogEntry,
    RemoteExerciseResult,
    RemotePersonalBest,
    RemoteSession,
    RemoteTemplate,
    SessionCreate,
    SessionExerciseCreate,
    SessionExerciseUpdate,
    SessionUpdate,
    TemplateCreate,
    TemplateExerciseCreate,
    TemplateExerciseSpec,
    WorkoutExerciseResult,
    WorkoutSession,
    WorkoutTemplate,
)

_DISTANCE_SUFFIX = re.compile(r"\s\d+m\b")
_REPS_SUFFIX = re.compile(r"\s\d+\s?reps?\b", re.IGNORECASE)


# =============================================================================
# Exercise names
# =============================================================================


def base_exercise_name(exercise_name: str) -> str:
    """
    Strip distance and repetition parameters from a display name.

    Examples:
        >>> base_exercise_name("Row 500m")
        'Row'
        >>> base_exercise_name("Wall Balls 100 reps")
        'Wall Balls'
    """
    name = _DISTANCE_SUFFIX.sub("", exercise_name)
    name = _REPS_SUFFIX.sub("", name)
    return name.strip()


def fallback_exercise_id(exercise_name: str) -> str:
    """Slug used as exercise id when the catalog has no match ("Sled Push" -> "sled-push")."""
    return base_exercise_name(exercise_name).lower().replace(" ", "-")


# =============================================================================
# Sessions
# =============================================================================


def _remote_result_to_local(
    remote: RemoteExerciseResult,
    existing: Optional[WorkoutExerciseResult] = None,
) -> WorkoutExerciseResult:
    result = WorkoutExerciseResult(
        canonical_id=remote.id,
        is_synced=True,
        round=remote.round or 1,
        order=remote.order,
        exercise_name=remote.exercise.name,
        duration=remote.duration_completed or 0,
        distance=remote.distance_completed or 0,
        repetitions=remote.reps_completed or 0,
        completed_at=remote.completed_at,
        is_personal_best=remote.is_personal_best,
    )
    if existing is not None:
        # Keep the device identifier so local references stay valid
        result.local_id = existing.local_id
        if remote.round is None:
            # The remote store has no rounds; keep the local position
            result.round = existing.round
            result.order = existing.order
        if remote.is_personal_best is None:
            result.is_personal_best = existing.is_personal_best
    return result


def _remote_results(
    remote: RemoteSession,
    existing: Optional[List[WorkoutExerciseResult]] = None,
) -> List[WorkoutExerciseResult]:
    by_canonical = {r.canonical_id: r for r in existing or [] if r.canonical_id}
    rows = sorted(remote.exercises, key=lambda e: e.order)

    # Local positions are only kept when every remote row is already known,
    # otherwise remote positions are used for all rows
    if not rows or not all(e.id in by_canonical for e in rows):
        by_canonical = {}
    return [_remote_result_to_local(e, by_canonical.get(e.id)) for e in rows]


def remote_session_to_local(remote: RemoteSession) -> WorkoutSession:
    """Build a synced cached session from a remote record (deep copy of children)."""
    results = _remote_results(remote)
    return WorkoutSession(
        canonical_id=remote.id,
        is_synced=True,
        started_at=remote.started_at,
        completed_at=remote.completed_at,
        total_duration=remote.total_duration or 0,
        total_distance=remote.total_distance,
        template_id=remote.template.id if remote.template else remote.template_id,
        template_name=remote.template.name if remote.template else remote.name,
        total_rounds=max([r.round for r in results], default=1),
        results=results,
    )


def apply_remote_session(session: WorkoutSession, remote: RemoteSession) -> None:
    """Overwrite remote-owned session fields; the remote record always wins."""
    results = _remote_results(remote, session.results)

    session.canonical_id = remote.id
    session.is_synced = True
    session.started_at = remote.started_at
    session.completed_at = remote.completed_at
    session.total_duration = remote.total_duration or 0
    session.total_distance = remote.total_distance
    session.template_id = remote.template.id if remote.template else remote.template_id
    session.template_name = remote.template.name if remote.template else remote.name
    session.total_rounds = max([r.round for r in results], default=session.total_rounds)
    session.results = results


def session_to_create_request(
    session: WorkoutSession,
    exercise_ids: Mapping[str, str],
) -> SessionCreate:
    """
    Build the create payload for a completed session.

    Results are sent in (round, order) order with a sequential order field
    0..n-1. The remote store assigns result identifiers in that same order,
    which is what IdentityRemapper relies on.

    Args:
        session: Local session to upload
        exercise_ids: exercise_name -> catalog id, for every result name
    """
    exercises: List[SessionExerciseCreate] = []
    for index, result in enumerate(session.ordered_results()):
        exercises.append(
            SessionExerciseCreate(
                exercise_id=exercise_ids.get(result.exercise_name)
                or fallback_exercise_id(result.exercise_name),
                order=index,
                target_reps=result.repetitions or None,
                target_duration=int(result.duration) or None,
                target_distance=result.distance or None,
            )
        )

    return SessionCreate(
        template_id=session.template_id,
        name=session.template_name,
        started_at=session.started_at,
        exercises=exercises,
    )


def session_to_update_request(session: WorkoutSession) -> SessionUpdate:
    """Build the update payload carrying measured values, keyed by canonical result ids."""
    exercises = [
        SessionExerciseUpdate(
            id=result.canonical_id,
            reps_completed=result.repetitions or None,
            duration_completed=int(result.duration) or None,
            distance_completed=result.distance or None,
            completed_at=result.completed_at,
        )
        for result in session.ordered_results()
        if result.canonical_id is not None
    ]

    return SessionUpdate(
        completed_at=session.completed_at,
        total_duration=int(session.total_duration) or None,
        exercises=exercises,
    )


# =============================================================================
# Templates
# =============================================================================


def _remote_template_exercises(remote: RemoteTemplate) -> List[TemplateExerciseSpec]:
    return [
        TemplateExerciseSpec(
            exercise_name=e.exercise.name,
            order=e.order,
            target_distance=e.target_distance,
            target_repetitions=e.target_reps,
            target_duration=e.target_duration,
        )
        for e in sorted(remote.exercises, key=lambda e: e.order)
    ]


def remote_template_to_local(remote: RemoteTemplate) -> WorkoutTemplate:
    """Build a synced cached template from a remote record."""
    template = WorkoutTemplate(
        canonical_id=remote.id,
        is_synced=True,
        name=remote.name,
        rounds=remote.rounds,
        is_personal=remote.is_personal,
        coach_id=remote.coach_id,
        exercises=_remote_template_exercises(remote),
    )
    if remote.created_at is not None:
        template.created_at = remote.created_at
    return template


def apply_remote_template(template: WorkoutTemplate, remote: RemoteTemplate) -> None:
    """Overwrite remote-owned template fields."""
    template.canonical_id = remote.id
    template.is_synced = True
    template.name = remote.name
    template.rounds = remote.rounds
    template.is_personal = remote.is_personal
    template.coach_id = remote.coach_id
    template.exercises = _remote_template_exercises(remote)
    if remote.created_at is not None:
        template.created_at = remote.created_at


def template_to_create_request(
    template: WorkoutTemplate,
    exercise_ids: Mapping[str, str],
) -> TemplateCreate:
    """Build the create payload for a personal template."""
    return TemplateCreate(
        name=template.name,
        rounds=template.rounds,
        exercises=[
            TemplateExerciseCreate(
                exercise_id=exercise_ids.get(spec.exercise_name)
                or fallback_exercise_id(spec.exercise_name),
                order=spec.order,
                target_repetitions=spec.target_repetitions,
                target_distance=int(spec.target_distance) if spec.target_distance else None,
                target_time=int(spec.target_duration) if spec.target_duration else None,
            )
            for spec in template.ordered_exercises()
        ],
    )


# =============================================================================
# Personal bests
# =============================================================================


def remote_personal_best_to_local(
    remote: RemotePersonalBest,
    athlete_id: str,
) -> PersonalBestRecord:
    return PersonalBestRecord(
        canonical_id=remote.id,
        is_synced=True,
        athlete_id=athlete_id,
        exercise_type=remote.exercise_type,
        value=remote.value,
        unit=remote.unit,
        achieved_at=remote.achieved_at,
        session_id=remote.workout_id,
    )


def apply_remote_personal_best(record: PersonalBestRecord, remote: RemotePersonalBest) -> None:
    """Import the remote value as-is. No better/worse comparison happens here."""
    record.canonical_id = remote.id
    record.is_synced = True
    record.value = remote.value
    record.unit = remote.unit
    record.achieved_at = remote.achieved_at
    record.session_id = remote.workout_id


# =============================================================================
# Catalog
# =============================================================================


def remote_catalog_to_local(remote: RemoteCatalogEntry) -> ExerciseCatalogEntry:
    return ExerciseCatalogEntry(
        canonical_id=remote.id,
        is_synced=True,
        name=remote.name,
        category=remote.category,
        has_distance=remote.has_distance,
        has_repetitions=remote.has_repetitions,
        standard_distance=remote.standard_distance,
        standard_repetitions=remote.standard_repetitions,
    )


def apply_remote_catalog(entry: ExerciseCatalogEntry, remote: RemoteCatalogEntry) -> None:
    entry.canonical_id = remote.id
    entry.is_synced = True
    entry.name = remote.name
    entry.category = remote.category
    entry.has_distance = remote.has_distance
    entry.has_repetitions = remote.has_repetitions
    entry.standard_distance = remote.standard_distance
    entry.standard_repetitions = remote.standard_repetitions

