"""
Domain converters between remote store records and cached entities.

- remote_*_to_local / apply_remote_*: remote record -> cached entity
- *_to_create_request / *_to_update_request: cached entity -> request payload

All converters are pure functions.

Examples:
    >>> from domain.converters import remote_session_to_local, session_to_create_request
    >>> session = remote_session_to_local(remote_record)
    >>> payload = session_to_create_request(session, exercise_ids={"Run": "run"})
"""

from domain.converters.remote_converters import (
    apply_remote_catalog,
    apply_remote_personal_best,
    apply_remote_session,
    apply_remote_template,
    base_exercise_name,
    fallback_exercise_id,
    remote_catalog_to_local,
    remote_personal_best_to_local,
    remote_session_to_local,
    remote_template_to_local,
    session_to_create_request,
    session_to_update_request,
    template_to_create_request,
)

__all__ = [
    "remote_session_to_local",
    "apply_remote_session",
    "session_to_create_request",
    "session_to_update_request",
    "remote_template_to_local",
    "apply_remote_template",
    "template_to_create_request",
    "remote_personal_best_to_local",
    "apply_remote_personal_best",
    "remote_catalog_to_local",
    "apply_remote_catalog",
    "base_exercise_name",
    "fallback_exercise_id",
]
