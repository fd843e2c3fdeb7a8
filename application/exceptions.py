"""
Sync error hierarchy.

Adapters translate transport and storage failures into these types so that
the engine and the RetryCoordinator can classify them without knowing about
httpx or sqlite3.

Retryable:
- ConnectivityError: remote store unreachable or timed out
- RemoteServerError: remote store answered with a 5xx

Terminal:
- RemoteRejectedError: remote store refused the request (4xx other than 404)
- RemapFailure: identifiers could not be remapped after a create
- LocalStoreError: a local commit or query failed
"""

from typing import Optional


class SyncError(Exception):
    """Base class for all sync engine errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConnectivityError(SyncError):
    """The remote store could not be reached."""

    pass


class RemoteError(SyncError):
    """The remote store answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteServerError(RemoteError):
    """5xx from the remote store."""

    pass


class RemoteRejectedError(RemoteError):
    """The remote store rejected the request (401, 403, 422, ...)."""

    pass


class RemoteNotFoundError(RemoteError):
    """The remote entity does not exist (404)."""

    def __init__(self, message: str, status_code: Optional[int] = 404):
        super().__init__(message, status_code)


class RemapFailure(SyncError):
    """
    Local identifiers could not be replaced with canonical ones.

    The session keeps its upload_in_flight flag, so the next pass recovers
    by natural key instead of creating the session again.
    """

    def __init__(self, message: str, session_local_id: Optional[str] = None):
        super().__init__(message)
        self.session_local_id = session_local_id


class LocalStoreError(SyncError):
    """A local store commit or query failed."""

    pass


def is_retryable_error(exception: BaseException) -> bool:
    """
    Determine if an exception is worth one more attempt.

    Only transient remote failures are retried. Rejections, remap failures,
    local store failures and unknown exceptions are surfaced immediately.
    """
    return isinstance(exception, (ConnectivityError, RemoteServerError))
