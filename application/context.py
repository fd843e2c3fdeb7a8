"""Explicit per-athlete context threaded through every sync call."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SyncContext:
    """
    Who is syncing and with what credentials.

    Attributes:
        athlete_id: Remote identifier of the athlete whose data is mirrored
        auth_token: Bearer token for the remote store (None in tests)
    """

    athlete_id: str
    auth_token: Optional[str] = field(default=None, repr=False)

    @property
    def auth_headers(self) -> dict:
        if not self.auth_token:
            return {}
        return {"Authorization": f"Bearer {self.auth_token}"}
