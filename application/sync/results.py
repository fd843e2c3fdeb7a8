"""Values returned by sync passes and coordinator runs."""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from domain.models import SyncFamily


@dataclass
class PushResult:
    """Outcome of a family's push phase (local changes sent to the remote store)."""

    uploaded: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class ReconcileResult:
    """Counts of the mutations one reconciliation pass committed."""

    family: SyncFamily
    added: int = 0
    updated: int = 0
    removed: int = 0
    uploaded: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated or self.removed or self.uploaded)

    def summary(self) -> str:
        text = (
            f"{self.family.value}: +{self.added} ~{self.updated} -{self.removed} "
            f"uploaded={self.uploaded}"
        )
        if self.errors:
            text += f" errors={len(self.errors)}"
        return text


class RunStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    RETRY_SCHEDULED = "retry_scheduled"
    SKIPPED = "skipped"
    UP_TO_DATE = "up_to_date"


@dataclass
class RunOutcome:
    """
    Result of asking for a sync pass.

    RETRY_SCHEDULED means the first attempt failed with a retryable error and
    a second attempt is pending. Await `wait()` for the final outcome.
    """

    family: SyncFamily
    status: RunStatus
    result: Optional[ReconcileResult] = None
    error: Optional[BaseException] = None
    attempts: int = 0
    pending: Optional["asyncio.Task[RunOutcome]"] = field(default=None, repr=False)

    @property
    def outstanding(self) -> bool:
        return self.pending is not None and not self.pending.done()

    @property
    def succeeded(self) -> bool:
        return self.status == RunStatus.SUCCEEDED

    async def wait(self) -> "RunOutcome":
        """Final outcome once any scheduled retry has settled."""
        if self.pending is None:
            return self
        return await asyncio.shield(self.pending)

    def to_dict(self) -> dict:
        return {
            "family": self.family.value,
            "status": self.status.value,
            "attempts": self.attempts,
            "outstanding": self.outstanding,
            "error": str(self.error) if self.error else None,
            "result": (
                {
                    "added": self.result.added,
                    "updated": self.result.updated,
                    "removed": self.result.removed,
                    "uploaded": self.result.uploaded,
                    "errors": list(self.result.errors),
                }
                if self.result
                else None
            ),
        }
