"""
Base model for entities held in the on-device cache.

Every cached entity carries three pieces of identity/sync state:
- local_id: assigned on this device when the record is created, never changes
- canonical_id: assigned by the remote store once it accepts the record
- is_synced: whether the record's current state is known to the remote store
"""

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def new_local_id() -> str:
    """Generate a fresh device-local identifier."""
    return str(uuid.uuid4())


class CachedEntity(BaseModel):
    """Identity and sync state shared by all cached entities."""

    model_config = ConfigDict(validate_assignment=True)

    local_id: str = Field(
        default_factory=new_local_id,
        description="Device-assigned identifier, stable for the record's lifetime",
    )
    canonical_id: Optional[str] = Field(
        default=None,
        description="Identifier assigned by the remote store. None until first accepted.",
    )
    is_synced: bool = Field(
        default=False,
        description="Whether the remote store has accepted this record",
    )

    @property
    def is_local_only(self) -> bool:
        """True for records the remote store has never seen."""
        return self.canonical_id is None
