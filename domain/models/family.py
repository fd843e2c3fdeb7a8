"""Entity families reconciled by the sync engine."""

from enum import Enum


class SyncFamily(str, Enum):
    """A group of cached entities reconciled together in one pass."""

    SESSIONS = "sessions"
    TEMPLATES = "templates"
    PERSONAL_BESTS = "personal_bests"
    CATALOG = "catalog"

    @classmethod
    def parse(cls, value: str) -> "SyncFamily":
        """Parse a family key, accepting dashes in place of underscores."""
        return cls(value.strip().lower().replace("-", "_"))
