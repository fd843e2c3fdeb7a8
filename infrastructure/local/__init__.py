"""On-device cache implementations."""

from infrastructure.local.sqlite_store import SqliteLocalStore

__all__ = ["SqliteLocalStore"]
