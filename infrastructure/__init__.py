"""
Infrastructure layer for the workout sync engine.

This package contains concrete implementations of the application ports:
- local/: SQLite on-device cache (LocalStore)
- remote/: httpx REST client for the remote store (RemoteStoreClient)
- catalog/: rapidfuzz name matching over the cached catalog (ExerciseLookup)
"""

from infrastructure.catalog import CatalogExerciseLookup
from infrastructure.local import SqliteLocalStore
from infrastructure.remote import HttpRemoteStoreClient

__all__ = [
    "SqliteLocalStore",
    "HttpRemoteStoreClient",
    "CatalogExerciseLookup",
]
