"""
Ports for the workout sync engine.

This package defines abstract interfaces that decouple the sync engine from
infrastructure (local database, HTTP transport, catalog matching).
Implementations are provided in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the engine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import LocalStore, RemoteStoreClient

    class SessionFamily:
        def __init__(self, remote: RemoteStoreClient, store: LocalStore):
            ...
"""

# On-device cache
from application.ports.local_store import LocalStore, Transaction

# Authoritative remote store
from application.ports.remote_store import RemoteStoreClient

# Catalog name resolution
from application.ports.exercise_lookup import ExerciseLookup

__all__ = [
    # Local
    "LocalStore",
    "Transaction",
    # Remote
    "RemoteStoreClient",
    # Catalog
    "ExerciseLookup",
]
