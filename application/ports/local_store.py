"""
Local Store Interface (Port).

This module defines the abstract interface for the on-device cache.
Implementations may use SQLite, in-memory storage, or other backends.

Mutations are staged on a Transaction and committed atomically when the
`transaction()` context exits without an exception. If the block raises,
nothing is written. A failed commit raises LocalStoreError.
"""
from datetime import datetime
from typing import AsyncContextManager, Callable, List, Optional, Protocol, Type, TypeVar

from domain.models import CachedEntity, SyncFamily

E = TypeVar("E", bound=CachedEntity)


class Transaction(Protocol):
    """Staged mutations, applied together on commit."""

    def insert(self, entity: CachedEntity) -> None:
        ...

    def update(self, entity: CachedEntity) -> None:
        ...

    def delete(self, entity: CachedEntity) -> None:
        ...


class LocalStore(Protocol):
    """
    Abstract interface for the on-device entity cache.

    Entities are addressed by type and local_id. Query results are copies;
    mutating them has no effect until they are staged in a transaction.
    """

    def transaction(self) -> AsyncContextManager[Transaction]:
        """
        Open a transaction.

        Usage:
            async with store.transaction() as tx:
                tx.insert(session)
                tx.delete(stale)
        """
        ...

    async def query(
        self,
        entity_type: Type[E],
        predicate: Optional[Callable[[E], bool]] = None,
    ) -> List[E]:
        """
        Load all entities of a type, optionally filtered.

        Args:
            entity_type: Entity class (WorkoutSession, WorkoutTemplate, ...)
            predicate: Optional filter applied to each entity

        Returns:
            Matching entities
        """
        ...

    async def get(self, entity_type: Type[E], local_id: str) -> Optional[E]:
        ...

    async def last_sync_timestamp(self, family: SyncFamily) -> Optional[datetime]:
        """Time of the family's last successful sync, or None if never synced."""
        ...

    async def set_last_sync_timestamp(self, family: SyncFamily, timestamp: datetime) -> None:
        ...
