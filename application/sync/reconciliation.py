"""
Snapshot reconciliation between the remote store and the local cache.

One engine instance per family. The family adapter knows how to fetch the
remote snapshot and how to map records to cached entities; the engine does
the index/compare/apply work and commits it in a single transaction.
"""

import logging
from typing import Dict, Generic, List, TypeVar

from application.context import SyncContext
from application.ports import LocalStore
from application.sync.families import FamilyAdapter
from application.sync.results import ReconcileResult
from domain.models import CachedEntity

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=CachedEntity)
R = TypeVar("R")


class ReconciliationEngine(Generic[E, R]):
    """
    Make the local cache of one family equal to the remote snapshot.

    Rules:
    - Synced entities whose key is absent remotely are deleted locally.
    - Entities with local changes not yet accepted remotely (unsynced,
      tombstoned, results pending) are never deleted or overwritten.
    - Unknown remote records are inserted; known ones have their
      remote-owned fields overwritten (the remote store always wins).

    Running it twice with no remote change commits nothing the second time.

    Usage:
        >>> engine = ReconciliationEngine(CatalogFamily(remote), store)
        >>> result = await engine.reconcile(context)
        >>> result.added, result.updated, result.removed
    """

    def __init__(self, family_adapter: FamilyAdapter[E, R], local_store: LocalStore) -> None:
        self._adapter = family_adapter
        self._store = local_store

    @property
    def family(self):
        return self._adapter.family

    @property
    def entity_type(self):
        return self._adapter.entity_type

    async def reconcile(self, context: SyncContext) -> ReconcileResult:
        family = self._adapter.family
        result = ReconcileResult(family=family)
        logger.info(f"Reconciling {family.value} for athlete {context.athlete_id}")

        push = await self._adapter.push_pending(context)
        result.uploaded = push.uploaded
        result.errors.extend(push.errors)

        records = await self._adapter.fetch_snapshot(context)
        remote_by_key: Dict[str, R] = {}
        for record in records:
            remote_by_key[self._adapter.remote_key(record)] = record

        local_entities: List[E] = await self._store.query(self._adapter.entity_type)

        async with self._store.transaction() as tx:
            local_by_key: Dict[str, E] = {}
            for entity in local_entities:
                key = self._adapter.local_key(entity)
                if key is None:
                    continue
                if key in local_by_key:
                    # At most one cached entity per key
                    logger.warning(f"Dropping duplicate {family.value} entity for key {key}")
                    tx.delete(entity)
                    result.removed += 1
                    continue
                local_by_key[key] = entity

            for key, entity in local_by_key.items():
                if key in remote_by_key or self._adapter.is_pending(entity):
                    continue
                if entity.is_synced:
                    tx.delete(entity)
                    result.removed += 1

            for key, record in remote_by_key.items():
                entity = local_by_key.get(key)
                if entity is None:
                    tx.insert(self._adapter.to_local(record, context))
                    result.added += 1
                    continue
                if self._adapter.is_pending(entity):
                    continue

                before = entity.model_dump()
                self._adapter.apply_remote(entity, record)
                if entity.model_dump() != before:
                    tx.update(entity)
                    result.updated += 1

        logger.info(f"Reconciled {result.summary()}")
        return result
