"""
SQLite-backed LocalStore.

Entities are stored as JSON documents keyed by (kind, local_id), where kind
is the entity class name. Per-family sync timestamps live in their own table.
Blocking sqlite3 calls run in a worker thread, one at a time.
"""

import asyncio
import logging
import sqlite3
import threading
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Callable, Dict, Iterator, List, Optional, Tuple, Type, TypeVar, Union

from application.exceptions import LocalStoreError
from domain.models import (
    CachedEntity,
    ExerciseCatalogEntry,
    PersonalBestRecord,
    SyncFamily,
    WorkoutSession,
    WorkoutTemplate,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=CachedEntity)

ENTITY_TYPES: Tuple[Type[CachedEntity], ...] = (
    WorkoutSession,
    WorkoutTemplate,
    PersonalBestRecord,
    ExerciseCatalogEntry,
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS entities (
    kind TEXT NOT NULL,
    local_id TEXT NOT NULL,
    canonical_id TEXT,
    payload TEXT NOT NULL,
    PRIMARY KEY (kind, local_id)
);

CREATE INDEX IF NOT EXISTS idx_entities_canonical ON entities (kind, canonical_id);

CREATE TABLE IF NOT EXISTS sync_state (
    family TEXT PRIMARY KEY,
    last_sync TEXT NOT NULL
);
"""

Operation = Tuple[str, CachedEntity]


class StagedTransaction:
    """Collects mutations; SqliteLocalStore applies them on commit."""

    def __init__(self) -> None:
        self.operations: List[Operation] = []

    def insert(self, entity: CachedEntity) -> None:
        self.operations.append(("insert", entity.model_copy(deep=True)))

    def update(self, entity: CachedEntity) -> None:
        self.operations.append(("update", entity.model_copy(deep=True)))

    def delete(self, entity: CachedEntity) -> None:
        self.operations.append(("delete", entity))


class SqliteLocalStore:
    """
    LocalStore implementation on a single SQLite file.

    Usage:
        >>> store = SqliteLocalStore("~/.workout-sync/cache.db")
        >>> async with store.transaction() as tx:
        ...     tx.insert(session)
        >>> sessions = await store.query(WorkoutSession)
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._is_memory = str(path) == ":memory:"
        self.path = Path(path).expanduser() if not self._is_memory else Path(":memory:")
        if not self._is_memory:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._shared_conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()
        self._ensure_schema()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        if self._is_memory:
            if self._shared_conn is None:
                self._shared_conn = sqlite3.connect(":memory:", check_same_thread=False)
            yield self._shared_conn
        else:
            conn = sqlite3.connect(self.path)
            try:
                yield conn
            finally:
                conn.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            conn.executescript(SCHEMA)
            conn.commit()

    def _locked(self, func: Callable, *args):
        with self._lock:
            return func(*args)

    async def _run(self, func: Callable, *args):
        try:
            return await asyncio.to_thread(self._locked, func, *args)
        except sqlite3.Error as e:
            logger.error(f"Local store error: {e}")
            raise LocalStoreError(f"Local store error: {e}") from e

    # Transactions

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StagedTransaction]:
        tx = StagedTransaction()
        yield tx
        if tx.operations:
            await self._run(self._commit, tx.operations)

    def _commit(self, operations: List[Operation]) -> None:
        with self._connection() as conn:
            try:
                for op, entity in operations:
                    kind = type(entity).__name__
                    if op == "insert":
                        conn.execute(
                            "INSERT INTO entities (kind, local_id, canonical_id, payload) VALUES (?, ?, ?, ?)",
                            (kind, entity.local_id, entity.canonical_id, entity.model_dump_json()),
                        )
                    elif op == "update":
                        conn.execute(
                            "UPDATE entities SET canonical_id = ?, payload = ? WHERE kind = ? AND local_id = ?",
                            (entity.canonical_id, entity.model_dump_json(), kind, entity.local_id),
                        )
                    else:
                        conn.execute(
                            "DELETE FROM entities WHERE kind = ? AND local_id = ?",
                            (kind, entity.local_id),
                        )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

    # Queries

    def _load(self, kind: str, local_id: Optional[str] = None) -> List[str]:
        with self._connection() as conn:
            if local_id is None:
                rows = conn.execute(
                    "SELECT payload FROM entities WHERE kind = ? ORDER BY rowid", (kind,)
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT payload FROM entities WHERE kind = ? AND local_id = ?", (kind, local_id)
                ).fetchall()
        return [row[0] for row in rows]

    async def query(
        self,
        entity_type: Type[E],
        predicate: Optional[Callable[[E], bool]] = None,
    ) -> List[E]:
        payloads = await self._run(self._load, entity_type.__name__)
        entities = [entity_type.model_validate_json(p) for p in payloads]
        if predicate is not None:
            entities = [e for e in entities if predicate(e)]
        return entities

    async def get(self, entity_type: Type[E], local_id: str) -> Optional[E]:
        payloads = await self._run(self._load, entity_type.__name__, local_id)
        if not payloads:
            return None
        return entity_type.model_validate_json(payloads[0])

    # Sync timestamps

    def _read_timestamp(self, family: str) -> Optional[str]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT last_sync FROM sync_state WHERE family = ?", (family,)
            ).fetchone()
        return row[0] if row else None

    def _write_timestamp(self, family: str, value: str) -> None:
        with self._connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO sync_state (family, last_sync) VALUES (?, ?)",
                (family, value),
            )
            conn.commit()

    async def last_sync_timestamp(self, family: SyncFamily) -> Optional[datetime]:
        value = await self._run(self._read_timestamp, family.value)
        if value is None:
            return None
        return datetime.fromisoformat(value)

    async def set_last_sync_timestamp(self, family: SyncFamily, timestamp: datetime) -> None:
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        await self._run(self._write_timestamp, family.value, timestamp.isoformat())

    def counts(self) -> Dict[str, int]:
        """Number of cached entities per kind (diagnostics)."""
        with self._lock, self._connection() as conn:
            rows = conn.execute("SELECT kind, COUNT(*) FROM entities GROUP BY kind").fetchall()
        counts = {t.__name__: 0 for t in ENTITY_TYPES}
        counts.update({kind: count for kind, count in rows})
        return counts
