"""In-memory content store.

Notes:
- Per-process only: contents vanish on restart and are not shared between
  workers. Meant for local development (STORE_BACKEND=memory) and tests.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import threading
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Sequence

from app.adapters.store.base import AbstractContentStore, Row


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryContentStore(AbstractContentStore):
    """Dict-backed store mimicking the hosted tables.

    Inserted rows receive a UUID ``id`` and an ISO-8601 ``created_at`` unless
    the caller supplies them, like the hosted tables' column defaults.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._tables: dict[str, list[Row]] = defaultdict(list)

    @staticmethod
    def _project(row: Row, columns: Sequence[str] | None) -> Row:
        if columns is None:
            return dict(row)
        return {column: row.get(column) for column in columns}

    def rows(self, table: str) -> list[Row]:
        """Snapshot of every row in ``table`` (insertion order)."""
        with self._lock:
            return [dict(row) for row in self._tables.get(table, [])]

    async def select_one(
        self,
        table: str,
        *,
        key_column: str,
        key: str,
        columns: Sequence[str],
    ) -> Row | None:
        with self._lock:
            for row in self._tables.get(table, []):
                if row.get(key_column) == key:
                    return self._project(row, columns)
        return None

    async def insert(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        columns: Sequence[str] | None = None,
    ) -> Row:
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", self._clock().isoformat())
        with self._lock:
            self._tables[table].append(stored)
        return self._project(stored, columns)

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        key_column: str,
        key: str,
    ) -> None:
        with self._lock:
            for row in self._tables.get(table, []):
                if row.get(key_column) == key:
                    row.update(values)

    async def select_many(
        self,
        table: str,
        *,
        columns: Sequence[str],
        order_by: str,
        ascending: bool,
        limit: int,
        filters: Mapping[str, Any] | None = None,
    ) -> list[Row]:
        with self._lock:
            matching = [
                row
                for row in self._tables.get(table, [])
                if all(row.get(column) == value for column, value in (filters or {}).items())
            ]
        # ISO-8601 UTC strings sort chronologically
        ordered = sorted(matching, key=lambda row: str(row.get(order_by, "")), reverse=not ascending)
        return [self._project(row, columns) for row in ordered[:limit]]
