"""Content store interface.

Routes and services depend on this abstraction, never on a concrete client,
so a test double can stand in for the hosted store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

Row = dict[str, Any]


class AbstractContentStore(ABC):
    """Async access to tables of the hosted store.

    Implementations must raise ``StoreAppError`` for any failed read or write,
    carrying the store's own message.
    """

    @abstractmethod
    async def select_one(
        self,
        table: str,
        *,
        key_column: str,
        key: str,
        columns: Sequence[str],
    ) -> Row | None:
        """Point lookup by key; ``None`` when no row matches."""
        raise NotImplementedError

    @abstractmethod
    async def insert(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        columns: Sequence[str] | None = None,
    ) -> Row:
        """Insert one row and return it as stored (with server-side defaults).

        Args:
            table: Target table.
            row: Column values to insert.
            columns: Columns to return; all columns when omitted.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        key_column: str,
        key: str,
    ) -> None:
        """Update the row(s) matching ``key_column == key``."""
        raise NotImplementedError

    @abstractmethod
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
        """Ordered, limited range scan with optional equality filters."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources held by the store (no-op by default)."""
        return None
