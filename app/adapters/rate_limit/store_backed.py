"""Fixed-window rate limiter persisted in the content store.

Notes:
- One row per key holding ``count`` and ``reset_at`` (ISO-8601 UTC).
- Windows start at a key's first request and are reset lazily on the next
  request after expiry; rows are never deleted.
- Read-then-write, no atomic increment: concurrent requests for the same key
  can both read the same count and both be admitted. Accepted tradeoff.
- Store failures propagate as ``StoreAppError``; they never allow or deny.
"""

from __future__ import annotations

import math
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.adapters.store.base import AbstractContentStore

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def _now_ms() -> int:
    return int(time.time() * 1000)


def format_timestamp_ms(epoch_ms: int) -> str:
    """Render epoch milliseconds as an ISO-8601 UTC string with millisecond precision."""
    moment = _EPOCH + timedelta(milliseconds=epoch_ms)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp_ms(value: Any) -> int | None:
    """Parse a stored ``reset_at`` into epoch milliseconds.

    Returns ``None`` for anything unparseable (wrong type, empty, garbage).
    Naive timestamps are read as UTC.

    Examples:
        >>> parse_timestamp_ms("1970-01-01T00:01:00.000Z")
        60000
        >>> parse_timestamp_ms("not a date") is None
        True
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // _ONE_MS


class StoreFixedWindowRateLimiter(AbstractRateLimiter):
    """Per-key fixed-window limiter whose state lives in a store table.

    Bursts around a window boundary can admit up to ``2 * max_requests``
    requests; this limiter favours simplicity over precision.
    """

    def __init__(
        self,
        store: AbstractContentStore,
        *,
        table: str,
        key_column: str = "ip",
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Store holding the rate limit rows.
            table: Rate limit table name.
            key_column: Column holding the client identifier.
            clock: Time source returning UNIX time in milliseconds.
        """
        self._store = store
        self._table = table
        self._key_column = key_column
        self._clock = clock

    async def _start_window(self, key: str, *, now_ms: int, window_ms: int, exists: bool) -> int:
        reset_at_ms = now_ms + window_ms
        values = {"count": 1, "reset_at": format_timestamp_ms(reset_at_ms)}
        if exists:
            await self._store.update(
                self._table, values, key_column=self._key_column, key=key
            )
        else:
            await self._store.insert(self._table, {self._key_column: key, **values})
        return reset_at_ms

    async def consume(
        self,
        key: str,
        *,
        window_ms: int,
        max_requests: int,
        now_ms: int | None = None,
    ) -> RateLimitResult:
        """Check the key's window and record the request when allowed.

        Raises:
            ValueError: If key is empty or the window/limit are invalid.
            StoreAppError: If reading or writing the rate limit row fails.
        """
        if not key:
            raise ValueError("key must be a non-empty string")
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")

        now = self._clock() if now_ms is None else now_ms

        record = await self._store.select_one(
            self._table,
            key_column=self._key_column,
            key=key,
            columns=(self._key_column, "count", "reset_at"),
        )

        if record is None:
            reset_at_ms = await self._start_window(
                key, now_ms=now, window_ms=window_ms, exists=False
            )
            return self._allowed(max_requests, count=1, reset_at_ms=reset_at_ms)

        reset_at_ms = parse_timestamp_ms(record.get("reset_at"))
        # An unreadable reset_at counts as an expired window (fails open)
        if reset_at_ms is None or now > reset_at_ms:
            reset_at_ms = await self._start_window(
                key, now_ms=now, window_ms=window_ms, exists=True
            )
            return self._allowed(max_requests, count=1, reset_at_ms=reset_at_ms)

        count = int(record.get("count") or 0)
        if count >= max_requests:
            retry_after = math.ceil((reset_at_ms - now) / 1000)
            return RateLimitResult(
                allowed=False,
                limit=max_requests,
                remaining=0,
                reset_at=math.ceil(reset_at_ms / 1000),
                retry_after_seconds=retry_after,
            )

        await self._store.update(
            self._table,
            {"count": count + 1},
            key_column=self._key_column,
            key=key,
        )
        return self._allowed(max_requests, count=count + 1, reset_at_ms=reset_at_ms)

    @staticmethod
    def _allowed(limit: int, *, count: int, reset_at_ms: int) -> RateLimitResult:
        return RateLimitResult(
            allowed=True,
            limit=limit,
            remaining=max(0, limit - count),
            reset_at=math.ceil(reset_at_ms / 1000),
            retry_after_seconds=None,
        )
