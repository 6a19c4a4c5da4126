"""Rate limiter interfaces.

The submission pipeline depends on this abstraction (not the concrete
implementation) so the counter storage can change without touching it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    async def consume(
        self,
        key: str,
        *,
        window_ms: int,
        max_requests: int,
        now_ms: int | None = None,
    ) -> RateLimitResult:
        """Consume one unit of budget for ``key`` under the given window.

        Args:
            key: Client identifier (e.g., IP address).
            window_ms: Window length in milliseconds.
            max_requests: Requests accepted per window.
            now_ms: Current time as UNIX epoch milliseconds (defaults to the
                limiter's clock).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
