"""Rate-limited submission pipeline shared by notes and comments.

Both content types follow the same strictly ordered protocol, differing only
in the parameters carried by ``SubmissionConfig``:

1. Consume a rate limit slot for the client (deny → 429, body untouched).
2. Parse the body as a JSON object (failure → 400, slot stays consumed).
3. Validate and default the fields (failure → 400, slot stays consumed).
4. Insert the row and return it as stored (failure → 500).

Listing is a separate, unlimited read path.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.store_backed import StoreFixedWindowRateLimiter
from app.adapters.store.base import AbstractContentStore, Row
from app.core.config import Settings
from app.core.errors import MalformedPayloadError, RateLimitedAppError
from app.core.logging import hash_identifier
from app.services.content_validator import ContentConstraints, FieldRule, validate_fields

logger = logging.getLogger(__name__)

NOTE_COLUMNS = ("id", "name", "message", "emoji", "color", "created_at")
COMMENT_COLUMNS = ("id", "name", "comment", "created_at")


@dataclass(frozen=True)
class SubmissionConfig:
    """Everything that differs between the note and comment pipelines.

    Attributes:
        kind: Content type label used in logs ("note", "comment").
        table: Content table rows are inserted into and listed from.
        rate_limit_table: Table holding per-client rate limit rows.
        window_ms: Rate limit window length in milliseconds.
        max_requests: Accepted submissions per client per window.
        constraints: Validation rules and messages for the payload.
        columns: Columns returned on insert and listing.
        rate_limited_message: Template with a ``{retry_after}`` placeholder.
        list_limit: Hard cap on rows returned by listing.
        list_ascending: Listing order by ``created_at``.
    """

    kind: str
    table: str
    rate_limit_table: str
    window_ms: int
    max_requests: int
    constraints: ContentConstraints
    columns: tuple[str, ...]
    rate_limited_message: str
    list_limit: int
    list_ascending: bool


def note_submission_config(settings: Settings) -> SubmissionConfig:
    """Pipeline parameters for top-level notes."""
    app = settings.app
    return SubmissionConfig(
        kind="note",
        table=settings.store.notes_table,
        rate_limit_table=settings.store.rate_limits_table,
        window_ms=app.note_rate_limit_window_ms,
        max_requests=app.note_rate_limit_max_requests,
        constraints=ContentConstraints(
            fields=(
                FieldRule("name", max_length=app.max_name_chars),
                FieldRule("message", max_length=app.max_message_chars),
                FieldRule("emoji", required=False, default=app.default_emoji),
                FieldRule("color", required=False, default=app.default_color),
            ),
            missing_message="Name and message are required.",
            too_long_message="Message is too long.",
        ),
        columns=NOTE_COLUMNS,
        rate_limited_message="Too many posts. Try again in {retry_after}s.",
        list_limit=app.notes_list_limit,
        list_ascending=False,
    )


def comment_submission_config(settings: Settings) -> SubmissionConfig:
    """Pipeline parameters for comments on a note."""
    app = settings.app
    return SubmissionConfig(
        kind="comment",
        table=settings.store.comments_table,
        rate_limit_table=settings.store.rate_limits_table,
        window_ms=app.comment_rate_limit_window_ms,
        max_requests=app.comment_rate_limit_max_requests,
        constraints=ContentConstraints(
            fields=(
                FieldRule("name", max_length=app.max_name_chars),
                FieldRule("comment", max_length=app.max_comment_chars),
            ),
            missing_message="Name and comment are required.",
            too_long_message="Comment is too long.",
        ),
        columns=COMMENT_COLUMNS,
        rate_limited_message="Too many comments. Try again in {retry_after}s.",
        list_limit=app.comments_list_limit,
        list_ascending=True,
    )


def parse_payload(raw_body: bytes | str) -> dict[str, Any]:
    """Decode a request body that must hold a JSON object.

    Raises:
        MalformedPayloadError: Body is not valid JSON or not an object.
    """
    try:
        payload = json.loads(raw_body)
    except ValueError as exc:
        raise MalformedPayloadError(
            code="invalid_payload",
            message="Invalid JSON payload.",
        ) from exc

    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            code="invalid_payload",
            message="Invalid JSON payload.",
            details={"hint": "Body must be a JSON object"},
        )
    return payload


class SubmissionHandler:
    """Runs the rate-limited submission protocol for one content type."""

    def __init__(
        self,
        store: AbstractContentStore,
        config: SubmissionConfig,
        *,
        limiter: AbstractRateLimiter | None = None,
    ) -> None:
        self.store = store
        self.config = config
        self.limiter = limiter or StoreFixedWindowRateLimiter(
            store, table=config.rate_limit_table
        )

    async def _enforce_rate_limit(self, client_id: str) -> None:
        result = await self.limiter.consume(
            client_id,
            window_ms=self.config.window_ms,
            max_requests=self.config.max_requests,
        )
        log_extra = {
            "kind": self.config.kind,
            "client_hash": hash_identifier(client_id),
            "limit": result.limit,
            "remaining": result.remaining,
            "window_ms": self.config.window_ms,
        }

        if result.allowed:
            logger.info("rate_limit.allowed", extra=log_extra)
            return

        retry_after = result.retry_after_seconds or 0
        logger.warning("rate_limit.exceeded", extra={**log_extra, "retry_after_s": retry_after})
        raise RateLimitedAppError(
            code="rate_limited",
            message=self.config.rate_limited_message.format(retry_after=retry_after),
            details={"retry_after": retry_after},
            retry_after_seconds=retry_after,
        )

    async def submit(
        self,
        client_id: str,
        raw_body: bytes | str,
        *,
        extra_fields: Mapping[str, Any] | None = None,
    ) -> Row:
        """Accept one submission and return the stored record.

        Args:
            client_id: Rate limit key derived from the request.
            raw_body: Unparsed request body.
            extra_fields: Server-side columns merged into the row (e.g., the
                parent note id of a comment).

        Returns:
            The inserted row, restricted to ``config.columns``.

        Raises:
            RateLimitedAppError: The client exhausted its window budget.
            MalformedPayloadError: Body is not a JSON object.
            ValidationAppError: A field is missing or too long.
            StoreAppError: A store read or write failed.
        """
        await self._enforce_rate_limit(client_id)

        payload = parse_payload(raw_body)
        fields = validate_fields(payload, self.config.constraints)

        row = {**(extra_fields or {}), **fields}
        created = await self.store.insert(self.config.table, row, columns=self.config.columns)

        logger.info(
            "submission.created",
            extra={
                "kind": self.config.kind,
                "record_id": created.get("id"),
                "client_hash": hash_identifier(client_id),
            },
        )
        return created


async def list_recent(
    store: AbstractContentStore,
    config: SubmissionConfig,
    *,
    filters: Mapping[str, Any] | None = None,
) -> list[Row]:
    """Return up to ``config.list_limit`` rows ordered by ``created_at``."""
    return await store.select_many(
        config.table,
        columns=config.columns,
        order_by="created_at",
        ascending=config.list_ascending,
        limit=config.list_limit,
        filters=filters,
    )
