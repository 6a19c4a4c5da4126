"""Hosted store adapter speaking the PostgREST protocol (e.g., Supabase).

Uses a shared ``httpx.AsyncClient`` with the access key sent both as the
``apikey`` header and as a Bearer token.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import httpx

from app.adapters.store.base import AbstractContentStore, Row
from app.core.errors import StoreAppError

logger = logging.getLogger(__name__)


def _eq(value: Any) -> str:
    return f"eq.{value}"


def _error_message(response: httpx.Response) -> str:
    """Extract the store's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping):
        message = body.get("message") or body.get("error_description") or body.get("error")
        if message:
            return str(message)
    return response.text or f"Store responded with HTTP {response.status_code}"


class PostgrestContentStore(AbstractContentStore):
    """Client for a PostgREST endpoint at ``{url}/rest/v1``."""

    def __init__(
        self,
        *,
        url: str,
        api_key: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            url: Project base URL (without the ``/rest/v1`` suffix).
            api_key: Access key for the store.
            timeout_seconds: Per-request timeout.
            transport: Optional transport override (tests).
        """
        self._client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, f"/{table}", params=params, json=json, headers=headers
            )
        except httpx.TimeoutException as exc:
            logger.error(
                "store.request_timeout",
                extra={"table": table, "method": method, "error_type": type(exc).__name__},
            )
            raise StoreAppError(
                code="store_error",
                message="Store request timed out.",
                details={"table": table},
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "store.request_failed",
                extra={"table": table, "method": method, "error_type": type(exc).__name__},
            )
            raise StoreAppError(
                code="store_error",
                message=str(exc) or "Store request failed.",
                details={"table": table},
            ) from exc

        if response.is_error:
            message = _error_message(response)
            logger.error(
                "store.request_rejected",
                extra={
                    "table": table,
                    "method": method,
                    "status_code": response.status_code,
                    "error_message": message,
                },
            )
            raise StoreAppError(
                code="store_error",
                message=message,
                details={"table": table, "http_status": response.status_code},
            )

        return response

    async def select_one(
        self,
        table: str,
        *,
        key_column: str,
        key: str,
        columns: Sequence[str],
    ) -> Row | None:
        response = await self._request(
            "GET",
            table,
            params={"select": ",".join(columns), key_column: _eq(key), "limit": 1},
        )
        rows = response.json()
        return rows[0] if rows else None

    async def insert(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        columns: Sequence[str] | None = None,
    ) -> Row:
        response = await self._request(
            "POST",
            table,
            params={"select": ",".join(columns) if columns else "*"},
            json=dict(row),
            headers={"Prefer": "return=representation"},
        )
        rows = response.json()
        if not rows:
            raise StoreAppError(
                code="store_error",
                message="Store did not return the inserted row.",
                details={"table": table},
            )
        return rows[0]

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        key_column: str,
        key: str,
    ) -> None:
        await self._request(
            "PATCH",
            table,
            params={key_column: _eq(key)},
            json=dict(values),
            headers={"Prefer": "return=minimal"},
        )

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
        params: dict[str, Any] = {
            "select": ",".join(columns),
            "order": f"{order_by}.{'asc' if ascending else 'desc'}",
            "limit": limit,
        }
        for column, value in (filters or {}).items():
            params[column] = _eq(value)

        response = await self._request("GET", table, params=params)
        return list(response.json())

    async def aclose(self) -> None:
        await self._client.aclose()
