"""OpenAPI customization utilities.

Adds tags metadata and documents the rate limit response headers, keeping
documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_TAGS = [
    {
        "name": "Love Wall",
        "description": "Notes and threaded comments. Posting is rate limited per client IP.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]

_RETRY_AFTER_HEADER = {
    "description": "Seconds until the client's current rate limit window expires.",
    "schema": {"type": "integer"},
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation.

    - Adds tags metadata if not present
    - Documents ``Retry-After`` on every 429 response
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in _TAGS:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for methods in schema.get("paths", {}).values():
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                throttled = method_obj.get("responses", {}).get("429")
                if throttled is not None:
                    throttled.setdefault("headers", {})["Retry-After"] = _RETRY_AFTER_HEADER

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
