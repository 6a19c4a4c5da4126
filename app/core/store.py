"""Store dependency for FastAPI routes.

Routes receive the store through ``Depends(get_content_store)`` so tests can
swap in an in-memory store via ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging

from app.adapters.store.base import AbstractContentStore
from app.adapters.store.factory import create_content_store
from app.core.config import settings

logger = logging.getLogger(__name__)


_store: AbstractContentStore | None = None
_store_config: tuple[str, str | None, str | None, float] | None = None


def get_content_store() -> AbstractContentStore:
    """Return a process-wide store client.

    The instance is cached in-module so the HTTP connection pool is reused.
    If configuration changes (primarily in tests), the store is rebuilt.

    Raises:
        ConfigurationAppError: When the store credentials are missing. FastAPI
            resolves this dependency before the route body runs, so such
            requests fail before any rate limiting.
    """

    global _store, _store_config

    cfg = settings.store
    config = (cfg.backend, cfg.url, cfg.api_key, cfg.timeout_seconds)

    if _store is None or _store_config != config:
        _store = create_content_store(cfg)
        _store_config = config
        logger.info("store.initialized", extra={"backend": cfg.backend})

    return _store


async def close_content_store() -> None:
    """Close the cached store client, if one was created."""

    global _store, _store_config

    if _store is not None:
        await _store.aclose()
    _store = None
    _store_config = None
