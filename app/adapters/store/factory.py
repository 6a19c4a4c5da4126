"""Factory for creating content store instances."""

from app.adapters.store.base import AbstractContentStore
from app.adapters.store.in_memory import InMemoryContentStore
from app.adapters.store.postgrest import PostgrestContentStore
from app.core.config import StoreSettings
from app.core.errors import ConfigurationAppError


def create_content_store(store_settings: StoreSettings) -> AbstractContentStore:
    """Instantiate the store client for the configured backend.

    Args:
        store_settings: Resolved ``STORE_*`` settings.

    Returns:
        AbstractContentStore: Configured store.

    Raises:
        ConfigurationAppError: If the backend is unknown or the hosted store's
            URL or access key is missing.
    """
    backend = store_settings.backend.lower()

    if backend == "memory":
        return InMemoryContentStore()

    if backend == "postgrest":
        if not store_settings.url or not store_settings.api_key:
            raise ConfigurationAppError(
                code="configuration_missing",
                message="Store environment variables are missing.",
                details={"hint": "Set STORE_URL and STORE_API_KEY, or STORE_BACKEND=memory"},
            )
        return PostgrestContentStore(
            url=store_settings.url,
            api_key=store_settings.api_key,
            timeout_seconds=store_settings.timeout_seconds,
        )

    raise ConfigurationAppError(
        code="configuration_missing",
        message=f"Unknown store backend: '{backend}'. Supported backends: postgrest, memory",
    )
