"""Tests for store construction and the cached store dependency."""

import pytest

from app.adapters.store.factory import create_content_store
from app.adapters.store.in_memory import InMemoryContentStore
from app.adapters.store.postgrest import PostgrestContentStore
from app.core import store as store_module
from app.core.config import StoreSettings, settings
from app.core.errors import ConfigurationAppError


class TestCreateContentStore:
    def test_memory_backend(self) -> None:
        assert isinstance(create_content_store(StoreSettings(backend="memory")), InMemoryContentStore)

    def test_postgrest_backend(self) -> None:
        created = create_content_store(
            StoreSettings(backend="postgrest", url="https://store.test", api_key="key")
        )

        assert isinstance(created, PostgrestContentStore)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"url": None, "api_key": "key"},
            {"url": "https://store.test", "api_key": None},
            {"url": "", "api_key": ""},
        ],
    )
    def test_missing_credentials(self, kwargs: dict) -> None:
        with pytest.raises(ConfigurationAppError) as exc_info:
            create_content_store(StoreSettings(backend="postgrest", **kwargs))

        assert exc_info.value.code == "configuration_missing"
        assert exc_info.value.message == "Store environment variables are missing."

    def test_unknown_backend(self) -> None:
        with pytest.raises(ConfigurationAppError, match="Unknown store backend"):
            create_content_store(StoreSettings(backend="mongo"))


class TestGetContentStore:
    @pytest.fixture(autouse=True)
    def _reset_cache(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(store_module, "_store", None)
        monkeypatch.setattr(store_module, "_store_config", None)

    def test_instance_is_reused(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.store, "backend", "memory")

        assert store_module.get_content_store() is store_module.get_content_store()

    def test_rebuilt_when_config_changes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.store, "backend", "memory")
        first = store_module.get_content_store()

        monkeypatch.setattr(settings.store, "timeout_seconds", 3.0)

        assert store_module.get_content_store() is not first

    def test_missing_configuration_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.store, "backend", "postgrest")
        monkeypatch.setattr(settings.store, "url", None)

        with pytest.raises(ConfigurationAppError):
            store_module.get_content_store()

    @pytest.mark.asyncio
    async def test_close_clears_cache(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.store, "backend", "memory")
        store_module.get_content_store()

        await store_module.close_content_store()

        assert store_module._store is None
