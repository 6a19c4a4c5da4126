"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins the environment to ``testing`` and the in-memory store backend
before anything imports the settings.
"""

import itertools
import os
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.adapters.rate_limit.store_backed import StoreFixedWindowRateLimiter
from app.adapters.store.in_memory import InMemoryContentStore
from app.api.deps import get_comment_handler, get_note_handler
from app.core.app_factory import create_app
from app.core.config import settings
from app.core.store import get_content_store
from app.services.submission_service import (
    SubmissionHandler,
    comment_submission_config,
    note_submission_config,
)

# 2023-11-14T22:13:20Z
NOW_MS = 1_700_000_000_000


@pytest.fixture
def clock() -> Mock:
    """Rate limiter clock in epoch milliseconds; tests move it by hand."""
    return Mock(return_value=NOW_MS)


@pytest.fixture
def store() -> InMemoryContentStore:
    """In-memory store whose created_at advances one second per insert."""
    ticks = itertools.count()
    base = datetime(2026, 2, 14, 12, 0, tzinfo=timezone.utc)
    return InMemoryContentStore(clock=lambda: base + timedelta(seconds=next(ticks)))


def _handler_override(config_factory, store, clock):
    def build() -> SubmissionHandler:
        config = config_factory(settings)
        limiter = StoreFixedWindowRateLimiter(store, table=config.rate_limit_table, clock=clock)
        return SubmissionHandler(store, config, limiter=limiter)

    return build


@pytest.fixture
def wall_app(store: InMemoryContentStore, clock: Mock) -> FastAPI:
    """App wired to the fixture store and clock."""
    application = create_app()
    application.dependency_overrides[get_content_store] = lambda: store
    application.dependency_overrides[get_note_handler] = _handler_override(
        note_submission_config, store, clock
    )
    application.dependency_overrides[get_comment_handler] = _handler_override(
        comment_submission_config, store, clock
    )
    return application


@pytest.fixture
def client(wall_app: FastAPI) -> TestClient:
    """Create FastAPI test client."""
    return TestClient(wall_app)
