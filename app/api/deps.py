from __future__ import annotations

from fastapi import Depends

from app.adapters.store.base import AbstractContentStore
from app.core.config import settings
from app.core.store import get_content_store
from app.services.submission_service import (
    SubmissionHandler,
    comment_submission_config,
    note_submission_config,
)


def get_note_handler(
    store: AbstractContentStore = Depends(get_content_store),
) -> SubmissionHandler:
    return SubmissionHandler(store, note_submission_config(settings))


def get_comment_handler(
    store: AbstractContentStore = Depends(get_content_store),
) -> SubmissionHandler:
    return SubmissionHandler(store, comment_submission_config(settings))
