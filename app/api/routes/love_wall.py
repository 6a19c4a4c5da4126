from fastapi import APIRouter, Depends, Request, status

from app.adapters.store.base import AbstractContentStore
from app.api.deps import get_comment_handler, get_note_handler
from app.core.config import settings
from app.core.rate_limit import get_client_id
from app.core.store import get_content_store
from app.schemas.love_wall import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    ErrorResponse,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
)
from app.services.submission_service import (
    SubmissionHandler,
    comment_submission_config,
    list_recent,
    note_submission_config,
)

router = APIRouter(tags=["Love Wall"])

_STORE_ERRORS = {500: {"model": ErrorResponse, "description": "Store failure or missing configuration"}}
_SUBMISSION_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid JSON, missing field or content too long"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded; see Retry-After"},
    **_STORE_ERRORS,
}


def _json_body(model) -> dict:
    # The body is read manually after rate limiting; document it explicitly.
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


@router.get("/love-wall", response_model=NoteListResponse, responses=_STORE_ERRORS)
async def list_notes(
    store: AbstractContentStore = Depends(get_content_store),
) -> NoteListResponse:
    """Return the most recent notes, newest first."""
    rows = await list_recent(store, note_submission_config(settings))
    return NoteListResponse(data=rows)


@router.post(
    "/love-wall",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_SUBMISSION_ERRORS,
    openapi_extra=_json_body(NoteCreate),
)
async def create_note(
    request: Request,
    handler: SubmissionHandler = Depends(get_note_handler),
    client_id: str = Depends(get_client_id),
) -> NoteResponse:
    """Post a note to the wall.

    Every request consumes a rate limit slot, including rejected ones.
    Missing ``emoji``/``color`` fall back to the configured defaults.
    """
    note = await handler.submit(client_id, await request.body())
    return NoteResponse(data=note)


@router.get(
    "/love-wall/{note_id}/comments",
    response_model=CommentListResponse,
    responses=_STORE_ERRORS,
)
async def list_comments(
    note_id: str,
    store: AbstractContentStore = Depends(get_content_store),
) -> CommentListResponse:
    """Return a note's comments, oldest first."""
    rows = await list_recent(
        store,
        comment_submission_config(settings),
        filters={"note_id": note_id},
    )
    return CommentListResponse(data=rows)


@router.post(
    "/love-wall/{note_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_SUBMISSION_ERRORS,
    openapi_extra=_json_body(CommentCreate),
)
async def create_comment(
    note_id: str,
    request: Request,
    handler: SubmissionHandler = Depends(get_comment_handler),
    client_id: str = Depends(get_client_id),
) -> CommentResponse:
    """Comment on a note. The note id is not checked for existence."""
    comment = await handler.submit(
        client_id,
        await request.body(),
        extra_fields={"note_id": note_id},
    )
    return CommentResponse(data=comment)
