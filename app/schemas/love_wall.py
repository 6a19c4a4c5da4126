"""Pydantic schemas for love wall notes and comments."""

from __future__ import annotations

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    """Request body for posting a note (documentation only).

    The body is parsed after rate limiting, so validation happens in the
    submission pipeline rather than through FastAPI body binding.
    """

    name: str = Field(..., description="Poster name, 1-36 characters after trimming.")
    message: str = Field(..., description="Note text, 1-240 characters after trimming.")
    emoji: str | None = Field(default=None, description="Glyph shown on the card.")
    color: str | None = Field(default=None, description="Card color tag (e.g., rose, lilac).")


class CommentCreate(BaseModel):
    """Request body for commenting on a note (documentation only)."""

    name: str = Field(..., description="Poster name, 1-36 characters after trimming.")
    comment: str = Field(..., description="Comment text, 1-200 characters after trimming.")


class Note(BaseModel):
    id: int | str = Field(..., description="Server-generated identifier.")
    name: str
    message: str
    emoji: str | None = None
    color: str | None = None
    created_at: str = Field(..., description="Server-assigned creation timestamp (ISO-8601).")


class Comment(BaseModel):
    id: int | str = Field(..., description="Server-generated identifier.")
    name: str
    comment: str
    created_at: str = Field(..., description="Server-assigned creation timestamp (ISO-8601).")


class NoteResponse(BaseModel):
    data: Note


class NoteListResponse(BaseModel):
    data: list[Note] = Field(default_factory=list, description="Newest first, at most 100.")


class CommentResponse(BaseModel):
    data: Comment


class CommentListResponse(BaseModel):
    data: list[Comment] = Field(default_factory=list, description="Oldest first, at most 50.")


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    error: str = Field(..., description="Human-readable message.")
    code: str = Field(..., description="Stable, machine-readable error code.")
    request_id: str | None = Field(default=None, description="Correlation id of the request.")
