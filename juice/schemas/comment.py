"""Request/response schemas for comments."""

from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    """Visitor comment. New comments always start unapproved, so there is no approved field."""

    author: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)


class CommentUpdate(BaseModel):
    author: str | None = Field(default=None, min_length=1, max_length=255)
    body: str | None = Field(default=None, min_length=1)


class CommentRead(BaseModel):
    id: int
    author: str
    body: str
    approved: bool
    post_id: int
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class CommentsListResponse(BaseModel):
    comments: list[CommentRead]
