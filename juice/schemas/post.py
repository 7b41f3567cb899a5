"""Request/response schemas for blog posts."""

from datetime import datetime

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    """New post; the owner is always the authenticated requester."""

    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1, description="Markdown text")


class PostUpdate(BaseModel):
    """Partial update. There is no owner field: ownership never transfers."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    body: str | None = Field(default=None, min_length=1)


class PostRead(BaseModel):
    id: int
    title: str
    body: str
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class PostsListResponse(BaseModel):
    posts: list[PostRead]
