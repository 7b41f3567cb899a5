"""Request/response schemas for user management."""

from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    """New account, created by an administrator."""

    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=128)
    role_id: int | None = Field(default=None, description="Role to attach, if any")

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class UserUpdate(BaseModel):
    """Partial update; username is immutable."""

    email: str | None = Field(
        default=None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$"
    )
    password: str | None = Field(default=None, min_length=8, max_length=128)
    role_id: int | None = None


class UserListItem(BaseModel):
    """Public user entry (no email, no password)."""

    id: int
    username: str

    class Config:
        from_attributes = True


class UserDetail(BaseModel):
    """User as seen by administrators."""

    id: int
    username: str
    email: str
    role_id: int | None

    class Config:
        from_attributes = True


class UsersListResponse(BaseModel):
    """Response for GET /users."""

    users: list[UserListItem]
