"""Request/response schemas for login sessions."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=8, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    session_id: str = Field(..., description="Session id; DELETE /sessions/{id} logs out")


class CurrentUser(BaseModel):
    """Authenticated requester (id, username, role_id) for dependency injection."""

    id: int
    username: str
    role_id: int | None = None

    class Config:
        from_attributes = True
