"""Pydantic request/response schemas."""

from juice.schemas.auth import CurrentUser, LoginRequest, TokenResponse
from juice.schemas.comment import (
    CommentCreate,
    CommentRead,
    CommentsListResponse,
    CommentUpdate,
)
from juice.schemas.health import HealthResponse
from juice.schemas.post import PostCreate, PostRead, PostsListResponse, PostUpdate
from juice.schemas.role import RoleCreate, RoleRead, RolesListResponse, RoleUpdate
from juice.schemas.user import (
    UserCreate,
    UserDetail,
    UserListItem,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "CommentCreate",
    "CommentRead",
    "CommentUpdate",
    "CommentsListResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "PostCreate",
    "PostRead",
    "PostUpdate",
    "PostsListResponse",
    "RoleCreate",
    "RoleRead",
    "RoleUpdate",
    "RolesListResponse",
    "TokenResponse",
    "UserCreate",
    "UserDetail",
    "UserListItem",
    "UserUpdate",
    "UsersListResponse",
]
