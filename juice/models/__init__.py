"""SQLAlchemy ORM models."""

from juice.models.base import Base
from juice.models.comment import Comment
from juice.models.post import Post
from juice.models.role import Role
from juice.models.user import User
from juice.models.user_session import UserSession

__all__ = ["Base", "Comment", "Post", "Role", "User", "UserSession"]
