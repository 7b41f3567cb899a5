"""ORM model for blog users (authors and administrators)."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from juice.models.base import Base


class User(Base):
    """
    User account for JWT authentication.

    Admin rights are not stored here: they come from the referenced Role
    (see juice.services.roles.is_admin). role_id may be NULL.
    """

    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    posts = relationship(
        "Post", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    sessions = relationship(
        "UserSession", cascade="all, delete-orphan", passive_deletes=True
    )
