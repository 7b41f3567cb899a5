"""ORM model for post comments."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, false
from sqlalchemy.orm import relationship

from juice.models.base import Base, CreatedAtMixin


class Comment(CreatedAtMixin, Base):
    """
    Visitor comment on a post.

    author is free text (visitors need no account). approved starts False
    and is only set through the approve action.
    """

    __tablename__ = "comments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    author = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    approved = Column(Boolean, nullable=False, default=False, server_default=false())
    post_id = Column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    post = relationship("Post", back_populates="comments")
