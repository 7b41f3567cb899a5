"""ORM model for login sessions; one row per issued access token."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from juice.models.base import Base, CreatedAtMixin


class UserSession(CreatedAtMixin, Base):
    """Server-side half of a login. Deleting the row logs the token out."""

    __tablename__ = "user_sessions"

    id = Column(String(36), primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
