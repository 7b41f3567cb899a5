"""Login sessions: issue, revoke, resolve, and prune expired rows."""

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from juice.core.security import create_access_token, token_expiry
from juice.models import User, UserSession

if TYPE_CHECKING:
    from juice.core.config import Settings

logger = logging.getLogger(__name__)


def open_session(db: Session, user: User) -> tuple[UserSession, str]:
    """Persist a session for user and return it with its signed access token."""
    now = datetime.now(UTC)
    session_id = str(uuid.uuid4())
    expires_at = token_expiry(now)
    session = UserSession(
        id=session_id,
        user_id=user.id,
        created_at=now,
        expires_at=expires_at,
    )
    db.add(session)
    db.commit()
    token = create_access_token(sub=user.id, session_id=session_id, expires_at=expires_at)
    logger.info("Session opened: user_id=%s session_id=%s", user.id, session_id)
    return session, token


def find_session(db: Session, session_id: str, user_id: int) -> UserSession | None:
    """Return the live session row for a token's (sid, sub) pair, if it still exists."""
    return (
        db.query(UserSession)
        .filter(UserSession.id == session_id, UserSession.user_id == user_id)
        .first()
    )


def close_session(db: Session, session: UserSession) -> None:
    """Delete the session row; its token stops working immediately."""
    user_id, session_id = session.user_id, session.id
    db.delete(session)
    db.commit()
    logger.info("Session closed: user_id=%s session_id=%s", user_id, session_id)


def run_session_cleanup(session: Session, settings: "Settings") -> int:
    """
    Delete sessions whose expires_at is in the past.

    Returns the number of rows deleted. Idempotent: safe to run repeatedly.
    """
    if not settings.SESSION_CLEANUP_ENABLED:
        logger.info("Session cleanup is disabled (SESSION_CLEANUP_ENABLED=false); skipping.")
        return 0

    cutoff = datetime.now(UTC)
    deleted_count = (
        session.query(UserSession)
        .filter(UserSession.expires_at < cutoff)
        .delete(synchronize_session=False)
    )
    session.commit()

    if deleted_count > 0:
        logger.info(
            "Session cleanup run: cutoff=%s, sessions_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
