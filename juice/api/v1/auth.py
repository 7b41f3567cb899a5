"""Login/logout (sessions) and auth dependencies (get_current_user, ensure_allowed)."""

import logging
from typing import Annotated, Any

import jwt
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from juice.core.database import get_db
from juice.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    decode_access_token,
    verify_password,
)
from juice.models import User, UserSession
from juice.schemas.auth import CurrentUser, LoginRequest, TokenResponse
from juice.services.authorization import Action, can_perform
from juice.services.roles import RoleLookup, SqlRoleLookup
from juice.services.sessions import close_session, find_session, open_session

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def _validate_username(username: str) -> None:
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid username length.",
        )


def _validate_password(password: str) -> None:
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid password length.",
        )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_role_lookup(db: Annotated[Session, Depends(get_db)]) -> RoleLookup:
    """Dependency: role lookup bound to the request's DB session."""
    return SqlRoleLookup(db)


def ensure_allowed(
    requester: CurrentUser | None,
    action: Action,
    resource: Any,
    roles: RoleLookup,
) -> None:
    """Raise 403 unless can_perform allows the action."""
    if not can_perform(requester, action, resource, roles).allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )


def _resolve_user(token: str, db: Session) -> CurrentUser:
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    sub = payload.get("sub")
    session_id = payload.get("sid")
    if not sub or not session_id:
        raise _unauthorized("Invalid token payload")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")
    if find_session(db, str(session_id), user_id) is None:
        raise _unauthorized("Session has ended")
    user = db.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found")
    return CurrentUser(id=user.id, username=user.username, role_id=user.role_id)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT with a live session. Raises 401 if missing or invalid."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    return _resolve_user(credentials.credentials, db)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser | None:
    """
    Dependency for public routes: None when no Authorization header is sent.
    A token that is sent but invalid is still rejected with 401.
    """
    if credentials is None:
        return None
    return _resolve_user(credentials.credentials, db)


@router.post("", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with username and password; opens a session and returns a JWT for it.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    _validate_username(body.username)
    _validate_password(body.password)

    user = db.query(User).filter(User.username == body.username).first()
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("Login failed for username=%s", body.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )
    session, token = open_session(db, user)
    return TokenResponse(access_token=token, token_type="bearer", session_id=session.id)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    session_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> Response:
    """End a session. Users may end their own sessions; admins may end any."""
    session = db.get(UserSession, session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    ensure_allowed(current_user, Action.DELETE, session, roles)
    close_session(db, session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
