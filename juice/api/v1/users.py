"""User endpoints: public author listing and admin-only account management."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from juice.api.v1.auth import ensure_allowed, get_current_user, get_optional_user, get_role_lookup
from juice.core.database import get_db
from juice.models import Post, User
from juice.schemas.auth import CurrentUser
from juice.schemas.post import PostRead, PostsListResponse
from juice.schemas.user import (
    UserCreate,
    UserDetail,
    UserListItem,
    UsersListResponse,
    UserUpdate,
)
from juice.services.authorization import Action
from juice.services.roles import RoleLookup
from juice.services.users import RoleNotFoundError, UserAlreadyExistsError, create_user, update_user

router = APIRouter()


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("", response_model=UsersListResponse)
def list_users(
    requester: Annotated[CurrentUser | None, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> UsersListResponse:
    """List blog authors (public)."""
    ensure_allowed(requester, Action.READ, User, roles)
    users = db.query(User).order_by(User.id).all()
    return UsersListResponse(users=[UserListItem.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=UserListItem)
def get_user(
    user_id: int,
    requester: Annotated[CurrentUser | None, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> UserListItem:
    user = _get_user_or_404(db, user_id)
    ensure_allowed(requester, Action.READ, user, roles)
    return UserListItem.model_validate(user)


@router.post("", response_model=UserDetail, status_code=status.HTTP_201_CREATED)
def post_user(
    body: UserCreate,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> UserDetail:
    """Create an account (admin only; there is no self-registration)."""
    ensure_allowed(requester, Action.CREATE, User, roles)
    try:
        user = create_user(
            db,
            username=body.username,
            email=body.email,
            password=body.password,
            role_id=body.role_id,
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except RoleNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e
    return UserDetail.model_validate(user)


@router.patch("/{user_id}", response_model=UserDetail)
def patch_user(
    user_id: int,
    body: UserUpdate,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> UserDetail:
    user = _get_user_or_404(db, user_id)
    ensure_allowed(requester, Action.UPDATE, user, roles)
    try:
        user = update_user(db, user, body.model_dump(exclude_unset=True))
    except RoleNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e
    return UserDetail.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> Response:
    """Delete an account together with its posts and sessions (admin only)."""
    user = _get_user_or_404(db, user_id)
    ensure_allowed(requester, Action.DELETE, user, roles)
    db.delete(user)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/posts", response_model=PostsListResponse)
def list_user_posts(
    user_id: int,
    requester: Annotated[CurrentUser | None, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> PostsListResponse:
    """Posts owned by one user, newest first."""
    _get_user_or_404(db, user_id)
    ensure_allowed(requester, Action.READ, Post, roles)
    posts = (
        db.query(Post)
        .filter(Post.user_id == user_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )
    return PostsListResponse(posts=[PostRead.model_validate(p) for p in posts])
