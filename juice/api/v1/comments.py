"""Comment moderation endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from juice.api.v1.auth import ensure_allowed, get_current_user, get_optional_user, get_role_lookup
from juice.core.database import get_db
from juice.models import Comment
from juice.schemas.auth import CurrentUser
from juice.schemas.comment import CommentRead, CommentUpdate
from juice.services.authorization import Action
from juice.services.roles import RoleLookup, is_admin

router = APIRouter()


def _get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    return comment


@router.get("/{comment_id}", response_model=CommentRead)
def get_comment(
    comment_id: int,
    requester: Annotated[CurrentUser | None, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> CommentRead:
    comment = _get_comment_or_404(db, comment_id)
    ensure_allowed(requester, Action.READ, comment, roles)
    # Unapproved comments are only visible to moderators.
    if not comment.approved and not is_admin(requester, roles):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    return CommentRead.model_validate(comment)


@router.patch("/{comment_id}", response_model=CommentRead)
def patch_comment(
    comment_id: int,
    body: CommentUpdate,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> CommentRead:
    """Edit author and/or body. post_id and approved are not editable here."""
    comment = _get_comment_or_404(db, comment_id)
    ensure_allowed(requester, Action.UPDATE, comment, roles)
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(comment, field, value)
    db.commit()
    db.refresh(comment)
    return CommentRead.model_validate(comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: int,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> Response:
    comment = _get_comment_or_404(db, comment_id)
    ensure_allowed(requester, Action.DELETE, comment, roles)
    db.delete(comment)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{comment_id}/approve", response_model=CommentRead)
def approve_comment(
    comment_id: int,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> CommentRead:
    """Mark a comment approved. Idempotent."""
    comment = _get_comment_or_404(db, comment_id)
    ensure_allowed(requester, Action.APPROVE, comment, roles)
    comment.approved = True
    db.commit()
    db.refresh(comment)
    return CommentRead.model_validate(comment)
