"""Post endpoints: public reads, owner-or-admin writes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from juice.api.v1.auth import ensure_allowed, get_current_user, get_optional_user, get_role_lookup
from juice.core.database import get_db
from juice.models import Comment, Post
from juice.schemas.auth import CurrentUser
from juice.schemas.comment import CommentCreate, CommentRead, CommentsListResponse
from juice.schemas.post import PostCreate, PostRead, PostsListResponse, PostUpdate
from juice.services.authorization import Action
from juice.services.roles import RoleLookup, is_admin

router = APIRouter()


def get_post_or_404(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.get("", response_model=PostsListResponse)
def list_posts(
    requester: Annotated[CurrentUser | None, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> PostsListResponse:
    """All posts, newest first."""
    ensure_allowed(requester, Action.READ, Post, roles)
    posts = db.query(Post).order_by(Post.created_at.desc(), Post.id.desc()).all()
    return PostsListResponse(posts=[PostRead.model_validate(p) for p in posts])


@router.get("/{post_id}", response_model=PostRead)
def get_post(
    post_id: int,
    requester: Annotated[CurrentUser | None, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> PostRead:
    post = get_post_or_404(db, post_id)
    ensure_allowed(requester, Action.READ, post, roles)
    return PostRead.model_validate(post)


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
def post_post(
    body: PostCreate,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> PostRead:
    """Create a post owned by the authenticated requester."""
    ensure_allowed(requester, Action.CREATE, Post, roles)
    post = Post(title=body.title, body=body.body, user_id=requester.id)
    db.add(post)
    db.commit()
    db.refresh(post)
    return PostRead.model_validate(post)


@router.patch("/{post_id}", response_model=PostRead)
def patch_post(
    post_id: int,
    body: PostUpdate,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> PostRead:
    """Edit title and/or body. Allowed for the owner or an admin."""
    post = get_post_or_404(db, post_id)
    ensure_allowed(requester, Action.UPDATE, post, roles)
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(post, field, value)
    db.commit()
    db.refresh(post)
    return PostRead.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> Response:
    """Delete a post and its comments. Allowed for the owner or an admin."""
    post = get_post_or_404(db, post_id)
    ensure_allowed(requester, Action.DELETE, post, roles)
    db.delete(post)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{post_id}/comments", response_model=CommentsListResponse)
def list_comments(
    post_id: int,
    requester: Annotated[CurrentUser | None, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> CommentsListResponse:
    """Approved comments for visitors; admins also see the moderation queue."""
    post = get_post_or_404(db, post_id)
    ensure_allowed(requester, Action.READ, Comment, roles)
    comments = post.comments
    if not is_admin(requester, roles):
        comments = [c for c in comments if c.approved]
    return CommentsListResponse(
        comments=[CommentRead.model_validate(c) for c in comments]
    )


@router.post(
    "/{post_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
)
def post_comment(
    post_id: int,
    body: CommentCreate,
    requester: Annotated[CurrentUser | None, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> CommentRead:
    """Leave a comment (anyone, including anonymous visitors). It starts unapproved."""
    post = get_post_or_404(db, post_id)
    ensure_allowed(requester, Action.CREATE, Comment, roles)
    comment = Comment(author=body.author, body=body.body, approved=False, post_id=post.id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return CommentRead.model_validate(comment)
