"""Role endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from juice.api.v1.auth import ensure_allowed, get_current_user, get_role_lookup
from juice.core.database import get_db
from juice.models import Role
from juice.schemas.auth import CurrentUser
from juice.schemas.role import RoleCreate, RoleRead, RolesListResponse, RoleUpdate
from juice.services.authorization import Action
from juice.services.roles import RoleLookup
from juice.services.users import RoleAlreadyExistsError, create_role, update_role

router = APIRouter()


def _get_role_or_404(db: Session, role_id: int) -> Role:
    role = db.get(Role, role_id)
    if role is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role not found")
    return role


@router.get("", response_model=RolesListResponse)
def list_roles(
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> RolesListResponse:
    ensure_allowed(requester, Action.READ, Role, roles)
    rows = db.query(Role).order_by(Role.id).all()
    return RolesListResponse(roles=[RoleRead.model_validate(r) for r in rows])


@router.get("/{role_id}", response_model=RoleRead)
def get_role(
    role_id: int,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> RoleRead:
    role = _get_role_or_404(db, role_id)
    ensure_allowed(requester, Action.READ, role, roles)
    return RoleRead.model_validate(role)


@router.post("", response_model=RoleRead, status_code=status.HTTP_201_CREATED)
def post_role(
    body: RoleCreate,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> RoleRead:
    ensure_allowed(requester, Action.CREATE, Role, roles)
    try:
        role = create_role(db, name=body.name, admin=body.admin)
    except RoleAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return RoleRead.model_validate(role)


@router.patch("/{role_id}", response_model=RoleRead)
def patch_role(
    role_id: int,
    body: RoleUpdate,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> RoleRead:
    role = _get_role_or_404(db, role_id)
    ensure_allowed(requester, Action.UPDATE, role, roles)
    try:
        role = update_role(db, role, body.model_dump(exclude_unset=True))
    except RoleAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return RoleRead.model_validate(role)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(
    role_id: int,
    requester: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[RoleLookup, Depends(get_role_lookup)],
) -> Response:
    """
    Delete a role. Users that referenced it keep a dangling or NULL role_id
    and are treated as non-admin from then on.
    """
    role = _get_role_or_404(db, role_id)
    ensure_allowed(requester, Action.DELETE, role, roles)
    db.delete(role)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
