"""Role resolution: derive a user's admin status from its Role reference."""

from typing import Protocol

from sqlalchemy.orm import Session

from juice.models.role import Role


class HasRoleId(Protocol):
    """Anything carrying a role reference: the ORM User or a CurrentUser."""

    role_id: int | None


class RoleLookup(Protocol):
    """Identity-store lookup of roles by identifier."""

    def get_role(self, role_id: int) -> Role | None:
        """Return the role, or None when no such row exists."""
        ...


class SqlRoleLookup:
    """RoleLookup backed by the request's SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_role(self, role_id: int) -> Role | None:
        return self._db.get(Role, role_id)


def is_admin(user: HasRoleId | None, roles: RoleLookup) -> bool:
    """
    True only when the user references an existing role whose admin flag is set.

    No user, no role_id, or a role_id pointing at a deleted role all resolve
    to False. Database errors from the lookup are not caught.
    """
    if user is None or user.role_id is None:
        return False
    role = roles.get_role(user.role_id)
    if role is None:
        return False
    return bool(role.admin)
