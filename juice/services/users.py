"""User and role management shared by the HTTP API and the create_user CLI."""

from sqlalchemy.orm import Session

from juice.core.security import hash_password
from juice.models import Role, User


class AccountError(Exception):
    """Base error for user/role management; message is safe to show to clients."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserAlreadyExistsError(AccountError):
    pass


class RoleAlreadyExistsError(AccountError):
    pass


class RoleNotFoundError(AccountError):
    pass


def _check_role_exists(db: Session, role_id: int | None) -> None:
    if role_id is not None and db.get(Role, role_id) is None:
        raise RoleNotFoundError(f"Role {role_id} does not exist.")


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    role_id: int | None = None,
) -> User:
    """Create and commit a user. Raises AccountError subclasses on a blank or taken username or an unknown role."""
    username = username.strip()
    if not username:
        raise AccountError("Username must not be blank.")
    if db.query(User).filter(User.username == username).first() is not None:
        raise UserAlreadyExistsError(f"User '{username}' already exists.")
    _check_role_exists(db, role_id)
    user = User(
        username=username,
        email=email.strip(),
        password_hash=hash_password(password),
        role_id=role_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(
    db: Session,
    user: User,
    changes: dict,
) -> User:
    """Apply a partial update (email, password, role_id) and commit."""
    if "role_id" in changes:
        _check_role_exists(db, changes["role_id"])
        user.role_id = changes["role_id"]
    if changes.get("email") is not None:
        user.email = changes["email"].strip()
    if changes.get("password") is not None:
        user.password_hash = hash_password(changes["password"])
    db.commit()
    db.refresh(user)
    return user


def create_role(db: Session, name: str, admin: bool = False) -> Role:
    """Create and commit a role. Raises RoleAlreadyExistsError on a duplicate name."""
    name = name.strip()
    if not name:
        raise AccountError("Role name must not be blank.")
    if db.query(Role).filter(Role.name == name).first() is not None:
        raise RoleAlreadyExistsError(f"Role '{name}' already exists.")
    role = Role(name=name, admin=admin)
    db.add(role)
    db.commit()
    db.refresh(role)
    return role


def update_role(db: Session, role: Role, changes: dict) -> Role:
    """Apply a partial update (name, admin) and commit."""
    name = changes.get("name")
    if name is not None and name.strip() != role.name:
        name = name.strip()
        if db.query(Role).filter(Role.name == name).first() is not None:
            raise RoleAlreadyExistsError(f"Role '{name}' already exists.")
        role.name = name
    if changes.get("admin") is not None:
        role.admin = changes["admin"]
    db.commit()
    db.refresh(role)
    return role


def get_or_create_role(db: Session, name: str, admin: bool = False) -> Role:
    """Return the named role, creating it if missing. An existing role is promoted when admin=True."""
    role = db.query(Role).filter(Role.name == name).first()
    if role is None:
        return create_role(db, name, admin=admin)
    if admin and not role.admin:
        role.admin = True
        db.commit()
        db.refresh(role)
    return role
