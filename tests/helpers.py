"""Shared test helpers: in-memory SQLite database and model builders."""

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from juice.core.database import create_db_engine
from juice.models import Base, Role, User
from juice.schemas.auth import CurrentUser


def make_engine() -> Engine:
    """Fresh in-memory database with all tables; one shared connection."""
    engine = create_db_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def make_session_factory() -> sessionmaker:
    engine = make_engine()
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


class FakeRoleLookup:
    """In-memory RoleLookup keyed by role id."""

    def __init__(self, *roles: Role) -> None:
        self._roles = {r.id: r for r in roles}
        self.calls: list[int] = []

    def get_role(self, role_id: int) -> Role | None:
        self.calls.append(role_id)
        return self._roles.get(role_id)


def requester(user_id: int, role_id: int | None = None) -> CurrentUser:
    return CurrentUser(id=user_id, username=f"user{user_id}", role_id=role_id)


def add_user(db: Session, username: str, role: Role | None = None) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash="x",
        role_id=role.id if role is not None else None,
    )
    db.add(user)
    db.commit()
    return user

