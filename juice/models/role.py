"""ORM model for roles; a role's admin flag is the only source of admin rights."""

from sqlalchemy import Boolean, Column, Integer, String, false

from juice.models.base import Base


class Role(Base):
    """Named role shared by zero or more users."""

    __tablename__ = "roles"
    # A reused id would hand a deleted role's rights to its former holders.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    admin = Column(Boolean, nullable=False, default=False, server_default=false())
