"""Request/response schemas for role management."""

from pydantic import BaseModel, Field, field_validator


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    admin: bool = False

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class RoleUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    admin: bool | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class RoleRead(BaseModel):
    id: int
    name: str
    admin: bool

    class Config:
        from_attributes = True


class RolesListResponse(BaseModel):
    roles: list[RoleRead]
