"""Schemas for role management and role assignment."""

from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.common import CamelModel

ROLE_NAME_MAX_LEN = 64


class RoleOut(CamelModel):
    id: int
    name: str
    permissions: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=ROLE_NAME_MAX_LEN)
    permissions: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class RoleUpdate(CamelModel):
    """Omitted fields are left unchanged; permissions, when given, replaces the whole list."""

    name: str | None = Field(default=None, min_length=1, max_length=ROLE_NAME_MAX_LEN)
    permissions: list[str] | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class RoleResponse(CamelModel):
    message: str
    role: RoleOut


class RolesListResponse(CamelModel):
    roles: list[RoleOut]


class AssignRoleRequest(CamelModel):
    user_id: int = Field(..., ge=1)
    role_id: int = Field(..., ge=1)
