"""Schemas for user management under /superadmin/users."""

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import Field, field_validator

from app.core.security import EMAIL_MAX_LEN, NAME_MAX_LEN, PASSWORD_MAX_LEN
from app.schemas.common import CamelModel, Pagination

if TYPE_CHECKING:
    from app.models import User


def _strip_not_blank(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class UserOut(CamelModel):
    """Canonical user-with-roles shape used by every user endpoint."""

    id: int
    name: str
    email: str
    roles: list[str] = Field(default_factory=list, description="Role names, sorted")
    role_ids: list[int] = Field(default_factory=list)
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user: "User") -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            roles=user.role_names,
            role_ids=user.role_ids,
            last_login=user.last_login,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class ActivitySummary(CamelModel):
    """Login count is not tracked yet and is always 0."""

    login_count: int = 0
    last_activity: datetime | None = None


class UserDetail(UserOut):
    activity_summary: ActivitySummary

    @classmethod
    def from_user(cls, user: "User") -> "UserDetail":
        base = UserOut.from_user(user)
        return cls(
            **base.model_dump(),
            activity_summary=ActivitySummary(last_activity=user.last_login),
        )


class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    role_ids: list[int] = Field(default_factory=list)

    @field_validator("name", "email")
    @classmethod
    def strip_fields(cls, v: str) -> str:
        return _strip_not_blank(v)


class UserUpdate(CamelModel):
    """Omitted fields are left unchanged; role_ids, when given, replaces the full role set."""

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LEN)
    email: str | None = Field(default=None, min_length=1, max_length=EMAIL_MAX_LEN)
    role_ids: list[int] | None = None

    @field_validator("name", "email")
    @classmethod
    def strip_fields(cls, v: str | None) -> str | None:
        return _strip_not_blank(v)


class UserResponse(CamelModel):
    message: str
    user: UserOut


class UsersListResponse(CamelModel):
    users: list[UserOut]
    pagination: Pagination
