"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.security import EMAIL_MAX_LEN, PASSWORD_MAX_LEN
from app.schemas.common import CamelModel


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN, description="Email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class LoginUser(CamelModel):
    """User summary embedded in the login response."""

    id: int
    name: str
    email: str
    roles: list[str]


class LoginResponse(BaseModel):
    """JWT returned after successful login, plus the caller's profile."""

    message: str = "Login successful"
    token: str = Field(..., description="JWT access token (send as Authorization: Bearer <token>)")
    user: LoginUser


class CurrentUser(BaseModel):
    """Authenticated identity attached to a request; roles are the live set from the store."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    roles: list[str]

    def has_roles(self, *names: str) -> bool:
        return set(names).issubset(self.roles)
