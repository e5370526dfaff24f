"""JWT login and auth dependencies (get_current_user, require_roles, require_superadmin)."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import get_db
from app.core.security import decode_access_token
from app.models import User
from app.schemas.auth import CurrentUser, LoginRequest, LoginResponse, LoginUser
from app.services.auth import authenticate, issue_token
from app.services.roles import SUPERADMIN_ROLE

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Dependency: settings the running application was built with."""
    return request.app.state.settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> LoginResponse:
    """
    Authenticate with email and password; returns a JWT access token valid for 24 hours.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = authenticate(db, body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return LoginResponse(
        token=issue_token(user, settings),
        user=LoginUser(id=user.id, name=user.name, email=user.email, roles=user.role_names),
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the current user. Raises 401 if
    the header is missing, the token is invalid or expired, or the user no longer exists.

    Roles come from the store on every request, not from the token, so a revoked
    role stops working immediately even though the token is still valid.
    """
    if credentials is None:
        raise _unauthorized("No token provided")
    try:
        payload = decode_access_token(credentials.credentials, settings)
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid token")

    user = db.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found")
    return CurrentUser(id=user.id, name=user.name, email=user.email, roles=user.role_names)


def require_roles(*role_names: str) -> Callable[..., CurrentUser]:
    """Build a dependency that requires every named role in the caller's live role set (403 otherwise)."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not current_user.has_roles(*role_names):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Super admin access required"
                if role_names == (SUPERADMIN_ROLE,)
                else f"Required role(s): {', '.join(role_names)}",
            )
        return current_user

    return dependency


require_superadmin = require_roles(SUPERADMIN_ROLE)


@router.get("/me", response_model=CurrentUser)
def read_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Return the authenticated caller with their live role set."""
    return current_user
