"""Pydantic request/response schemas."""

from app.schemas.analytics import AnalyticsSummary
from app.schemas.audit import AuditActor, AuditLogOut, AuditLogsResponse
from app.schemas.auth import CurrentUser, LoginRequest, LoginResponse, LoginUser
from app.schemas.common import CamelModel, ErrorResponse, MessageResponse, Pagination
from app.schemas.health import HealthResponse
from app.schemas.roles import (
    AssignRoleRequest,
    RoleCreate,
    RoleOut,
    RoleResponse,
    RolesListResponse,
    RoleUpdate,
)
from app.schemas.users import (
    ActivitySummary,
    UserCreate,
    UserDetail,
    UserOut,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "ActivitySummary",
    "AnalyticsSummary",
    "AssignRoleRequest",
    "AuditActor",
    "AuditLogOut",
    "AuditLogsResponse",
    "CamelModel",
    "CurrentUser",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "LoginUser",
    "MessageResponse",
    "Pagination",
    "RoleCreate",
    "RoleOut",
    "RoleResponse",
    "RoleUpdate",
    "RolesListResponse",
    "UserCreate",
    "UserDetail",
    "UserOut",
    "UserResponse",
    "UserUpdate",
    "UsersListResponse",
]
