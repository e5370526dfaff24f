"""Super-admin endpoints: users, roles, role assignment, audit logs and analytics."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_superadmin
from app.core.database import get_db
from app.schemas.analytics import AnalyticsSummary
from app.schemas.audit import AuditLogOut, AuditLogsResponse
from app.schemas.auth import CurrentUser
from app.schemas.common import MessageResponse, Pagination
from app.schemas.roles import (
    AssignRoleRequest,
    RoleCreate,
    RoleOut,
    RoleResponse,
    RolesListResponse,
    RoleUpdate,
)
from app.schemas.users import (
    UserCreate,
    UserDetail,
    UserOut,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)
from app.services import analytics, audit, roles, users

# Every route below requires an authenticated caller holding the superadmin role.
router = APIRouter(dependencies=[Depends(require_superadmin)])

MAX_PAGE_SIZE = 100

Admin = Annotated[CurrentUser, Depends(require_superadmin)]
DB = Annotated[Session, Depends(get_db)]


# Users


@router.get("/users", response_model=UsersListResponse)
def list_users(
    db: DB,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 10,
    search: Annotated[str | None, Query(max_length=255)] = None,
    role: Annotated[str | None, Query(max_length=64)] = None,
) -> UsersListResponse:
    """
    List users newest first.

    - **search**: case-insensitive substring of name or email
    - **role**: only users holding this exact role name
    """
    rows, total = users.list_users(db, page=page, limit=limit, search=search, role=role)
    return UsersListResponse(
        users=[UserOut.from_user(u) for u in rows],
        pagination=Pagination.build(total, page, limit),
    )


@router.get("/users/{user_id}", response_model=UserDetail)
def get_user(user_id: int, db: DB) -> UserDetail:
    """Return one user with roles and an activity summary."""
    return UserDetail.from_user(users.get_user(db, user_id))


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, db: DB, admin: Admin) -> UserResponse:
    user = users.create_user(
        db,
        admin,
        name=body.name,
        email=body.email,
        password=body.password,
        role_ids=body.role_ids,
    )
    return UserResponse(message="User created successfully", user=UserOut.from_user(user))


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(user_id: int, body: UserUpdate, db: DB, admin: Admin) -> UserResponse:
    """Update name/email; when roleIds is sent it replaces the user's whole role set."""
    user = users.update_user(
        db,
        admin,
        user_id,
        name=body.name,
        email=body.email,
        role_ids=body.role_ids,
    )
    return UserResponse(message="User updated successfully", user=UserOut.from_user(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, db: DB, admin: Admin) -> MessageResponse:
    users.delete_user(db, admin, user_id)
    return MessageResponse(message="User deleted successfully")


# Roles


@router.get("/roles", response_model=RolesListResponse)
def list_roles(db: DB) -> RolesListResponse:
    return RolesListResponse(roles=[RoleOut.model_validate(r) for r in roles.list_roles(db)])


@router.post("/roles", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(body: RoleCreate, db: DB, admin: Admin) -> RoleResponse:
    role = roles.create_role(db, admin, name=body.name, permissions=body.permissions)
    return RoleResponse(message="Role created successfully", role=RoleOut.model_validate(role))


@router.put("/roles/{role_id}", response_model=RoleResponse)
def update_role(role_id: int, body: RoleUpdate, db: DB, admin: Admin) -> RoleResponse:
    role = roles.update_role(db, admin, role_id, name=body.name, permissions=body.permissions)
    return RoleResponse(message="Role updated successfully", role=RoleOut.model_validate(role))


@router.post("/assign-role", response_model=MessageResponse)
def assign_role(body: AssignRoleRequest, db: DB, admin: Admin) -> MessageResponse:
    """Add one role to a user without touching the roles they already hold."""
    users.assign_role(db, admin, body.user_id, body.role_id)
    return MessageResponse(message="Role assigned successfully")


# Audit logs and analytics


@router.get("/audit-logs", response_model=AuditLogsResponse)
def list_audit_logs(
    db: DB,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 20,
    user_id: Annotated[int | None, Query(alias="userId")] = None,
    action: Annotated[str | None, Query(max_length=64)] = None,
    start_date: Annotated[datetime | None, Query(alias="startDate")] = None,
    end_date: Annotated[datetime | None, Query(alias="endDate")] = None,
) -> AuditLogsResponse:
    """
    List audit rows newest first. userId filters by actor; startDate/endDate
    bound createdAt inclusively.
    """
    rows, total = audit.list_audit_logs(
        db,
        page=page,
        limit=limit,
        user_id=user_id,
        action=action,
        start_date=start_date,
        end_date=end_date,
    )
    return AuditLogsResponse(
        audit_logs=[AuditLogOut.model_validate(r) for r in rows],
        pagination=Pagination.build(total, page, limit),
    )


@router.get("/analytics/summary", response_model=AnalyticsSummary)
def analytics_summary(db: DB) -> AnalyticsSummary:
    return analytics.get_summary(db)
