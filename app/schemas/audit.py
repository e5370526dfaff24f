"""Schemas for the audit log listing."""

from datetime import datetime
from typing import Any

from pydantic import Field

from app.schemas.common import CamelModel, Pagination


class AuditActor(CamelModel):
    id: int
    name: str
    email: str


class AuditLogOut(CamelModel):
    id: int
    actor_user_id: int | None
    actor: AuditActor | None = None
    action: str
    target_type: str
    target_id: int | None
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class AuditLogsResponse(CamelModel):
    audit_logs: list[AuditLogOut]
    pagination: Pagination
