"""Audit recorder: append one row per mutating admin action, and query the trail."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from app.models import AuditLog

logger = logging.getLogger(__name__)

CREATE_USER = "CREATE_USER"
UPDATE_USER = "UPDATE_USER"
DELETE_USER = "DELETE_USER"
CREATE_ROLE = "CREATE_ROLE"
UPDATE_ROLE = "UPDATE_ROLE"
ASSIGN_ROLE = "ASSIGN_ROLE"

TARGET_USER = "User"
TARGET_ROLE = "Role"


def record_audit(
    db: Session,
    actor_id: int,
    action: str,
    target_type: str,
    target_id: int | None,
    details: dict[str, Any] | None = None,
) -> AuditLog:
    """
    Add an audit row to the caller's session and flush it.

    Does not commit: the caller commits the mutation and its audit row together,
    so a failed audit write rolls the whole operation back.
    """
    entry = AuditLog(
        actor_user_id=actor_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        details=details or {},
    )
    db.add(entry)
    db.flush()
    logger.info(
        "Audit: actor=%s action=%s target=%s:%s",
        actor_id,
        action,
        target_type,
        target_id,
    )
    return entry


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def list_audit_logs(
    db: Session,
    page: int = 1,
    limit: int = 20,
    user_id: int | None = None,
    action: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> tuple[list[AuditLog], int]:
    """
    Return (rows, total) for one page of audit rows, newest first.

    start_date and end_date are both inclusive; naive datetimes are taken as UTC.
    """
    query = db.query(AuditLog)
    if user_id is not None:
        query = query.filter(AuditLog.actor_user_id == user_id)
    if action:
        query = query.filter(AuditLog.action == action)
    if start_date is not None:
        query = query.filter(AuditLog.created_at >= _as_utc(start_date))
    if end_date is not None:
        query = query.filter(AuditLog.created_at <= _as_utc(end_date))

    total = query.count()
    offset = (page - 1) * limit
    # Past the end; also keeps an oversized offset from reaching the driver.
    if offset >= total:
        return [], total
    rows = (
        query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total
