"""SQLAlchemy ORM models."""

from app.models.audit_log import AuditLog
from app.models.base import Base, UTCDateTime, utcnow
from app.models.role import Role
from app.models.user import User, user_roles

__all__ = ["AuditLog", "Base", "Role", "UTCDateTime", "User", "user_roles", "utcnow"]
