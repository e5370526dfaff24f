"""ORM model for the append-only audit trail of admin mutations."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base, UTCDateTime, utcnow


class AuditLog(Base):
    """
    One row per mutating admin action. Rows are never updated or deleted.

    action follows the VERB_NOUN convention (CREATE_USER, ASSIGN_ROLE, ...).
    target_id is not a foreign key: it must survive deletion of the target.
    """

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action = Column(String(64), nullable=False, index=True)
    target_type = Column(String(64), nullable=False)
    target_id = Column(Integer, nullable=True)
    details = Column(JSON, nullable=False, default=dict)
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow, index=True)

    actor = relationship("User", lazy="selectin")
