"""ORM model for named permission bundles."""

from sqlalchemy import JSON, Column, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base, UTCDateTime, utcnow
from app.models.user import user_roles


class Role(Base):
    """
    Named role carrying a list of opaque permission tags.

    The "superadmin" role gates every /superadmin route.
    """

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False, unique=True, index=True)
    permissions = Column(JSON, nullable=False, default=list)
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    users = relationship(
        "User",
        secondary=user_roles,
        back_populates="roles",
        lazy="select",
    )
