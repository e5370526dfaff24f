"""ORM model for console users and the user <-> role association table."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from app.models.base import Base, UTCDateTime, utcnow

# Pure join table: a row means "user holds role".
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(Base):
    """
    Console account authenticated by email and password.

    Roles are loaded eagerly (selectin) since almost every response includes them.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    last_login = Column(UTCDateTime(), nullable=True, index=True)
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow, index=True)
    updated_at = Column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    roles = relationship(
        "Role",
        secondary=user_roles,
        back_populates="users",
        lazy="selectin",
        order_by="Role.name",
    )

    @property
    def role_names(self) -> list[str]:
        return [role.name for role in self.roles]

    @property
    def role_ids(self) -> list[int]:
        return [role.id for role in self.roles]
