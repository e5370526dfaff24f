"""User management: listing, lookup, create/update/delete and role assignment."""

import logging
from collections.abc import Iterable

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models import Role, User
from app.schemas.auth import CurrentUser
from app.services import audit
from app.services.errors import (
    ConflictError,
    NotFoundError,
    SelfDeletionError,
    ValidationFailed,
)

logger = logging.getLogger(__name__)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _roles_by_ids(db: Session, role_ids: Iterable[int]) -> list[Role]:
    """Load roles for the given ids; unknown ids are skipped."""
    ids = set(role_ids)
    if not ids:
        return []
    return db.query(Role).filter(Role.id.in_(ids)).order_by(Role.name).all()


def _email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def _flush_unique_email(db: Session) -> None:
    """Flush pending changes; a unique-email violation from a concurrent writer becomes a conflict."""
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Email already exists") from exc


def list_users(
    db: Session,
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    role: str | None = None,
) -> tuple[list[User], int]:
    """
    Return (users, total) for one page, newest first.

    search matches name or email, case-insensitive substring.
    role keeps users holding that exact role name; each user still carries all its roles.
    A page past the end yields an empty list.
    """
    query = db.query(User)
    if search and search.strip():
        pattern = f"%{_escape_like(search.strip())}%"
        query = query.filter(
            or_(
                User.name.ilike(pattern, escape="\\"),
                User.email.ilike(pattern, escape="\\"),
            )
        )
    if role:
        query = query.filter(User.roles.any(Role.name == role))

    total = query.count()
    offset = (page - 1) * limit
    if offset >= total:
        return [], total
    users = (
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return users, total


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def create_user(
    db: Session,
    actor: CurrentUser,
    name: str,
    email: str,
    password: str,
    role_ids: Iterable[int] = (),
) -> User:
    """Create a user with a hashed password and optional initial roles; audited as CREATE_USER."""
    if not name or not email or not password:
        raise ValidationFailed("Name, email, and password are required")
    if _email_taken(db, email):
        raise ConflictError("Email already exists")

    role_ids = list(role_ids)
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password(password),
    )
    user.roles = _roles_by_ids(db, role_ids)
    db.add(user)
    _flush_unique_email(db)

    audit.record_audit(
        db,
        actor.id,
        audit.CREATE_USER,
        audit.TARGET_USER,
        user.id,
        {"name": name, "email": email, "assignedRoles": role_ids},
    )
    db.commit()
    logger.info("User created: id=%s by actor=%s", user.id, actor.id)
    return user


def update_user(
    db: Session,
    actor: CurrentUser,
    user_id: int,
    name: str | None = None,
    email: str | None = None,
    role_ids: Iterable[int] | None = None,
) -> User:
    """
    Update name/email when provided. When role_ids is given, it replaces the
    user's whole role set (an empty list removes every role).
    """
    user = get_user(db, user_id)
    if email is not None and email != user.email and _email_taken(db, email, user.id):
        raise ConflictError("Email already exists")

    if name is not None:
        user.name = name
    if email is not None:
        user.email = email
    if role_ids is not None:
        role_ids = list(role_ids)
        user.roles = _roles_by_ids(db, role_ids)
    _flush_unique_email(db)

    audit.record_audit(
        db,
        actor.id,
        audit.UPDATE_USER,
        audit.TARGET_USER,
        user.id,
        {"name": name, "email": email, "roleIds": role_ids if role_ids is not None else []},
    )
    db.commit()
    logger.info("User updated: id=%s by actor=%s", user.id, actor.id)
    return user


def delete_user(db: Session, actor: CurrentUser, user_id: int) -> None:
    """Delete a user. The audit row is written before the delete, in the same transaction."""
    user = get_user(db, user_id)
    if user.id == actor.id:
        raise SelfDeletionError("Cannot delete your own account")

    audit.record_audit(
        db,
        actor.id,
        audit.DELETE_USER,
        audit.TARGET_USER,
        user.id,
        {"deletedUserEmail": user.email},
    )
    db.delete(user)
    db.commit()
    logger.info("User deleted: id=%s by actor=%s", user_id, actor.id)


def assign_role(db: Session, actor: CurrentUser, user_id: int, role_id: int) -> Role:
    """Add one role to a user's existing set. Idempotent; audited as ASSIGN_ROLE."""
    if not user_id or not role_id:
        raise ValidationFailed("userId and roleId are required")
    user = db.get(User, user_id)
    role = db.get(Role, role_id)
    if user is None or role is None:
        raise NotFoundError("User or role not found")

    if role not in user.roles:
        user.roles.append(role)
    db.flush()

    audit.record_audit(
        db,
        actor.id,
        audit.ASSIGN_ROLE,
        audit.TARGET_USER,
        user.id,
        {"assignedRole": role.name, "roleId": role.id},
    )
    db.commit()
    logger.info("Role %s assigned to user id=%s by actor=%s", role.name, user.id, actor.id)
    return role
