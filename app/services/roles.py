"""Role management: list, create and update named permission bundles."""

import logging
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Role
from app.schemas.auth import CurrentUser
from app.services import audit
from app.services.errors import ConflictError, NotFoundError, ValidationFailed

logger = logging.getLogger(__name__)

SUPERADMIN_ROLE = "superadmin"


def _normalize_permissions(permissions: Iterable[str]) -> list[str]:
    """Strip tags, drop blanks and duplicates, keep first-seen order."""
    seen: dict[str, None] = {}
    for tag in permissions:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


def _name_taken(db: Session, name: str, exclude_role_id: int | None = None) -> bool:
    query = db.query(Role.id).filter(Role.name == name)
    if exclude_role_id is not None:
        query = query.filter(Role.id != exclude_role_id)
    return query.first() is not None


def _flush_unique_name(db: Session) -> None:
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Role already exists") from exc


def list_roles(db: Session) -> list[Role]:
    return db.query(Role).order_by(Role.name).all()


def get_role(db: Session, role_id: int) -> Role:
    role = db.get(Role, role_id)
    if role is None:
        raise NotFoundError("Role not found")
    return role


def create_role(
    db: Session,
    actor: CurrentUser,
    name: str,
    permissions: Iterable[str] = (),
) -> Role:
    if not name:
        raise ValidationFailed("Role name is required")
    if _name_taken(db, name):
        raise ConflictError("Role already exists")

    role = Role(name=name, permissions=_normalize_permissions(permissions))
    db.add(role)
    _flush_unique_name(db)

    audit.record_audit(
        db,
        actor.id,
        audit.CREATE_ROLE,
        audit.TARGET_ROLE,
        role.id,
        {"name": role.name, "permissions": role.permissions},
    )
    db.commit()
    logger.info("Role created: id=%s name=%s by actor=%s", role.id, role.name, actor.id)
    return role


def update_role(
    db: Session,
    actor: CurrentUser,
    role_id: int,
    name: str | None = None,
    permissions: Iterable[str] | None = None,
) -> Role:
    """Rename a role and/or replace its permission list; omitted fields stay as they are."""
    role = get_role(db, role_id)
    if name is not None and name != role.name and _name_taken(db, name, role.id):
        raise ConflictError("Role already exists")

    if name is not None:
        role.name = name
    if permissions is not None:
        role.permissions = _normalize_permissions(permissions)
    _flush_unique_name(db)

    audit.record_audit(
        db,
        actor.id,
        audit.UPDATE_ROLE,
        audit.TARGET_ROLE,
        role.id,
        {"name": name, "permissions": role.permissions if permissions is not None else None},
    )
    db.commit()
    logger.info("Role updated: id=%s by actor=%s", role.id, actor.id)
    return role


def ensure_role(db: Session, name: str, permissions: Iterable[str]) -> Role:
    """Return the role with this name, creating it if missing. Used by the seed CLI; not audited."""
    role = db.query(Role).filter(Role.name == name).first()
    if role is None:
        role = Role(name=name, permissions=_normalize_permissions(permissions))
        db.add(role)
        db.flush()
    return role
