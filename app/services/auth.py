"""Login: check credentials, touch last_login, mint a token."""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.security import create_access_token, verify_password
from app.models import User
from app.services.users import get_user_by_email

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Return the user when email and password match; record the login time."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        logger.warning("Failed login attempt for email=%s", email)
        return None
    user.last_login = datetime.now(UTC)
    db.commit()
    logger.info("User logged in: id=%s", user.id)
    return user


def issue_token(user: User, settings: "Settings") -> str:
    """Mint a bearer token carrying the user's current role names as a snapshot."""
    return create_access_token(user.id, user.email, user.role_names, settings)
