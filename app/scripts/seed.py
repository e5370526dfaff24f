"""
Seed roles and starter accounts. Run from project root:
  python -m app.scripts.seed
Override the super admin credentials with:
  python -m app.scripts.seed --admin-email root@example.com --admin-password 'your-secure-password'
Safe to run repeatedly: existing roles and users are reused.
"""
import argparse
import logging
import sys

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import Database
from app.core.security import hash_password
from app.models import Role, User
from app.services.roles import SUPERADMIN_ROLE, ensure_role
from app.services.users import get_user_by_email

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

DEFAULT_ROLES = {
    SUPERADMIN_ROLE: ["all"],
    "user": ["read"],
}


def ensure_user(db: Session, name: str, email: str, password: str, role: Role) -> User:
    """Return the user with this email (creating it if missing) and make sure it holds role."""
    user = get_user_by_email(db, email)
    if user is None:
        user = User(name=name, email=email, hashed_password=hash_password(password))
        db.add(user)
        logger.info("Created user %s", email)
    if role not in user.roles:
        user.roles.append(role)
    db.flush()
    return user


def seed(
    db: Session,
    admin_email: str,
    admin_password: str,
    user_email: str,
    user_password: str,
) -> None:
    roles = {name: ensure_role(db, name, perms) for name, perms in DEFAULT_ROLES.items()}
    ensure_user(db, "Super Admin", admin_email, admin_password, roles[SUPERADMIN_ROLE])
    ensure_user(db, "Test User", user_email, user_password, roles["user"])
    db.commit()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the console database with roles and starter users.")
    parser.add_argument("--admin-email", default="superadmin@example.com")
    parser.add_argument("--admin-password", default="Test1234!")
    parser.add_argument("--user-email", default="user@example.com")
    parser.add_argument("--user-password", default="password123")
    args = parser.parse_args(argv)

    settings = get_settings()
    database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    try:
        database.init(create_tables=settings.DB_CREATE_TABLES)
        db = database.session()
        try:
            seed(db, args.admin_email, args.admin_password, args.user_email, args.user_password)
        finally:
            db.close()
        logger.info("Seed completed: super admin is %s", args.admin_email)
        return 0
    except Exception as e:
        logger.exception("Seed failed: %s", e)
        return 1
    finally:
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
