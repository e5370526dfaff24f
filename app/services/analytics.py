"""Analytics summary: headline counts for the console dashboard."""

from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from app.models import Role, User
from app.schemas.analytics import AnalyticsSummary

ACTIVE_WINDOW = timedelta(days=7)


def get_summary(db: Session, now: datetime | None = None) -> AnalyticsSummary:
    """
    Count users, roles, and users whose last login is within the trailing 7 days.

    The window start (now - 7 days) is inclusive. Each count is its own query.
    """
    now = now or datetime.now(UTC)
    window_start = now - ACTIVE_WINDOW

    total_users = db.query(User).count()
    total_roles = db.query(Role).count()
    active_users = db.query(User).filter(User.last_login >= window_start).count()

    return AnalyticsSummary(
        total_users=total_users,
        total_roles=total_roles,
        active_users_last_7_days=active_users,
        generated_at=now,
    )
