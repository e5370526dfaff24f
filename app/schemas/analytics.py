"""Schemas for the analytics summary."""

from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel


class AnalyticsSummary(CamelModel):
    """
    Headline counts for the console dashboard.

    The three counts come from independent queries and are not a consistent snapshot.
    """

    total_users: int = Field(..., ge=0)
    total_roles: int = Field(..., ge=0)
    active_users_last_7_days: int = Field(..., ge=0)
    generated_at: datetime
