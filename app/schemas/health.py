"""Pydantic schemas for health check responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV the server runs with")
    database: Literal["connected", "disconnected"]
    timestamp: datetime = Field(description="Server time (UTC) when the check ran")
