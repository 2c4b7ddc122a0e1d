"""Pydantic schemas for health check responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["healthy", "unhealthy"] = Field(description="Service status")
    environment: str = Field(description="Current app environment (e.g. development, production)")
    database: Literal["connected", "disconnected"] = Field(
        description="Database connectivity status"
    )
    timestamp: datetime = Field(description="Time the check ran (UTC)")
