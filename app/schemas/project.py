"""Pydantic schemas for project records."""

import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

ProjectStatus = Literal["planning", "active", "completed", "on-hold", "cancelled"]

# Query limits for GET /projects.
DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 100


def _check_date_range(start: datetime | None, end: datetime | None) -> None:
    if start is not None and end is not None and end < start:
        raise ValueError("end_date must not be before start_date")


class ProjectCreate(BaseModel):
    """Fields for a new project. Only name is required."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)
    owner_name: str | None = Field(default=None, max_length=255)
    status: ProjectStatus | None = None
    budget: float | None = Field(default=None, ge=0, allow_inf_nan=False, description="Non-negative budget")
    start_date: datetime | None = None
    end_date: datetime | None = None
    metadata: dict[str, Any] | None = None
    documents: dict[str, Any] | None = None

    @model_validator(mode="after")
    def validate_date_range(self) -> "ProjectCreate":
        _check_date_range(self.start_date, self.end_date)
        return self


class ProjectUpdate(BaseModel):
    """Partial update: only fields present in the request body are applied."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)
    owner_name: str | None = Field(default=None, max_length=255)
    status: ProjectStatus | None = None
    budget: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    start_date: datetime | None = None
    end_date: datetime | None = None
    metadata: dict[str, Any] | None = None
    documents: dict[str, Any] | None = None

    @model_validator(mode="after")
    def validate_date_range(self) -> "ProjectUpdate":
        _check_date_range(self.start_date, self.end_date)
        return self


class ProjectResponse(BaseModel):
    """Project as returned to clients."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    name: str
    address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    owner_name: str | None = None
    status: str | None = None
    budget: float | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    metadata: dict[str, Any] | None = Field(
        default=None, validation_alias="metadata_"
    )
    documents: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime


class ProjectStatsResponse(BaseModel):
    total_projects: int
