"""ORM model for project records."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Double, String, Uuid

from app.models.base import Base, JSONType, utcnow

PROJECT_STATUSES: tuple[str, ...] = ("planning", "active", "completed", "on-hold", "cancelled")

_STATUS_CHECK = "status IS NULL OR status IN ({})".format(
    ", ".join(f"'{s}'" for s in PROJECT_STATUSES)
)


class Project(Base):
    """
    Project record. Only name is required.

    `metadata` is reserved on declarative classes, so the column is exposed as
    `metadata_`.
    """

    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(_STATUS_CHECK, name="ck_projects_status"),
        CheckConstraint("budget IS NULL OR budget >= 0", name="ck_projects_budget_non_negative"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, index=True)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    owner_name = Column(String(255), nullable=True)
    status = Column(String(32), nullable=True, index=True)
    budget = Column(Double, nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    metadata_ = Column("metadata", JSONType, nullable=True)
    documents = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
