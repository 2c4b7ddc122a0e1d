"""Project CRUD over the relational store."""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InternalError, NotFoundError, ValidationError
from app.models import Project
from app.models.base import as_utc
from app.schemas.project import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)

# Request field -> ORM attribute where they differ.
_FIELD_TO_ATTR = {"metadata": "metadata_"}


def normalize_page(limit: int | None, offset: int | None) -> tuple[int, int]:
    """Out-of-range limits fall back to the default; negative offsets become 0."""
    if limit is None or limit <= 0 or limit > MAX_PAGE_LIMIT:
        limit = DEFAULT_PAGE_LIMIT
    if offset is None or offset < 0:
        offset = 0
    return limit, offset


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError("Project violates a data constraint") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to %s project: %s", action, e)
        raise InternalError(f"Failed to {action} project") from e


def create_project(db: Session, data: ProjectCreate) -> Project:
    values = data.model_dump()
    project = Project(id=uuid.uuid4())
    for field, value in values.items():
        setattr(project, _FIELD_TO_ATTR.get(field, field), value)
    db.add(project)
    _commit(db, "create")
    db.refresh(project)
    logger.info("Project created", extra={"project_id": str(project.id), "project_name": project.name})
    return project


def get_project(db: Session, project_id: uuid.UUID) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if project is None:
        raise NotFoundError("Project not found")
    return project


def list_projects(db: Session, limit: int | None = None, offset: int | None = None) -> list[Project]:
    """Projects newest first, paginated."""
    limit, offset = normalize_page(limit, offset)
    return (
        db.query(Project)
        .order_by(Project.created_at.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


def update_project(db: Session, project_id: uuid.UUID, data: ProjectUpdate) -> Project:
    """Apply only the fields the client sent."""
    project = get_project(db, project_id)
    changes = data.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] is None:
        raise ValidationError("name cannot be null")

    for field, value in changes.items():
        setattr(project, _FIELD_TO_ATTR.get(field, field), value)

    if project.start_date is not None and project.end_date is not None:
        if as_utc(project.end_date) < as_utc(project.start_date):
            db.rollback()
            raise ValidationError("end_date must not be before start_date")

    project.updated_at = datetime.now(UTC)
    _commit(db, "update")
    db.refresh(project)
    logger.info("Project updated", extra={"project_id": str(project.id), "project_name": project.name})
    return project


def delete_project(db: Session, project_id: uuid.UUID) -> None:
    deleted = (
        db.query(Project)
        .filter(Project.id == project_id)
        .delete(synchronize_session=False)
    )
    _commit(db, "delete")
    if deleted == 0:
        raise NotFoundError("Project not found")
    logger.info("Project deleted", extra={"project_id": str(project_id)})


def count_projects(db: Session) -> int:
    return db.query(func.count(Project.id)).scalar() or 0
