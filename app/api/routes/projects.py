"""Project CRUD routes. Reads need any authenticated caller; writes need localadmin or above."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import CurrentPrincipal, parse_uuid, require_role
from app.core.database import get_db
from app.core.roles import Role
from app.schemas.auth import Principal
from app.schemas.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectStatsResponse,
    ProjectUpdate,
)
from app.services import projects as project_service

router = APIRouter()

ProjectWriter = Annotated[Principal, Depends(require_role(Role.LOCALADMIN))]


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@router.get("", response_model=list[ProjectResponse])
def list_projects(
    _principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
    limit: str | None = None,
    offset: str | None = None,
) -> list[ProjectResponse]:
    """Projects newest first. Invalid limit/offset values fall back to 50/0."""
    projects = project_service.list_projects(db, _parse_int(limit), _parse_int(offset))
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get("/stats", response_model=ProjectStatsResponse)
def project_stats(
    _principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> ProjectStatsResponse:
    return ProjectStatsResponse(total_projects=project_service.count_projects(db))


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: str,
    _principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> ProjectResponse:
    project = project_service.get_project(db, parse_uuid(project_id, "project"))
    return ProjectResponse.model_validate(project)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    body: ProjectCreate,
    _writer: ProjectWriter,
    db: Annotated[Session, Depends(get_db)],
) -> ProjectResponse:
    return ProjectResponse.model_validate(project_service.create_project(db, body))


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    body: ProjectUpdate,
    _writer: ProjectWriter,
    db: Annotated[Session, Depends(get_db)],
) -> ProjectResponse:
    project = project_service.update_project(db, parse_uuid(project_id, "project"), body)
    return ProjectResponse.model_validate(project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: str,
    _writer: ProjectWriter,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    project_service.delete_project(db, parse_uuid(project_id, "project"))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
