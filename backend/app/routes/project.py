"""
Project Routes — Create, fetch and update projects; expiring-domain view.
"""
from fastapi import APIRouter, Depends

from app.dependencies import get_current_user_id, get_project_service
from app.schemas.schemas import (
    ExpiringProjectRead, ProjectCreateRequest, ProjectFileResponse, ProjectRead, ProjectUpdateRequest,
)
from app.services.project_service import ProjectService, serialize_project

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.post("", response_model=ProjectFileResponse, status_code=201)
def create_project(
    payload: ProjectCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
):
    """Create a project, optionally generating its summary document."""
    return service.create(payload, user_id)


@router.get("/expiring", response_model=list[ExpiringProjectRead])
def get_expiring_projects(
    _user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
):
    """Active projects with a domain expiry date, soonest first."""
    return [serialize_project(p) for p in service.expiring()]


@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: str,
    _user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
):
    return service.get(project_id)


@router.patch("/{project_id}", response_model=ProjectFileResponse)
def update_project(
    project_id: str,
    payload: ProjectUpdateRequest,
    _user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
):
    """Partially update a project. A title change moves its document folder."""
    return service.update(project_id, payload)
