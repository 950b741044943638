"""Project API Routes - portfolio case studies of the signed-in account."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from src.api.deps import get_session
from src.models import Project, ProjectDraft, ProjectUpdate, QuickProjectDraft
from src.repositories.session import AccountSession
from src.views import VideoInfo, completion_percentage, parse_video_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


class ProjectResponse(BaseModel):
    """A project with its display-only derived fields."""
    project: Project
    completion_percentage: int
    video: VideoInfo


def _response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        project=project,
        completion_percentage=completion_percentage(project),
        video=parse_video_url(project.video_url),
    )


@router.get("", response_model=List[ProjectResponse], summary="List projects")
async def list_projects(session: AccountSession = Depends(get_session)):
    """All projects of the account, newest first."""
    projects = await session.projects.list()
    return [_response(p) for p in projects]


@router.post("", response_model=ProjectResponse, status_code=201, summary="Create project")
async def create_project(
    draft: ProjectDraft,
    session: AccountSession = Depends(get_session)
):
    project = await session.projects.create(draft)
    return _response(project)


@router.post("/quick", response_model=ProjectResponse, status_code=201, summary="Quick-create project")
async def quick_create_project(
    quick: QuickProjectDraft,
    session: AccountSession = Depends(get_session)
):
    """Title, one to three images and a problem / solution / result line."""
    project = await session.projects.quick_create(quick)
    return _response(project)


@router.get("/{project_id}", response_model=ProjectResponse, summary="Get project")
async def get_project(project_id: str, session: AccountSession = Depends(get_session)):
    await session.projects.ensure_loaded()
    return _response(session.projects.require(project_id))


@router.patch("/{project_id}", response_model=ProjectResponse, summary="Update project")
async def update_project(
    project_id: str,
    patch: ProjectUpdate,
    session: AccountSession = Depends(get_session)
):
    """Partial update; status is recomputed from the new content."""
    await session.projects.ensure_loaded()
    project = await session.projects.update(project_id, patch)
    return _response(project)


@router.delete("/{project_id}", status_code=204, summary="Delete project")
async def delete_project(project_id: str, session: AccountSession = Depends(get_session)):
    await session.projects.ensure_loaded()
    await session.projects.remove(project_id)
    return Response(status_code=204)
