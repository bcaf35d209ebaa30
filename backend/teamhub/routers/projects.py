from typing import List, Optional

from fastapi import APIRouter, status

from teamhub.routers.deps import CurrentRequester, Store
from teamhub.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from teamhub.services import projects

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(project_in: ProjectCreate, requester: CurrentRequester, store: Store):
    return await projects.create_project(store, requester, project_in)


@router.get("", response_model=List[ProjectResponse])
async def get_projects(requester: CurrentRequester, store: Store, team_id: Optional[int] = None):
    return await projects.list_projects(store, requester, team_id=team_id)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int, requester: CurrentRequester, store: Store):
    return await projects.get_project(store, requester, project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int, project_in: ProjectUpdate, requester: CurrentRequester, store: Store
):
    return await projects.update_project(store, requester, project_id, project_in)


@router.delete("/{project_id}")
async def delete_project(project_id: int, requester: CurrentRequester, store: Store):
    await projects.delete_project(store, requester, project_id)
    return {"message": "Project deleted"}
