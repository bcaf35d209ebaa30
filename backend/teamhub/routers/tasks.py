from typing import List, Optional

from fastapi import APIRouter, status

from teamhub.routers.deps import CurrentRequester, Store
from teamhub.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from teamhub.services import tasks

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(task_in: TaskCreate, requester: CurrentRequester, store: Store):
    return await tasks.create_task(store, requester, task_in)


@router.get("", response_model=List[TaskResponse])
async def get_tasks(
    requester: CurrentRequester,
    store: Store,
    project_id: Optional[int] = None,
    assigned_to: Optional[int] = None,
):
    return await tasks.list_tasks(store, requester, project_id=project_id, assigned_to=assigned_to)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, requester: CurrentRequester, store: Store):
    return await tasks.get_task(store, requester, task_id)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: int, task_in: TaskUpdate, requester: CurrentRequester, store: Store):
    return await tasks.update_task(store, requester, task_id, task_in)


@router.delete("/{task_id}")
async def delete_task(task_id: int, requester: CurrentRequester, store: Store):
    await tasks.delete_task(store, requester, task_id)
    return {"message": "Task deleted"}
