import logging
from typing import List, Optional

from teamhub.core.database import as_utc
from teamhub.core.exceptions import NotFoundError
from teamhub.models.task import Task
from teamhub.permissions import EntityRef, Kind, Operation, Requester, authorize, can_see_team
from teamhub.schemas.task import TaskCreate, TaskUpdate
from teamhub.services.users import require_requester

logger = logging.getLogger(__name__)


async def _require_user(store, user_id: int) -> None:
    if await store.get_user(user_id) is None:
        raise NotFoundError("user", "Assigned user does not exist")


async def create_task(store, requester: Optional[Requester], task_in: TaskCreate) -> Task:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.CREATE, EntityRef.under(Kind.TASK, task_in.project_id))
    ).require()
    if task_in.assigned_to_id is not None:
        await _require_user(store, task_in.assigned_to_id)

    task = Task(
        title=task_in.title,
        description=task_in.description,
        project_id=chain.project.id,
        assigned_to_id=task_in.assigned_to_id,
        created_by_id=requester.id,
        due_date=as_utc(task_in.due_date),
        priority=task_in.priority.value,
        status=task_in.status.value,
    )
    task = await store.add(task)
    logger.info("User %s created task %s in project %s", requester.id, task.id, chain.project.id)
    return task


async def list_tasks(
    store,
    requester: Optional[Requester],
    project_id: Optional[int] = None,
    assigned_to: Optional[int] = None,
) -> List[Task]:
    """Tasks of one project, or of every project in the requester's teams."""
    requester = require_requester(requester)
    if project_id is not None:
        chain = (
            await authorize(store, requester, Operation.READ, EntityRef.under(Kind.TASK, project_id))
        ).require()
        project_ids = [chain.project.id]
    else:
        teams = await store.teams_for_user(requester.id)
        projects = await store.projects_for_teams(team.id for team in teams if can_see_team(requester, team))
        project_ids = [project.id for project in projects]
    return await store.tasks_for_projects(project_ids, assigned_to=assigned_to)


async def get_task(store, requester: Optional[Requester], task_id: int) -> Task:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.READ, EntityRef.existing(Kind.TASK, task_id))
    ).require()
    return chain.task


async def update_task(store, requester: Optional[Requester], task_id: int, task_in: TaskUpdate) -> Task:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.UPDATE, EntityRef.existing(Kind.TASK, task_id))
    ).require()
    task = chain.task

    if task_in.assigned_to_id is not None:
        await _require_user(store, task_in.assigned_to_id)
        task.assigned_to_id = task_in.assigned_to_id
    if task_in.title:
        task.title = task_in.title
    if task_in.description:
        task.description = task_in.description
    if task_in.due_date:
        task.due_date = as_utc(task_in.due_date)
    if task_in.priority:
        task.priority = task_in.priority.value
    if task_in.status:
        task.status = task_in.status.value
    return await store.save(task)


async def delete_task(store, requester: Optional[Requester], task_id: int) -> None:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.DELETE, EntityRef.existing(Kind.TASK, task_id))
    ).require()
    await store.delete(chain.task)
    logger.info("User %s deleted task %s", requester.id, task_id)
