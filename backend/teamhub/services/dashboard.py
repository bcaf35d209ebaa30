"""Dashboard statistics over the teams, projects and tasks a user can see."""
import logging
from collections import Counter
from typing import Optional

from teamhub.core.database import as_utc, utcnow
from teamhub.permissions import Requester, can_see_team
from teamhub.schemas.dashboard import (
    DashboardStats,
    ProjectStatusCounts,
    TaskPriorityCounts,
    TaskStatusCounts,
)
from teamhub.schemas.task import TaskResponse
from teamhub.services.users import require_requester

logger = logging.getLogger(__name__)

UPCOMING_LIMIT = 5
RECENT_LIMIT = 5


def _field(value: str) -> str:
    # "in-progress" -> "in_progress"
    return value.replace("-", "_")


def _count(items, attribute, model):
    counts = Counter(_field(getattr(item, attribute)) for item in items)
    return model(**{name: counts.get(name, 0) for name in model.model_fields})


async def get_dashboard_stats(store, requester: Optional[Requester], now=None) -> DashboardStats:
    requester = require_requester(requester)
    now = as_utc(now) or utcnow()

    teams = [team for team in await store.teams_for_user(requester.id) if can_see_team(requester, team)]
    projects = await store.projects_for_teams(team.id for team in teams)
    project_ids = [project.id for project in projects]
    tasks = await store.tasks_for_projects(project_ids)
    user_tasks = [task for task in tasks if task.assigned_to_id == requester.id]

    upcoming = await store.upcoming_tasks(project_ids, now, limit=UPCOMING_LIMIT)
    recent = await store.recently_completed_tasks(project_ids, limit=RECENT_LIMIT)

    logger.debug(
        "Dashboard for user %s: %d teams, %d projects, %d tasks",
        requester.id, len(teams), len(projects), len(tasks),
    )
    return DashboardStats(
        total_teams=len(teams),
        total_projects=len(projects),
        total_tasks=len(tasks),
        user_assigned_tasks=len(user_tasks),
        tasks_by_status=_count(tasks, "status", TaskStatusCounts),
        user_tasks_by_status=_count(user_tasks, "status", TaskStatusCounts),
        tasks_by_priority=_count(tasks, "priority", TaskPriorityCounts),
        projects_by_status=_count(projects, "status", ProjectStatusCounts),
        upcoming_tasks=[TaskResponse.model_validate(task) for task in upcoming],
        recently_completed_tasks=[TaskResponse.model_validate(task) for task in recent],
    )
