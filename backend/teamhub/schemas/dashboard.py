from typing import List

from pydantic import BaseModel

from .task import TaskResponse


class TaskStatusCounts(BaseModel):
    todo: int = 0
    in_progress: int = 0
    review: int = 0
    completed: int = 0


class TaskPriorityCounts(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0


class ProjectStatusCounts(BaseModel):
    planned: int = 0
    in_progress: int = 0
    on_hold: int = 0
    completed: int = 0


class DashboardStats(BaseModel):
    total_teams: int
    total_projects: int
    total_tasks: int
    user_assigned_tasks: int
    tasks_by_status: TaskStatusCounts
    user_tasks_by_status: TaskStatusCounts
    tasks_by_priority: TaskPriorityCounts
    projects_by_status: ProjectStatusCounts
    upcoming_tasks: List[TaskResponse]
    recently_completed_tasks: List[TaskResponse]
