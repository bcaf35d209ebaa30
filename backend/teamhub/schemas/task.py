from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .project import ProjectSummary
from .user import UserSummary


class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in-progress"
    review = "review"
    completed = "completed"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    project_id: int
    assigned_to_id: Optional[int] = None  # Can be null for unassigned tasks
    due_date: Optional[datetime] = None
    priority: TaskPriority = TaskPriority.medium
    status: TaskStatus = TaskStatus.todo


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None


class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    project: ProjectSummary
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    # Related data
    assigned_to: Optional[UserSummary] = None
    created_by: UserSummary

    class Config:
        from_attributes = True
