from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .team import TeamSummary
from .user import UserSummary


class ProjectStatus(str, Enum):
    planned = "planned"
    in_progress = "in-progress"
    on_hold = "on-hold"
    completed = "completed"


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    team_id: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: ProjectStatus = ProjectStatus.planned


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[ProjectStatus] = None


class ProjectSummary(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ProjectResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    team: TeamSummary
    created_by: UserSummary
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    status: ProjectStatus
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
