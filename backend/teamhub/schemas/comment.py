from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .user import UserSummary


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1)
    task_id: int


class CommentUpdate(BaseModel):
    text: Optional[str] = Field(None, min_length=1)


class CommentResponse(BaseModel):
    id: int
    text: str
    task_id: int
    user: UserSummary
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
