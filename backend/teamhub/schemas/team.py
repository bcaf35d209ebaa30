from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from .user import UserSummary


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None


class MemberAdd(BaseModel):
    """A new member, given either by id or by email."""

    user_id: Optional[int] = None
    email: Optional[EmailStr] = None

    @model_validator(mode="after")
    def check_identifier(self):
        if self.user_id is None and self.email is None:
            raise ValueError("user_id or email is required")
        return self


class TeamSummary(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class TeamResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    leader: UserSummary
    members: List[UserSummary]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
