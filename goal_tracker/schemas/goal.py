from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import date, datetime
from typing import List, Optional

from goal_tracker.services.lifecycle import GoalStatus, parse_status


class GoalCreate(BaseModel):
    model_config = {"populate_by_name": True}

    email: EmailStr
    goal: str = Field(..., min_length=1, max_length=1000)
    target_date: date = Field(..., alias="targetDate")


class GoalPatch(BaseModel):
    model_config = {"populate_by_name": True}

    goal: Optional[str] = Field(None, min_length=1, max_length=1000)
    target_date: Optional[date] = Field(None, alias="targetDate")
    status: Optional[GoalStatus] = None

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, value):
        if value is None:
            return value
        return parse_status(value)

    def has_updates(self) -> bool:
        return any(v is not None for v in (self.goal, self.target_date, self.status))


class GoalResponse(BaseModel):
    model_config = {"populate_by_name": True}

    id: str
    goal: str
    target_date: date = Field(..., serialization_alias="targetDate")
    status: GoalStatus
    user_id: Optional[str] = Field(None, serialization_alias="userId")
    email: str = ""
    user_name: str = Field("", serialization_alias="userName")
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    updated_at: Optional[date] = Field(None, serialization_alias="updatedAt")
    progress: int = 0


class GoalEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    goal: Optional[GoalResponse] = None


class GoalListEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    goals: List[GoalResponse] = []


class RewriteRequest(BaseModel):
    goal: str = Field(..., min_length=1, max_length=1000)


class RewriteEnvelope(BaseModel):
    success: bool = True
    goal: str
