from pydantic import BaseModel, Field
from typing import List, Optional


class ReminderResult(BaseModel):
    goal: str
    email: str
    sent: bool


class DigestResult(BaseModel):
    email: str
    sent: bool
    completed_count: int = Field(0, serialization_alias="completedCount")
    pending_count: int = Field(0, serialization_alias="pendingCount")
    incomplete_count: int = Field(0, serialization_alias="incompleteCount")


class ReminderBatchResponse(BaseModel):
    success: bool = True
    message: str
    results: Optional[List[ReminderResult]] = None


class DigestBatchResponse(BaseModel):
    success: bool = True
    message: str
    results: Optional[List[DigestResult]] = None
