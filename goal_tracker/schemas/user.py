from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

class LoginRequest(BaseModel):
    email: EmailStr

class UserCreate(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=100)

class UserResponse(BaseModel):
    id: str
    email: EmailStr
    name: Optional[str]
    joined_at: Optional[datetime] = Field(None, serialization_alias="joinedAt")

    model_config = {"from_attributes": True, "populate_by_name": True}

class LoginResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    token_type: str = Field("bearer", serialization_alias="tokenType")
    user: UserResponse

class UserEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: UserResponse
