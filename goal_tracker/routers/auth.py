# goal_tracker/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.models.user import User
from goal_tracker.schemas.user import LoginRequest, LoginResponse, UserEnvelope, UserResponse
from goal_tracker.database import get_db
from goal_tracker.core.security import create_access_token
from goal_tracker.core.auth import get_current_user
from goal_tracker.services import goals as goal_service


router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(user_in: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await goal_service.get_user_by_email(db, user_in.email)

    # No self-registration: unknown emails are turned away
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You're not in the system",
        )

    return LoginResponse(
        message="Login successful",
        token=create_access_token({"sub": user.id, "email": user.email}),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserEnvelope, response_model_exclude_none=True)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return UserEnvelope(user=UserResponse.model_validate(current_user))
