from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.database import get_db
from goal_tracker.core.auth import require_admin_email
from goal_tracker.schemas.goal import GoalListEnvelope
from goal_tracker.schemas.user import UserCreate, UserEnvelope, UserResponse
from goal_tracker.services import goals as goal_service


router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/getAllGoals", response_model=GoalListEnvelope, response_model_exclude_none=True)
async def get_all_goals(
    db: AsyncSession = Depends(get_db),
    admin_email: str = Depends(require_admin_email),
):
    goals = await goal_service.list_all_goals(db)
    return GoalListEnvelope(goals=goals)


@router.post("/users", response_model=UserEnvelope, response_model_exclude_none=True)
async def create_user(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db),
    admin_email: str = Depends(require_admin_email),
):
    if await goal_service.get_user_by_email(db, user_in.email):
        raise HTTPException(400, "Email already registered")

    user = await goal_service.create_user(db, user_in.email, user_in.name)
    return UserEnvelope(message="User created", user=UserResponse.model_validate(user))
