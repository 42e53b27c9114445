import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.config import settings
from goal_tracker.core.auth import is_admin_email
from goal_tracker.core.security import verify_status_link_token
from goal_tracker.database import get_db
from goal_tracker.schemas.goal import GoalCreate, GoalPatch, GoalEnvelope, GoalListEnvelope
from goal_tracker.services import goals as goal_service
from goal_tracker.services.lifecycle import InvalidStatusError, TransitionSource, parse_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("", response_model=GoalListEnvelope, response_model_exclude_none=True)
async def list_goals(
    email: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    if not email:
        raise HTTPException(400, "Email is required")
    goals = await goal_service.list_user_goals(db, email)
    return GoalListEnvelope(goals=goals)


@router.post("", response_model=GoalEnvelope, response_model_exclude_none=True)
async def create_goal(
    goal_in: GoalCreate,
    db: AsyncSession = Depends(get_db),
):
    goal = await goal_service.create_goal(db, goal_in.email, goal_in.goal, goal_in.target_date)
    if goal is None:
        raise HTTPException(500, "Failed to create goal")
    return GoalEnvelope(goal=goal)


@router.get("/updateStatus")
async def update_status_from_link(
    id: Optional[str] = None,
    status: Optional[str] = None,
    email: Optional[str] = None,
    token: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """One-click status change from a reminder email; redirects to a confirmation page."""
    if not id or not status or not email:
        raise HTTPException(400, "Missing required parameters")
    try:
        new_status = parse_status(status, TransitionSource.EMAIL_LINK)
    except InvalidStatusError:
        raise HTTPException(400, "Invalid status")

    signed = bool(token) and verify_status_link_token(token, id, new_status.value, email)
    if not signed:
        if settings.REQUIRE_SIGNED_LINKS:
            raise HTTPException(401, "Invalid or expired link")
        logger.warning("Unsigned status link used for goal %s by %s", id, email)

    goal = await goal_service.update_goal(db, id, status=new_status, source=TransitionSource.EMAIL_LINK)
    if goal is None:
        raise HTTPException(500, "Failed to update goal status")
    return RedirectResponse(url=f"/status-updated?status={new_status.value}", status_code=307)


@router.put("/{goal_id}", response_model=GoalEnvelope, response_model_exclude_none=True)
async def update_goal(
    goal_id: str,
    patch: GoalPatch,
    email: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    if not patch.has_updates():
        raise HTTPException(400, "No updates provided")

    source = TransitionSource.ADMIN if is_admin_email(email) else TransitionSource.USER
    goal = await goal_service.update_goal(
        db,
        goal_id,
        description=patch.goal,
        target_date=patch.target_date,
        status=patch.status,
        source=source,
    )
    if goal is None:
        raise HTTPException(500, "Failed to update goal")
    return GoalEnvelope(goal=goal)


@router.delete("/{goal_id}", response_model=GoalEnvelope, response_model_exclude_none=True)
async def delete_goal(
    goal_id: str,
    db: AsyncSession = Depends(get_db),
):
    if not await goal_service.delete_goal(db, goal_id):
        raise HTTPException(500, "Failed to delete goal")
    return GoalEnvelope(message="Goal deleted")
