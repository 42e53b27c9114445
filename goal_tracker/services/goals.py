import logging
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.models.goal import Goal
from goal_tracker.models.user import User
from goal_tracker.schemas.goal import GoalResponse
from goal_tracker.services.lifecycle import GoalStatus, TransitionSource, apply_transition, touch
from goal_tracker.services.progress import calculate_progress

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def to_response(goal: Goal, owner: Optional[User], today: Optional[date] = None) -> GoalResponse:
    """Goal row plus denormalized owner fields and computed progress."""
    return GoalResponse(
        id=goal.id,
        goal=goal.description,
        target_date=goal.target_date,
        status=goal.status,
        user_id=goal.user_id,
        email=owner.email if owner else "",
        user_name=owner.display_name if owner else "",
        created_at=goal.created_at,
        updated_at=goal.updated_at,
        progress=calculate_progress(goal.created_at, goal.target_date, goal.status, today),
    )


# Users

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(func.lower(User.email) == email.strip().lower()).limit(1)
    )
    return result.scalar_one_or_none()


async def get_all_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.joined_at))
    return list(result.scalars().all())


async def create_user(db: AsyncSession, email: str, name: Optional[str] = None) -> User:
    user = User(email=email.strip().lower(), name=name or None)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Created user %s", user.email)
    return user


async def _lookup_owner(db: AsyncSession, user_id: str) -> Optional[User]:
    # Best effort: the write has already been committed.
    try:
        return await db.get(User, user_id)
    except SQLAlchemyError:
        logger.exception("Owner lookup failed for user %s", user_id)
        return None


# Goals

async def list_user_goals(db: AsyncSession, email: str) -> List[GoalResponse]:
    owner = await get_user_by_email(db, email)
    if owner is None:
        return []
    result = await db.execute(
        select(Goal).where(Goal.user_id == owner.id).order_by(Goal.target_date)
    )
    today = utc_today()
    return [to_response(goal, owner, today) for goal in result.scalars()]


async def create_goal(
    db: AsyncSession, email: str, description: str, target_date: date
) -> Optional[GoalResponse]:
    owner = await get_user_by_email(db, email)
    if owner is None:
        logger.error("Cannot create goal, user not found: %s", email)
        return None

    goal = Goal(
        user_id=owner.id,
        description=description,
        target_date=target_date,
        status=GoalStatus.PENDING.value,
    )
    db.add(goal)
    await db.commit()
    await db.refresh(goal)

    return to_response(goal, await _lookup_owner(db, goal.user_id))


async def update_goal(
    db: AsyncSession,
    goal_id: str,
    description: Optional[str] = None,
    target_date: Optional[date] = None,
    status: Optional[GoalStatus] = None,
    source: TransitionSource = TransitionSource.USER,
) -> Optional[GoalResponse]:
    goal = await db.get(Goal, goal_id)
    if goal is None:
        logger.error("Goal not found: %s", goal_id)
        return None

    if description is not None:
        goal.description = description
    if target_date is not None:
        goal.target_date = target_date
    if status is not None:
        logger.info("Goal %s: %s -> %s (%s)", goal_id, goal.status, status.value, source.value)
        apply_transition(goal, status)
    else:
        touch(goal)

    await db.commit()
    await db.refresh(goal)

    return to_response(goal, await _lookup_owner(db, goal.user_id))


async def delete_goal(db: AsyncSession, goal_id: str) -> bool:
    goal = await db.get(Goal, goal_id)
    if goal is None:
        logger.error("Cannot delete, goal not found: %s", goal_id)
        return False
    await db.delete(goal)
    await db.commit()
    logger.info("Deleted goal %s", goal_id)
    return True


async def _owners_by_id(db: AsyncSession, user_ids: Iterable[str]) -> Dict[str, User]:
    ids = {uid for uid in user_ids if uid}
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return {user.id: user for user in result.scalars()}


async def list_all_goals(db: AsyncSession) -> List[GoalResponse]:
    result = await db.execute(select(Goal).order_by(Goal.target_date))
    goals = list(result.scalars())
    owners = await _owners_by_id(db, (g.user_id for g in goals))
    today = utc_today()
    return [to_response(goal, owners.get(goal.user_id), today) for goal in goals]


async def get_goals_due(db: AsyncSession, day: date) -> List[GoalResponse]:
    """Pending goals whose target date is ``day``, with owner fields."""
    result = await db.execute(
        select(Goal)
        .where(Goal.target_date == day)
        .where(Goal.status == GoalStatus.PENDING.value)
    )
    goals = list(result.scalars())
    owners = await _owners_by_id(db, (g.user_id for g in goals))
    return [to_response(goal, owners.get(goal.user_id), day) for goal in goals]
