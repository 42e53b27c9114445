import asyncio
import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.schemas.goal import GoalResponse
from goal_tracker.schemas.reminder import DigestResult, ReminderResult
from goal_tracker.services import goals as goal_service
from goal_tracker.services.email import ResendMailer, render_digest, render_reminder
from goal_tracker.services.lifecycle import GoalStatus

logger = logging.getLogger(__name__)

REMINDER_SUBJECT = "Reminder: Your goal is due today"
DIGEST_SUBJECT = "Your Weekly Goal Progress Recap"


async def _deliver(mailer: ResendMailer, to: str, subject: str, html: str) -> bool:
    # One recipient's failure must not sink the batch.
    try:
        await mailer.send(to, subject, html)
    except Exception:
        logger.exception("Failed to send %r to %s", subject, to)
        return False
    return True


async def send_reminders(
    db: AsyncSession, mailer: ResendMailer, today: Optional[date] = None
) -> List[ReminderResult]:
    """Email every owner of a pending goal due ``today``."""
    today = today or goal_service.utc_today()
    due = await goal_service.get_goals_due(db, today)
    logger.info("%d goal(s) due %s", len(due), today)

    sent = await asyncio.gather(
        *(_deliver(mailer, goal.email, REMINDER_SUBJECT, render_reminder(goal)) for goal in due)
    )
    return [
        ReminderResult(goal=goal.goal, email=goal.email, sent=ok)
        for goal, ok in zip(due, sent)
    ]


def group_by_status(goals: List[GoalResponse]) -> Dict[str, List[GoalResponse]]:
    groups: Dict[str, List[GoalResponse]] = {status.value: [] for status in GoalStatus}
    for goal in goals:
        groups.setdefault(goal.status.value, []).append(goal)
    return groups


async def send_digests(db: AsyncSession, mailer: ResendMailer) -> List[DigestResult]:
    users = await goal_service.get_all_users(db)

    # Reads stay sequential on the one session; only the sends fan out.
    batches = []
    for user in users:
        groups = group_by_status(await goal_service.list_user_goals(db, user.email))
        batches.append((user.email, groups))

    sent = await asyncio.gather(
        *(_deliver(mailer, email, DIGEST_SUBJECT, render_digest(groups)) for email, groups in batches)
    )
    return [
        DigestResult(
            email=email,
            sent=ok,
            completed_count=len(groups[GoalStatus.COMPLETED.value]),
            pending_count=len(groups[GoalStatus.PENDING.value]),
            incomplete_count=len(groups[GoalStatus.INCOMPLETE.value]),
        )
        for (email, groups), ok in zip(batches, sent)
    ]
