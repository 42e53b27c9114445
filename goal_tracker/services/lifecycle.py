import enum
from datetime import date, datetime, timezone
from typing import Optional

from goal_tracker.models.goal import Goal


class GoalStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"


class TransitionSource(str, enum.Enum):
    USER = "user"
    EMAIL_LINK = "email_link"
    ADMIN = "admin"


# Emailed links only offer the two outcomes of a due goal.
LINK_STATUSES = {GoalStatus.COMPLETED, GoalStatus.INCOMPLETE}


class InvalidStatusError(ValueError):
    def __init__(self, value):
        super().__init__(f"Invalid status: {value!r}")
        self.value = value


def parse_status(value, source: TransitionSource = TransitionSource.USER) -> GoalStatus:
    """Validate a requested status before anything reaches the store."""
    try:
        status = GoalStatus(value)
    except ValueError:
        raise InvalidStatusError(value)
    if source is TransitionSource.EMAIL_LINK and status not in LINK_STATUSES:
        raise InvalidStatusError(value)
    return status


def apply_transition(goal: Goal, status: GoalStatus, today: Optional[date] = None) -> Goal:
    goal.status = status.value
    touch(goal, today)
    return goal


def touch(goal: Goal, today: Optional[date] = None) -> None:
    goal.updated_at = today or datetime.now(timezone.utc).date()
