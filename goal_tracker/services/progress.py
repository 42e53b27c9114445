import logging
from datetime import date, datetime, timezone
from typing import Optional, Union

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str, None]

NEW_GOAL_PROGRESS = 5
TERMINAL_STATUSES = {"completed", "incomplete"}


def _as_date(value: DateLike, default: Optional[date] = None) -> date:
    if value is None or value == "":
        if default is None:
            raise ValueError("date is required")
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # "2024-01-11" or a full ISO timestamp
    text = str(value).strip().replace("Z", "+00:00")
    if len(text) == 10:
        return date.fromisoformat(text)
    return datetime.fromisoformat(text).date()


def calculate_progress(
    created_at: DateLike,
    target_date: DateLike,
    status: str,
    today: Optional[date] = None,
) -> int:
    """Share of the goal's time span already used up, as an int in [0, 100].

    Terminal goals and overdue goals are always full. A goal created today
    shows a small fixed amount so it doesn't look empty. Malformed input
    never raises; it yields 0.
    """
    try:
        if status in TERMINAL_STATUSES:
            return 100

        today = today or datetime.now(timezone.utc).date()
        target = _as_date(target_date)
        if today > target:
            return 100

        created = _as_date(created_at, default=today)
        total_days = (target - created).days
        if total_days <= 0:
            return 0

        elapsed = (today - created).days
        if elapsed == 0:
            return NEW_GOAL_PROGRESS

        # round half up, not to even
        return max(0, min(100, int(elapsed * 100 / total_days + 0.5)))
    except Exception as exc:
        logger.warning("Could not calculate progress (target=%r, created=%r): %s", target_date, created_at, exc)
        return 0
