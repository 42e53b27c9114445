import logging
from html import escape
from typing import Dict, List, Optional
from urllib.parse import urlencode

import httpx

from goal_tracker.config import settings
from goal_tracker.core.security import create_status_link_token
from goal_tracker.schemas.goal import GoalResponse
from goal_tracker.services.lifecycle import GoalStatus

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


class ResendMailer:
    """Transactional email over the Resend HTTP API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        sender: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.RESEND_API_KEY
        self.sender = sender or settings.EMAIL_FROM
        self.api_url = api_url or settings.RESEND_API_URL
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self.transport = transport

    async def send(self, to: str, subject: str, html: str) -> str:
        if not self.api_key:
            raise EmailDeliveryError("RESEND_API_KEY is not configured")

        payload = {"from": self.sender, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(self.api_url, json=payload, headers=headers)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise EmailDeliveryError(f"Email to {to} failed: {e}") from e
        return response.json().get("id", "")


def get_mailer() -> ResendMailer:
    return ResendMailer()


def status_link(goal: GoalResponse, status: GoalStatus, app_url: Optional[str] = None) -> str:
    base = (app_url or settings.APP_URL).rstrip("/")
    query = urlencode({
        "id": goal.id,
        "status": status.value,
        "email": goal.email,
        "token": create_status_link_token(goal.id, status.value, goal.email),
    })
    return f"{base}/api/goals/updateStatus?{query}"


def render_reminder(goal: GoalResponse, app_url: Optional[str] = None) -> str:
    done = escape(status_link(goal, GoalStatus.COMPLETED, app_url), quote=True)
    not_done = escape(status_link(goal, GoalStatus.INCOMPLETE, app_url), quote=True)
    return f"""
<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #333;">Goal Reminder</h1>
  <p>Your goal <strong>"{escape(goal.goal)}"</strong> was due today.</p>
  <p>Did you complete it?</p>
  <div style="margin: 30px 0;">
    <a href="{done}" style="background-color: #4CAF50; color: white; padding: 12px 20px; text-decoration: none; margin-right: 10px; border-radius: 4px;">Yes, I completed it</a>
    <a href="{not_done}" style="background-color: #f44336; color: white; padding: 12px 20px; text-decoration: none; border-radius: 4px;">No, I didn't complete it</a>
  </div>
  <p style="color: #666; font-size: 0.8em;">You're receiving this email because you've set up a goal in Goal Tracker.</p>
</div>
"""


DIGEST_SECTIONS = (
    ("completed", "Completed", "#4CAF50", "#f2f9f2"),
    ("pending", "Still Working On", "#FFC107", "#fffbeb"),
    ("incomplete", "Incomplete", "#F44336", "#feebeb"),
)


def render_digest(groups: Dict[str, List[GoalResponse]]) -> str:
    sections = []
    for key, title, color, background in DIGEST_SECTIONS:
        goals = groups.get(key) or []
        if not goals:
            continue
        items = []
        for goal in goals:
            text = escape(goal.goal)
            if key == "pending":
                text += f" (Due: {goal.target_date.isoformat()})"
            items.append(
                f'<li style="margin-bottom: 10px; padding: 10px; background-color: {background}; border-radius: 4px;">{text}</li>'
            )
        sections.append(
            f'<h2 style="color: {color};">{title}:</h2>'
            f'<ul style="list-style-type: none; padding: 0;">{"".join(items)}</ul>'
        )
    return f"""
<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #333;">Your Weekly Recap</h1>
  {"".join(sections)}
  <p style="margin-top: 30px; font-weight: bold;">Let's make next week even better!</p>
  <p style="color: #666; font-size: 0.8em; margin-top: 50px;">You're receiving this email because you've set up goals in Goal Tracker.</p>
</div>
"""
