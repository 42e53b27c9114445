from html import escape
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["pages"])

STATUS_PAGES = {
    "completed": ("Goal Completed!", "Congratulations on completing your goal! Keep up the great work.", "#16a34a"),
    "incomplete": (
        "Goal Marked as Incomplete",
        "No worries - acknowledging incomplete goals helps you plan better next time.",
        "#dc2626",
    ),
}
DEFAULT_PAGE = ("Goal Status Updated", "Your goal status has been updated successfully.", "#2563eb")


@router.get("/status-updated", response_class=HTMLResponse)
async def status_updated(status: Optional[str] = None):
    """Landing page for one-click status links."""
    title, message, color = STATUS_PAGES.get(status or "", DEFAULT_PAGE)
    return f"""<!doctype html>
<html>
<head><meta charset="utf-8"><title>{escape(title)}</title></head>
<body style="font-family: sans-serif; display: flex; justify-content: center; padding-top: 10vh; background: #f9fafb;">
  <main style="max-width: 28rem; background: white; padding: 2rem; border-radius: 8px; text-align: center;">
    <h1 style="color: {color};">{escape(title)}</h1>
    <p>{escape(message)}</p>
    <a href="/dashboard">Go to Dashboard</a>
  </main>
</body>
</html>"""
