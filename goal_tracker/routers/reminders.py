from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.database import get_db
from goal_tracker.schemas.reminder import DigestBatchResponse, ReminderBatchResponse
from goal_tracker.services import reminders
from goal_tracker.services.email import ResendMailer, get_mailer

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


@router.get("/sendReminders", response_model=ReminderBatchResponse, response_model_exclude_none=True)
async def send_reminders(
    db: AsyncSession = Depends(get_db),
    mailer: ResendMailer = Depends(get_mailer),
):
    """Triggered by an external scheduler once a day."""
    results = await reminders.send_reminders(db, mailer)
    if not results:
        return ReminderBatchResponse(message="No reminders to send today")

    sent = sum(1 for r in results if r.sent)
    return ReminderBatchResponse(message=f"Sent {sent} reminders", results=results)


@router.get("/sendDigest", response_model=DigestBatchResponse, response_model_exclude_none=True)
async def send_digest(
    db: AsyncSession = Depends(get_db),
    mailer: ResendMailer = Depends(get_mailer),
):
    results = await reminders.send_digests(db, mailer)
    if not results:
        return DigestBatchResponse(message="No users to send digests to")

    sent = sum(1 for r in results if r.sent)
    return DigestBatchResponse(message=f"Sent {sent} weekly digests", results=results)
