import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, func, Date
from goal_tracker.database import Base


def new_record_id() -> str:
    return f"rec{uuid.uuid4().hex[:14]}"


class Goal(Base):
    __tablename__ = "goals"

    id = Column(String(32), primary_key=True, default=new_record_id)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    target_date = Column(Date, nullable=False, index=True)
    status = Column(String(16), nullable=False, default="pending")  # pending, completed, incomplete
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(Date, nullable=True)  # day of the last status/field change
