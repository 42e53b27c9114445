from sqlalchemy import Column, String, DateTime, func
from goal_tracker.database import Base
from goal_tracker.models.goal import new_record_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_record_id)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=True)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def display_name(self) -> str:
        return self.name or self.email
