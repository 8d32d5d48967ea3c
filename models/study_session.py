from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, func
from core.database import Base


class StudySessionEvent(Base):
    __tablename__ = "study_sessions"
    __table_args__ = (
        CheckConstraint("time_spent >= 0", name="ck_study_sessions_time_spent_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # no foreign key: events outlive the card they were recorded against
    flashcard_id = Column(Integer, nullable=False, index=True)
    was_correct = Column(Boolean, nullable=False)
    time_spent = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
