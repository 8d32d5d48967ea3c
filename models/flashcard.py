from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, func
from core.database import Base


DIFFICULTIES = ("easy", "medium", "hard")


class Flashcard(Base):
    __tablename__ = "flashcards"
    __table_args__ = (
        CheckConstraint("study_count >= 0", name="ck_flashcards_study_count_non_negative"),
        CheckConstraint("correct_count >= 0 AND correct_count <= study_count", name="ck_flashcards_correct_le_study"),
        CheckConstraint("difficulty IN ('easy', 'medium', 'hard')", name="ck_flashcards_difficulty"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    topic = Column(String(100), nullable=False, index=True)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    difficulty = Column(String(10), nullable=False, index=True)
    is_ai_generated = Column(Boolean, nullable=False, default=False)
    study_count = Column(Integer, nullable=False, default=0, server_default="0")
    correct_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
