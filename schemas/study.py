from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class StudyAnswerIn(BaseModel):
    flashcard_id: int = Field(gt=0)
    was_correct: bool
    time_spent: int = Field(default=0, ge=0, description="Seconds spent on the card")


class StudySessionEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    flashcard_id: int
    was_correct: bool
    time_spent: int
    created_at: datetime | None = None


class StudyStatsOut(BaseModel):
    total_cards: int
    total_topics: int
    studied_cards: int
    answers: int
    correct_answers: int
    accuracy: int
