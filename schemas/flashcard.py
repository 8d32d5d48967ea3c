from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, constr, field_validator

from services.study_service import accuracy as accuracy_percent


Difficulty = Literal["easy", "medium", "hard"]
StudyOrder = Literal["newest", "random", "weakest"]


class FlashcardCreateIn(BaseModel):
    topic: constr(strip_whitespace=True, min_length=1, max_length=100)
    question: constr(strip_whitespace=True, min_length=1)
    answer: constr(strip_whitespace=True, min_length=1)
    difficulty: Difficulty = "medium"


class FlashcardGenerateIn(BaseModel):
    topic: constr(strip_whitespace=True, min_length=1, max_length=100)
    count: int = Field(default=5, ge=1, le=20)
    difficulty: Difficulty = "medium"
    context: str | None = None

    @field_validator("context", mode="before")
    @classmethod
    def _empty_context_to_none(cls, value: str | None):
        if value is None:
            return None
        if isinstance(value, str):
            trimmed = value.strip()
            return trimmed or None
        return value


class GeneratedCardIn(BaseModel):
    """One question/answer pair as returned by the generator."""

    question: constr(strip_whitespace=True, min_length=1)
    answer: constr(strip_whitespace=True, min_length=1)


class FlashcardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    topic: str
    question: str
    answer: str
    difficulty: Difficulty
    is_ai_generated: bool
    study_count: int
    correct_count: int
    created_at: datetime | None = None

    @computed_field
    @property
    def accuracy(self) -> int:
        return accuracy_percent(self.correct_count, self.study_count)


class TopicOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    flashcard_count: int
