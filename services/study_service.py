from dataclasses import dataclass

import structlog
from sqlalchemy.orm import Session

from core.exceptions import AuthError, ValidationError
from models.study_session import StudySessionEvent
from repositories.flashcard_repo import FlashcardRepository
from repositories.study_session_repo import StudySessionRepository
from repositories.topic_repo import TopicRepository

logger = structlog.get_logger(__name__)


def accuracy(correct_count: int, study_count: int) -> int:
    """Correct answers as a whole percent, halves rounded up. 0 when never studied."""
    if study_count <= 0:
        return 0
    return (200 * correct_count + study_count) // (2 * study_count)


@dataclass
class StudyStats:
    total_cards: int = 0
    total_topics: int = 0
    studied_cards: int = 0
    answers: int = 0
    correct_answers: int = 0

    @property
    def accuracy(self) -> int:
        return accuracy(self.correct_answers, self.answers)


class StudyService:
    def __init__(self, db: Session):
        self.db = db
        self.card_repo = FlashcardRepository(db)
        self.event_repo = StudySessionRepository(db)
        self.topic_repo = TopicRepository(db)

    def record_answer(
        self,
        *,
        owner_id: int | None,
        flashcard_id: int,
        was_correct: bool,
        time_spent: int,
    ) -> StudySessionEvent:
        """Append a study event and bump the card's statistics.

        The event is kept even when the card is missing or belongs to someone
        else; only the statistics update is skipped in that case.
        """
        if owner_id is None:
            raise AuthError()
        if time_spent < 0:
            raise ValidationError("Time spent must not be negative")

        try:
            event = self.event_repo.add(
                user_id=owner_id,
                flashcard_id=flashcard_id,
                was_correct=was_correct,
                time_spent=time_spent,
            )
            updated = self.card_repo.record_result(
                user_id=owner_id,
                flashcard_id=flashcard_id,
                was_correct=was_correct,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(event)
        if updated:
            logger.info(
                "study_answer_recorded",
                user_id=owner_id,
                flashcard_id=flashcard_id,
                was_correct=was_correct,
            )
        else:
            logger.warning("study_stats_skipped", user_id=owner_id, flashcard_id=flashcard_id)
        return event

    def list_events(
        self,
        *,
        owner_id: int | None,
        flashcard_id: int | None = None,
        limit: int = 50,
    ) -> list[StudySessionEvent]:
        if owner_id is None:
            return []
        return self.event_repo.list_events(user_id=owner_id, flashcard_id=flashcard_id, limit=limit)

    def get_stats(self, *, owner_id: int | None) -> StudyStats:
        if owner_id is None:
            return StudyStats()
        answers, correct = self.event_repo.answer_totals(owner_id)
        return StudyStats(
            total_cards=self.card_repo.count_cards(owner_id),
            total_topics=self.topic_repo.count_topics(owner_id),
            studied_cards=self.card_repo.count_studied_cards(owner_id),
            answers=answers,
            correct_answers=correct,
        )
