from sqlalchemy import Integer, func, select
from sqlalchemy.orm import Session

from models.study_session import StudySessionEvent


class StudySessionRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, *, user_id: int, flashcard_id: int, was_correct: bool, time_spent: int) -> StudySessionEvent:
        event = StudySessionEvent(
            user_id=user_id,
            flashcard_id=flashcard_id,
            was_correct=was_correct,
            time_spent=time_spent,
        )
        self.db.add(event)
        self.db.flush()
        return event

    def list_events(
        self,
        *,
        user_id: int,
        flashcard_id: int | None = None,
        limit: int = 50,
    ) -> list[StudySessionEvent]:
        stmt = select(StudySessionEvent).where(StudySessionEvent.user_id == user_id)
        if flashcard_id is not None:
            stmt = stmt.where(StudySessionEvent.flashcard_id == flashcard_id)
        stmt = stmt.order_by(StudySessionEvent.id.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars())

    def answer_totals(self, user_id: int) -> tuple[int, int]:
        """Return ``(answers, correct_answers)`` recorded by the user."""
        stmt = select(
            func.count(StudySessionEvent.id),
            func.coalesce(func.sum(StudySessionEvent.was_correct.cast(Integer)), 0),
        ).where(StudySessionEvent.user_id == user_id)
        total, correct = self.db.execute(stmt).one()
        return int(total or 0), int(correct or 0)
