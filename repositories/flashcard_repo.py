from sqlalchemy import Float, case, cast, delete, func, or_, select, update
from sqlalchemy.orm import Session

from models.flashcard import Flashcard


def _like_pattern(word: str) -> str:
    escaped = word.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class FlashcardRepository:
    def __init__(self, db: Session):
        self.db = db

    def add_many(
        self,
        *,
        user_id: int,
        topic: str,
        difficulty: str,
        cards: list[tuple[str, str]],
        is_ai_generated: bool,
    ) -> list[Flashcard]:
        entities = [
            Flashcard(
                user_id=user_id,
                topic=topic,
                question=question,
                answer=answer,
                difficulty=difficulty,
                is_ai_generated=is_ai_generated,
                study_count=0,
                correct_count=0,
            )
            for question, answer in cards
        ]
        self.db.add_all(entities)
        self.db.flush()
        return entities

    def get_for_user(self, *, user_id: int, flashcard_id: int) -> Flashcard | None:
        stmt = select(Flashcard).where(
            Flashcard.id == flashcard_id,
            Flashcard.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_cards(
        self,
        *,
        user_id: int,
        topic: str | None = None,
        difficulty: str | None = None,
    ) -> list[Flashcard]:
        stmt = select(Flashcard).where(Flashcard.user_id == user_id)
        if topic:
            stmt = stmt.where(Flashcard.topic == topic)
        if difficulty:
            stmt = stmt.where(Flashcard.difficulty == difficulty)
        stmt = stmt.order_by(Flashcard.id.desc())
        return list(self.db.execute(stmt).scalars())

    def search(
        self,
        *,
        user_id: int,
        words: list[str],
        topic: str | None = None,
        difficulty: str | None = None,
        limit: int = 20,
    ) -> list[Flashcard]:
        """Rank cards by how many of ``words`` occur in the question.

        Case folding is left to the database. SQLite folds ASCII letters only,
        so there "ärger" does not match "Ärger"; PostgreSQL folds both.
        """
        if not words:
            return []

        matches = [Flashcard.question.ilike(_like_pattern(word), escape="\\") for word in words]
        score = sum(case((match, 1), else_=0) for match in matches)

        stmt = (
            select(Flashcard)
            .where(Flashcard.user_id == user_id)
            .where(or_(*matches))
        )
        if topic:
            stmt = stmt.where(Flashcard.topic == topic)
        if difficulty:
            stmt = stmt.where(Flashcard.difficulty == difficulty)
        stmt = stmt.order_by(score.desc(), Flashcard.id.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars())

    def delete_for_user(self, *, user_id: int, flashcard_id: int) -> bool:
        stmt = (
            delete(Flashcard)
            .where(Flashcard.id == flashcard_id, Flashcard.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1

    def record_result(self, *, user_id: int, flashcard_id: int, was_correct: bool) -> bool:
        """Bump study statistics in one UPDATE. False when the card is missing or foreign."""
        stmt = (
            update(Flashcard)
            .where(Flashcard.id == flashcard_id, Flashcard.user_id == user_id)
            .values(
                study_count=Flashcard.study_count + 1,
                correct_count=Flashcard.correct_count + (1 if was_correct else 0),
            )
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1

    def get_study_cards(
        self,
        *,
        user_id: int,
        topic: str | None = None,
        limit: int | None = None,
        order: str = "newest",
    ) -> list[Flashcard]:
        stmt = select(Flashcard).where(Flashcard.user_id == user_id)
        if topic:
            stmt = stmt.where(Flashcard.topic == topic)

        if order == "weakest":
            ratio = case(
                (Flashcard.study_count == 0, -1.0),
                else_=cast(Flashcard.correct_count, Float) / Flashcard.study_count,
            )
            stmt = stmt.order_by(ratio.asc(), Flashcard.id.desc())
        elif order == "random":
            stmt = stmt.order_by(func.random())
        else:
            stmt = stmt.order_by(Flashcard.id.desc())

        if limit:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars())

    def count_cards(self, user_id: int) -> int:
        stmt = select(func.count(Flashcard.id)).where(Flashcard.user_id == user_id)
        return self.db.execute(stmt).scalar_one()

    def count_studied_cards(self, user_id: int) -> int:
        stmt = select(func.count(Flashcard.id)).where(
            Flashcard.user_id == user_id,
            Flashcard.study_count > 0,
        )
        return self.db.execute(stmt).scalar_one()
