from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError
from models.topic import Topic


class TopicRepository:
    """Topic rows and their derived flashcard counter.

    Methods here never commit; the calling service owns the transaction so the
    counter change and the sibling flashcard insert/delete land together.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_name(self, *, user_id: int, name: str) -> Topic | None:
        stmt = select(Topic).where(Topic.user_id == user_id, Topic.name == name)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_topics(self, user_id: int) -> list[Topic]:
        stmt = select(Topic).where(Topic.user_id == user_id).order_by(Topic.id.desc())
        return list(self.db.execute(stmt).scalars())

    def count_topics(self, user_id: int) -> int:
        stmt = select(func.count(Topic.id)).where(Topic.user_id == user_id)
        return self.db.execute(stmt).scalar_one()

    def get_or_create(self, *, user_id: int, name: str) -> Topic:
        """Find the topic or insert it with a zero count.

        Must run before any other write in the transaction: losing the insert
        race rolls the transaction back.
        """
        topic = self.get_by_name(user_id=user_id, name=name)
        if topic is not None:
            return topic

        topic = Topic(user_id=user_id, name=name, flashcard_count=0)
        self.db.add(topic)
        try:
            self.db.flush()
        except IntegrityError:
            # another request created it first; uq_topics_user_name held
            self.db.rollback()
            topic = self.get_by_name(user_id=user_id, name=name)
            if topic is None:
                raise
        return topic

    def increment_count(self, topic_id: int, by: int = 1) -> bool:
        """Add ``by`` in a single UPDATE. False when the row is gone."""
        stmt = (
            update(Topic)
            .where(Topic.id == topic_id)
            .values(flashcard_count=Topic.flashcard_count + by)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1

    def decrement_or_delete(self, *, user_id: int, name: str) -> str | None:
        """Drop one card from the topic counter.

        Returns ``"decremented"``, ``"deleted"``, or ``None`` when no topic row
        matches (nothing is touched).
        """
        topic = self.get_by_name(user_id=user_id, name=name)
        if topic is None:
            return None

        # a concurrent create can move the count between the two guarded
        # statements, so each pass re-checks which branch applies
        for _ in range(3):
            decremented = self.db.execute(
                update(Topic)
                .where(Topic.id == topic.id, Topic.flashcard_count > 1)
                .values(flashcard_count=Topic.flashcard_count - 1)
                .execution_options(synchronize_session=False)
            ).rowcount
            if decremented:
                return "decremented"

            deleted = self.db.execute(
                delete(Topic)
                .where(Topic.id == topic.id, Topic.flashcard_count <= 1)
                .execution_options(synchronize_session=False)
            ).rowcount
            if deleted:
                self.db.expunge(topic)
                return "deleted"
            if self.get_by_name(user_id=user_id, name=name) is None:
                return None
        raise ConflictError(f"Topic '{name}' changed concurrently, please retry")
