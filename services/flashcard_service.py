import json
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import AuthError, ConflictError, FlashcardNotFoundError, GenerationError, ValidationError
from models.flashcard import DIFFICULTIES, Flashcard
from models.topic import Topic
from repositories.flashcard_repo import FlashcardRepository
from repositories.topic_repo import TopicRepository
from schemas.flashcard import GeneratedCardIn

logger = structlog.get_logger(__name__)

STUDY_ORDERS = ("newest", "random", "weakest")

# (topic, count, difficulty, context) -> raw generator output
GenerateFn = Callable[..., Awaitable[Any]]

_generated_cards = TypeAdapter(list[GeneratedCardIn])


def _require_owner(owner_id: int | None) -> int:
    if owner_id is None:
        raise AuthError()
    return owner_id


def _required_text(value: str | None, field: str) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise ValidationError(f"{field} is required")
    return trimmed


def _check_difficulty(difficulty: str | None) -> str:
    if difficulty not in DIFFICULTIES:
        raise ValidationError("Difficulty must be easy, medium, or hard")
    return difficulty


def _topic_filter(topic: str | None) -> str | None:
    """Topics are stored trimmed, so filters are matched the same way."""
    return (topic or "").strip() or None


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped.split("\n", 1)[1] if "\n" in stripped else ""
        if stripped.rstrip().endswith("```"):
            stripped = stripped.rstrip()[:-3]
    return stripped.strip()


def parse_generated_cards(raw: Any) -> list[tuple[str, str]]:
    """Validate generator output into ``(question, answer)`` pairs.

    Accepts a JSON array (optionally wrapped in a markdown code fence) or an
    already-decoded list of mappings. Anything else raises ``GenerationError``.
    """
    if isinstance(raw, (str, bytes)):
        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            raw = json.loads(_strip_code_fence(text))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise GenerationError("Generated content is not valid JSON") from exc

    try:
        cards = _generated_cards.validate_python(raw)
    except PydanticValidationError as exc:
        raise GenerationError("Generated content must be a list of question/answer objects") from exc

    if not cards:
        raise GenerationError("No flashcards were generated")
    return [(card.question, card.answer) for card in cards]


class FlashcardService:
    """Flashcards and topics for one database session.

    Every write commits once, so a topic counter change and the flashcard rows
    it accounts for become visible together or not at all.
    """

    def __init__(self, db: Session):
        self.db = db
        self.card_repo = FlashcardRepository(db)
        self.topic_repo = TopicRepository(db)

    def _insert_cards(
        self,
        *,
        owner_id: int,
        topic: str,
        difficulty: str,
        cards: list[tuple[str, str]],
        is_ai_generated: bool,
    ) -> list[Flashcard]:
        try:
            topic_row = self.topic_repo.get_or_create(user_id=owner_id, name=topic)
            if not self.topic_repo.increment_count(topic_row.id, by=len(cards)):
                raise ConflictError(f"Topic '{topic}' changed concurrently, please retry")
            created = self.card_repo.add_many(
                user_id=owner_id,
                topic=topic,
                difficulty=difficulty,
                cards=cards,
                is_ai_generated=is_ai_generated,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for card in created:
            self.db.refresh(card)
        return created

    def create_flashcard(
        self,
        *,
        owner_id: int | None,
        topic: str,
        question: str,
        answer: str,
        difficulty: str,
    ) -> Flashcard:
        owner_id = _require_owner(owner_id)
        topic = _required_text(topic, "Topic")
        question = _required_text(question, "Question")
        answer = _required_text(answer, "Answer")
        difficulty = _check_difficulty(difficulty)

        (card,) = self._insert_cards(
            owner_id=owner_id,
            topic=topic,
            difficulty=difficulty,
            cards=[(question, answer)],
            is_ai_generated=False,
        )
        logger.info("flashcard_created", user_id=owner_id, flashcard_id=card.id, topic=topic)
        return card

    def create_flashcards_batch(
        self,
        *,
        owner_id: int | None,
        topic: str,
        difficulty: str,
        items: Any,
    ) -> list[Flashcard]:
        owner_id = _require_owner(owner_id)
        topic = _required_text(topic, "Topic")
        difficulty = _check_difficulty(difficulty)
        cards = parse_generated_cards(items)

        created = self._insert_cards(
            owner_id=owner_id,
            topic=topic,
            difficulty=difficulty,
            cards=cards,
            is_ai_generated=True,
        )
        logger.info("flashcards_batch_created", user_id=owner_id, topic=topic, count=len(created))
        return created

    async def generate_flashcards(
        self,
        *,
        owner_id: int | None,
        topic: str,
        count: int,
        difficulty: str,
        generate: GenerateFn,
        context: str | None = None,
    ) -> list[Flashcard]:
        """Ask ``generate`` for cards, then store them as one batch.

        No transaction is open while the generator runs.
        """
        owner_id = _require_owner(owner_id)
        topic = _required_text(topic, "Topic")
        difficulty = _check_difficulty(difficulty)
        if not 1 <= count <= settings.AI_MAX_CARDS:
            raise ValidationError(f"Count must be between 1 and {settings.AI_MAX_CARDS}")

        try:
            raw = await generate(topic=topic, count=count, difficulty=difficulty, context=context)
        except GenerationError:
            logger.warning("flashcard_generation_failed", user_id=owner_id, topic=topic)
            raise

        return self.create_flashcards_batch(
            owner_id=owner_id,
            topic=topic,
            difficulty=difficulty,
            items=raw,
        )

    def get_flashcard(self, *, owner_id: int | None, flashcard_id: int) -> Flashcard:
        card = None
        if owner_id is not None:
            card = self.card_repo.get_for_user(user_id=owner_id, flashcard_id=flashcard_id)
        if card is None:
            raise FlashcardNotFoundError(flashcard_id)
        return card

    def list_flashcards(
        self,
        *,
        owner_id: int | None,
        topic: str | None = None,
        difficulty: str | None = None,
    ) -> list[Flashcard]:
        if owner_id is None:
            return []
        if difficulty is not None:
            _check_difficulty(difficulty)
        return self.card_repo.list_cards(user_id=owner_id, topic=_topic_filter(topic), difficulty=difficulty)

    def list_topics(self, *, owner_id: int | None) -> list[Topic]:
        if owner_id is None:
            return []
        return self.topic_repo.list_topics(owner_id)

    def search_flashcards(
        self,
        *,
        owner_id: int | None,
        term: str,
        topic: str | None = None,
        difficulty: str | None = None,
    ) -> list[Flashcard]:
        if owner_id is None:
            return []
        if difficulty is not None:
            _check_difficulty(difficulty)
        words = (term or "").split()
        if not words:
            return []
        return self.card_repo.search(
            user_id=owner_id,
            words=words,
            topic=_topic_filter(topic),
            difficulty=difficulty,
            limit=settings.SEARCH_RESULT_LIMIT,
        )

    def delete_flashcard(self, *, owner_id: int | None, flashcard_id: int) -> None:
        owner_id = _require_owner(owner_id)
        card = self.card_repo.get_for_user(user_id=owner_id, flashcard_id=flashcard_id)
        if card is None:
            raise FlashcardNotFoundError(flashcard_id)
        topic = card.topic

        try:
            outcome = self.topic_repo.decrement_or_delete(user_id=owner_id, name=topic)
            if not self.card_repo.delete_for_user(user_id=owner_id, flashcard_id=flashcard_id):
                # deleted by a concurrent request after our lookup
                raise FlashcardNotFoundError(flashcard_id)
            self.db.expunge(card)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "flashcard_deleted",
            user_id=owner_id,
            flashcard_id=flashcard_id,
            topic=topic,
            topic_outcome=outcome,
        )

    def select_study_cards(
        self,
        *,
        owner_id: int | None,
        topic: str | None = None,
        limit: int | None = None,
        order: str = "newest",
    ) -> list[Flashcard]:
        """Build the working set a study session walks through."""
        if owner_id is None:
            return []
        if order not in STUDY_ORDERS:
            raise ValidationError("Order must be newest, random, or weakest")
        if limit is not None and limit < 1:
            raise ValidationError("Limit must be positive")
        return self.card_repo.get_study_cards(user_id=owner_id, topic=_topic_filter(topic), limit=limit, order=order)
