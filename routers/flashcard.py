import csv
import io
import re

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from core.database import get_db
from schemas.flashcard import Difficulty, FlashcardCreateIn, FlashcardGenerateIn, FlashcardOut, TopicOut
from services.ai_service import FlashcardGenerator, get_flashcard_generator
from services.flashcard_service import FlashcardService
from .auth import get_owner_id

router = APIRouter(prefix="/flashcards", tags=["Flashcard"])
topics_router = APIRouter(prefix="/topics", tags=["Topic"])


@router.post(
    "",
    response_model=FlashcardOut,
    status_code=201,
)
async def create_flashcard(
    data: FlashcardCreateIn,
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db)
    card = svc.create_flashcard(
        owner_id=owner_id,
        topic=data.topic,
        question=data.question,
        answer=data.answer,
        difficulty=data.difficulty,
    )
    return FlashcardOut.model_validate(card, from_attributes=True)


@router.post(
    "/generate",
    response_model=list[FlashcardOut],
    status_code=201,
)
async def generate_flashcards(
    data: FlashcardGenerateIn,
    owner_id: int | None = Depends(get_owner_id),
    generator: FlashcardGenerator = Depends(get_flashcard_generator),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db)
    cards = await svc.generate_flashcards(
        owner_id=owner_id,
        topic=data.topic,
        count=data.count,
        difficulty=data.difficulty,
        context=data.context,
        generate=generator,
    )
    return [FlashcardOut.model_validate(card, from_attributes=True) for card in cards]


@router.get(
    "",
    response_model=list[FlashcardOut],
)
async def list_flashcards(
    topic: str | None = Query(None),
    difficulty: Difficulty | None = Query(None),
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db)
    cards = svc.list_flashcards(owner_id=owner_id, topic=topic, difficulty=difficulty)
    return [FlashcardOut.model_validate(card, from_attributes=True) for card in cards]


@router.get(
    "/search",
    response_model=list[FlashcardOut],
)
async def search_flashcards(
    q: str = Query("", description="Words to look for in questions"),
    topic: str | None = Query(None),
    difficulty: Difficulty | None = Query(None),
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db)
    if not q.strip():
        # blank search shows the plain (filtered) listing
        cards = svc.list_flashcards(owner_id=owner_id, topic=topic, difficulty=difficulty)
    else:
        cards = svc.search_flashcards(owner_id=owner_id, term=q, topic=topic, difficulty=difficulty)
    return [FlashcardOut.model_validate(card, from_attributes=True) for card in cards]


def _normalize_filename(topic: str | None) -> str:
    """Create a filesystem-friendly filename for topic exports."""
    slug = re.sub(r"[^A-Za-z0-9]+", "-", topic.lower()).strip("-") if topic else ""
    if not slug:
        slug = "flashcards"
    return f"{slug}.csv"


@router.get("/export", response_class=StreamingResponse)
async def export_flashcards_to_csv(
    topic: str | None = Query(None, description="Topic to export; all cards when omitted"),
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db)
    cards = svc.list_flashcards(owner_id=owner_id, topic=topic)

    buffer = io.StringIO()
    fieldnames = ["topic", "question", "answer", "difficulty", "origin", "study_count", "correct_count"]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for card in cards:
        writer.writerow(
            {
                "topic": card.topic,
                "question": card.question,
                "answer": card.answer,
                "difficulty": card.difficulty,
                "origin": "ai" if card.is_ai_generated else "manual",
                "study_count": card.study_count,
                "correct_count": card.correct_count,
            }
        )

    csv_data = buffer.getvalue().encode("utf-8")
    response = StreamingResponse(iter([csv_data]), media_type="text/csv; charset=utf-8")
    response.headers["Content-Disposition"] = f'attachment; filename="{_normalize_filename(topic)}"'
    return response


@router.get(
    "/{flashcard_id}",
    response_model=FlashcardOut,
)
async def get_flashcard(
    flashcard_id: int,
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db)
    card = svc.get_flashcard(owner_id=owner_id, flashcard_id=flashcard_id)
    return FlashcardOut.model_validate(card, from_attributes=True)


@router.delete(
    "/{flashcard_id}",
    status_code=204,
)
async def delete_flashcard(
    flashcard_id: int,
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db)
    svc.delete_flashcard(owner_id=owner_id, flashcard_id=flashcard_id)
    return Response(status_code=204)


@topics_router.get(
    "",
    response_model=list[TopicOut],
)
async def list_topics(
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db)
    topics = svc.list_topics(owner_id=owner_id)
    return [TopicOut.model_validate(topic, from_attributes=True) for topic in topics]
