from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.database import get_db
from schemas.flashcard import FlashcardOut, StudyOrder
from schemas.study import StudyAnswerIn, StudySessionEventOut, StudyStatsOut
from services.flashcard_service import FlashcardService
from services.study_service import StudyService
from .auth import get_owner_id

router = APIRouter(prefix="/study", tags=["Study"])


@router.get(
    "/cards",
    response_model=list[FlashcardOut],
)
async def get_study_cards(
    topic: str | None = Query(None),
    limit: int | None = Query(None, ge=1, le=200),
    order: StudyOrder = Query("newest"),
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db)
    cards = svc.select_study_cards(owner_id=owner_id, topic=topic, limit=limit, order=order)
    return [FlashcardOut.model_validate(card, from_attributes=True) for card in cards]


@router.post(
    "/answers",
    response_model=StudySessionEventOut,
    status_code=201,
)
async def record_answer(
    data: StudyAnswerIn,
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    svc = StudyService(db)
    event = svc.record_answer(
        owner_id=owner_id,
        flashcard_id=data.flashcard_id,
        was_correct=data.was_correct,
        time_spent=data.time_spent,
    )
    return StudySessionEventOut.model_validate(event, from_attributes=True)


@router.get(
    "/answers",
    response_model=list[StudySessionEventOut],
)
async def list_answers(
    flashcard_id: int | None = Query(None, gt=0),
    limit: int = Query(50, ge=1, le=500),
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    svc = StudyService(db)
    events = svc.list_events(owner_id=owner_id, flashcard_id=flashcard_id, limit=limit)
    return [StudySessionEventOut.model_validate(event, from_attributes=True) for event in events]


@router.get("/stats", response_model=StudyStatsOut)
async def get_study_stats(
    owner_id: int | None = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    stats = StudyService(db).get_stats(owner_id=owner_id)
    return StudyStatsOut(
        total_cards=stats.total_cards,
        total_topics=stats.total_topics,
        studied_cards=stats.studied_cards,
        answers=stats.answers,
        correct_answers=stats.correct_answers,
        accuracy=stats.accuracy,
    )
