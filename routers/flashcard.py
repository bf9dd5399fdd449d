import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import Principal, get_principal
from schemas.flashcard import (
    FlashcardBatchCreateIn,
    FlashcardCreateIn,
    FlashcardOut,
    FlashcardPageOut,
    FlashcardUpdateIn,
)
from services.flashcard_service import FlashcardService

router = APIRouter(prefix="/flashcards", tags=["Flashcard"])


@router.post(
    "",
    response_model=FlashcardOut,
    status_code=201,
)
async def create_flashcard(
    data: FlashcardCreateIn,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db, principal)
    card = svc.create(
        front=data.front,
        back=data.back,
        source=data.source,
        generation_id=data.generation_id,
    )
    return FlashcardOut.model_validate(card, from_attributes=True)


@router.post(
    "/batch",
    response_model=list[FlashcardOut],
    status_code=201,
)
async def create_flashcards(
    data: FlashcardBatchCreateIn,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db, principal)
    cards = svc.create_batch([item.model_dump() for item in data.flashcards])
    return [FlashcardOut.model_validate(card, from_attributes=True) for card in cards]


@router.get(
    "",
    response_model=FlashcardPageOut,
)
async def list_flashcards(
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    source: str | None = None,
    generation_id: uuid.UUID | None = None,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db, principal)
    total, cards = svc.list_flashcards(
        limit=limit,
        offset=offset,
        source=source,
        generation_id=generation_id,
    )
    return FlashcardPageOut(
        total=total,
        items=[FlashcardOut.model_validate(card, from_attributes=True) for card in cards],
    )


@router.get(
    "/{flashcard_id}",
    response_model=FlashcardOut,
)
async def get_flashcard(
    flashcard_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    card = FlashcardService(db, principal).get(flashcard_id)
    return FlashcardOut.model_validate(card, from_attributes=True)


@router.put(
    "/{flashcard_id}",
    response_model=FlashcardOut,
)
async def update_flashcard(
    flashcard_id: uuid.UUID,
    data: FlashcardUpdateIn,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    svc = FlashcardService(db, principal)
    card = svc.update(flashcard_id, front=data.front, back=data.back)
    return FlashcardOut.model_validate(card, from_attributes=True)


@router.delete(
    "/{flashcard_id}",
    status_code=204,
)
async def delete_flashcard(
    flashcard_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    FlashcardService(db, principal).delete(flashcard_id)
    return Response(status_code=204)
