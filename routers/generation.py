import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import Principal, get_principal
from schemas.flashcard import FlashcardOut
from schemas.generation import (
    GenerationSessionCreateIn,
    GenerationSessionOut,
    GenerationSessionSummaryOut,
    GenerationSessionUpdateIn,
    PromoteIn,
    ProposalsAppendIn,
    ProposalStatusIn,
)
from services.generation_service import GenerationService

router = APIRouter(prefix="/generations", tags=["Generation"])


@router.post(
    "",
    response_model=GenerationSessionOut,
    status_code=201,
)
async def start_session(
    data: GenerationSessionCreateIn,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    svc = GenerationService(db, principal)
    session = svc.start_session(source_text=data.source_text)
    return GenerationSessionOut.model_validate(session, from_attributes=True)


@router.get(
    "",
    response_model=list[GenerationSessionSummaryOut],
)
async def list_sessions(
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    svc = GenerationService(db, principal)
    sessions = svc.list_sessions(limit=limit, offset=offset)
    return [GenerationSessionSummaryOut.model_validate(s, from_attributes=True) for s in sessions]


@router.get(
    "/{session_id}",
    response_model=GenerationSessionOut,
)
async def get_session(
    session_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    session = GenerationService(db, principal).get_session(session_id)
    return GenerationSessionOut.model_validate(session, from_attributes=True)


@router.patch(
    "/{session_id}",
    response_model=GenerationSessionOut,
)
async def update_session(
    session_id: uuid.UUID,
    data: GenerationSessionUpdateIn,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    svc = GenerationService(db, principal)
    session = svc.update_session(
        session_id,
        proposals=data.proposals,
        generated_count=data.generated_count,
        accepted_count=data.accepted_count,
    )
    return GenerationSessionOut.model_validate(session, from_attributes=True)


@router.delete(
    "/{session_id}",
    status_code=204,
)
async def delete_session(
    session_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    GenerationService(db, principal).delete_session(session_id)
    return Response(status_code=204)


@router.post(
    "/{session_id}/proposals",
    response_model=GenerationSessionOut,
    status_code=201,
)
async def append_proposals(
    session_id: uuid.UUID,
    data: ProposalsAppendIn,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    svc = GenerationService(db, principal)
    session = svc.append_proposals(session_id, [(p.front, p.back) for p in data.proposals])
    return GenerationSessionOut.model_validate(session, from_attributes=True)


@router.patch(
    "/{session_id}/proposals/{proposal_id}",
    response_model=GenerationSessionOut,
)
async def set_proposal_status(
    session_id: uuid.UUID,
    proposal_id: uuid.UUID,
    data: ProposalStatusIn,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    svc = GenerationService(db, principal)
    session = svc.set_proposal_status(session_id, proposal_id, data.status)
    return GenerationSessionOut.model_validate(session, from_attributes=True)


@router.post(
    "/{session_id}/promote",
    response_model=list[FlashcardOut],
    status_code=201,
)
async def promote_proposals(
    session_id: uuid.UUID,
    data: PromoteIn,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    svc = GenerationService(db, principal)
    flashcards = svc.promote_proposals(session_id, data.proposal_ids)
    return [FlashcardOut.model_validate(card, from_attributes=True) for card in flashcards]
