"""
Generation session workflow.

The counters on a session are not derived from its proposals by the storage
layer; this service is what keeps them current. ``generated_count`` grows with
every appended proposal and ``accepted_count`` with every proposal promoted to
a flashcard.
"""
import logging
import uuid
from typing import Iterable

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError
from core.security import Principal
from models.enums import FlashcardSource, ProposalStatus
from models.flashcard import Flashcard
from models.generation_session import GenerationSession
from repositories.flashcard_repo import FlashcardRepository
from repositories.generation_session_repo import GenerationSessionRepository
from schemas.generation import Proposal

logger = logging.getLogger(__name__)


class GenerationService:
    def __init__(self, db: Session, principal: Principal):
        self.session_repo = GenerationSessionRepository(db, principal)
        self.flashcard_repo = FlashcardRepository(db, principal)

    def start_session(self, *, source_text: str) -> GenerationSession:
        return self.session_repo.create(source_text=source_text)

    def get_session(self, session_id: uuid.UUID) -> GenerationSession:
        return self.session_repo.get(session_id)

    def list_sessions(self, *, limit: int | None = None, offset: int | None = None) -> list[GenerationSession]:
        return self.session_repo.list_sessions(limit=limit, offset=offset)

    def update_session(
        self,
        session_id: uuid.UUID,
        *,
        proposals: Iterable[Proposal | dict] | None = None,
        generated_count: int | None = None,
        accepted_count: int | None = None,
    ) -> GenerationSession:
        return self.session_repo.update(
            session_id,
            proposals=proposals,
            generated_count=generated_count,
            accepted_count=accepted_count,
        )

    def append_proposals(
        self,
        session_id: uuid.UUID,
        candidates: Iterable[tuple[str, str]],
    ) -> GenerationSession:
        session = self.session_repo.get(session_id)
        new = [Proposal(front=front, back=back).to_json() for front, back in candidates]
        if not new:
            raise ValidationError("At least one proposal is required")
        updated = self.session_repo.update(
            session_id,
            proposals=[*session.proposals, *new],
            generated_count=session.generated_count + len(new),
        )
        logger.info("Appended %d proposals to generation session %s", len(new), session_id)
        return updated

    def set_proposal_status(
        self,
        session_id: uuid.UUID,
        proposal_id: uuid.UUID,
        status: ProposalStatus | str,
    ) -> GenerationSession:
        try:
            status = ProposalStatus(status)
        except ValueError as exc:
            raise ValidationError(f"Unknown proposal status {status!r}") from exc

        session = self.session_repo.get(session_id)
        proposals = [dict(p) for p in session.proposals]
        for proposal in proposals:
            if proposal["id"] == str(proposal_id):
                if proposal.get("promoted_flashcard_id") and status is not ProposalStatus.ACCEPTED:
                    raise ValidationError(f"Proposal {proposal_id} has already been promoted")
                proposal["status"] = status.value
                break
        else:
            raise NotFoundError(f"Proposal {proposal_id} not found in session {session_id}")
        return self.session_repo.update(session_id, proposals=proposals)

    def promote_proposals(
        self,
        session_id: uuid.UUID,
        proposal_ids: Iterable[uuid.UUID],
    ) -> list[Flashcard]:
        """Turn accepted proposals into flashcards and bump ``accepted_count``.

        Each promoted proposal records the id of its flashcard, so a proposal is
        promoted at most once. The flashcard inserts, the markers and the
        counter update share one transaction.
        """
        session = self.session_repo.get(session_id)
        by_id = {p["id"]: p for p in session.proposals}

        selected = []
        for proposal_id in dict.fromkeys(str(pid) for pid in proposal_ids):
            proposal = by_id.get(proposal_id)
            if proposal is None:
                raise NotFoundError(f"Proposal {proposal_id} not found in session {session_id}")
            if proposal["status"] != ProposalStatus.ACCEPTED.value:
                raise ValidationError(f"Proposal {proposal_id} is {proposal['status']}, not accepted")
            if proposal.get("promoted_flashcard_id"):
                raise ValidationError(f"Proposal {proposal_id} has already been promoted")
            selected.append(proposal)
        if not selected:
            raise ValidationError("At least one proposal id is required")

        flashcards = self.flashcard_repo.create_many(
            (
                {
                    "front": proposal["front"],
                    "back": proposal["back"],
                    "source": FlashcardSource.AI_GENERATED,
                    "generation_id": session.id,
                }
                for proposal in selected
            ),
            commit=False,
        )
        promoted = {proposal["id"]: str(card.id) for proposal, card in zip(selected, flashcards)}
        proposals = [
            {**p, "promoted_flashcard_id": promoted[p["id"]]} if p["id"] in promoted else p
            for p in session.proposals
        ]
        self.session_repo.update(
            session_id,
            proposals=proposals,
            accepted_count=session.accepted_count + len(flashcards),
            commit=False,
        )
        self.session_repo.commit()
        for flashcard in flashcards:
            self.flashcard_repo.db.refresh(flashcard)
        logger.info("Promoted %d proposals from generation session %s", len(flashcards), session_id)
        return flashcards

    def delete_session(self, session_id: uuid.UUID) -> None:
        self.session_repo.delete(session_id)
