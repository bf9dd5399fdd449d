import logging
import uuid
from typing import Any, Iterable

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ValidationError
from models.generation_session import (
    SOURCE_TEXT_MAX_LENGTH,
    SOURCE_TEXT_MIN_LENGTH,
    GenerationSession,
)
from repositories.base import OwnedRepository, clamp_page
from schemas.generation import Proposal

logger = logging.getLogger(__name__)

_proposal_list = TypeAdapter(list[Proposal])


def validate_source_text(source_text: Any) -> str:
    if not isinstance(source_text, str):
        raise ValidationError("source_text must be a string")
    length = len(source_text)
    if length < SOURCE_TEXT_MIN_LENGTH or length > SOURCE_TEXT_MAX_LENGTH:
        raise ValidationError(
            f"source_text must be between {SOURCE_TEXT_MIN_LENGTH} and "
            f"{SOURCE_TEXT_MAX_LENGTH} characters, got {length}"
        )
    return source_text


def validate_proposals(proposals: Iterable[Proposal | dict]) -> list[dict]:
    """Normalise proposals to their stored JSON form."""
    items = [p.to_json() if isinstance(p, Proposal) else p for p in proposals]
    try:
        parsed = _proposal_list.validate_python(items)
    except PydanticValidationError as exc:
        messages = "; ".join(err.get("msg", "Invalid proposal") for err in exc.errors())
        raise ValidationError(f"Invalid proposals: {messages}") from exc
    seen: set[uuid.UUID] = set()
    for proposal in parsed:
        if proposal.id in seen:
            raise ValidationError(f"Duplicate proposal id {proposal.id}")
        seen.add(proposal.id)
    return [proposal.to_json() for proposal in parsed]


def validate_counter(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{name} must be a non-negative integer")
    return value


class GenerationSessionRepository(OwnedRepository[GenerationSession]):
    model = GenerationSession

    def create(self, *, source_text: str) -> GenerationSession:
        owner_id = self.owner_id
        entity = GenerationSession(
            user_id=owner_id,
            source_text=validate_source_text(source_text),
            proposals=[],
            generated_count=0,
            accepted_count=0,
        )
        self.db.add(entity)
        self.commit()
        self.db.refresh(entity)
        logger.info("Created generation session %s for user %s", entity.id, owner_id)
        return entity

    def get(self, session_id: uuid.UUID) -> GenerationSession:
        return self._get_owned(session_id)

    def list_sessions(self, *, limit: int | None = None, offset: int | None = None) -> list[GenerationSession]:
        limit, offset = clamp_page(limit, offset)
        stmt = (
            self._select()
            .order_by(GenerationSession.created_at.desc(), GenerationSession.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.execute(stmt).scalars())

    def count(self) -> int:
        return self._count()

    def update(
        self,
        session_id: uuid.UUID,
        *,
        proposals: Iterable[Proposal | dict] | None = None,
        generated_count: int | None = None,
        accepted_count: int | None = None,
        commit: bool = True,
    ) -> GenerationSession:
        entity = self._get_owned(session_id)
        if proposals is not None:
            # Reassign rather than mutate so the JSON column is flagged dirty.
            entity.proposals = validate_proposals(proposals)
        if generated_count is not None:
            entity.generated_count = validate_counter("generated_count", generated_count)
        if accepted_count is not None:
            entity.accepted_count = validate_counter("accepted_count", accepted_count)
        self._save(commit)
        if commit:
            self.db.refresh(entity)
        return entity

    def delete(self, session_id: uuid.UUID) -> None:
        entity = self._get_owned(session_id)
        self.db.delete(entity)
        self.commit()
        logger.info("Deleted generation session %s; referencing flashcards detached", session_id)
