import logging
import uuid
from typing import Any, Iterable, Mapping

from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import ReferenceError, ValidationError
from core.security import Principal
from models.enums import FlashcardSource
from models.flashcard import BACK_MAX_LENGTH, FRONT_MAX_LENGTH, Flashcard
from models.generation_session import GenerationSession
from repositories.base import OwnedRepository, clamp_page

logger = logging.getLogger(__name__)


def _validate_side(name: str, value: Any, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")
    if not value.strip():
        raise ValidationError(f"{name} must not be blank")
    if len(value) > max_length:
        raise ValidationError(f"{name} must be at most {max_length} characters, got {len(value)}")
    return value


def validate_source(source: Any) -> FlashcardSource:
    try:
        return FlashcardSource(source)
    except ValueError as exc:
        allowed = ", ".join(s.value for s in FlashcardSource)
        raise ValidationError(f"source must be one of: {allowed}") from exc


class FlashcardRepository(OwnedRepository[Flashcard]):
    model = Flashcard

    def __init__(self, db: Session, principal: Principal, *, strict_generation_owner: bool | None = None):
        super().__init__(db, principal)
        if strict_generation_owner is None:
            strict_generation_owner = settings.STRICT_GENERATION_OWNER
        self.strict_generation_owner = strict_generation_owner

    def _resolve_generation(self, generation_id: uuid.UUID) -> GenerationSession:
        # Existence check only; a session is a lookup target, not an owned parent.
        session = self.db.get(GenerationSession, generation_id)
        if session is None:
            raise ReferenceError(f"Generation session {generation_id} does not exist")
        if self.strict_generation_owner and session.user_id != self.owner_id:
            raise ReferenceError(f"Generation session {generation_id} does not exist")
        return session

    def _build(
        self,
        *,
        front: str,
        back: str,
        source: FlashcardSource | str,
        generation_id: uuid.UUID | None = None,
    ) -> Flashcard:
        owner_id = self.owner_id
        source = validate_source(source)
        front = _validate_side("front", front, FRONT_MAX_LENGTH)
        back = _validate_side("back", back, BACK_MAX_LENGTH)
        if generation_id is not None:
            if source is FlashcardSource.MANUAL:
                raise ValidationError("Manual flashcards cannot reference a generation session")
            self._resolve_generation(generation_id)
        return Flashcard(
            user_id=owner_id,
            front=front,
            back=back,
            source=source.value,
            generation_id=generation_id,
        )

    def create(
        self,
        *,
        front: str,
        back: str,
        source: FlashcardSource | str = FlashcardSource.MANUAL,
        generation_id: uuid.UUID | None = None,
        commit: bool = True,
    ) -> Flashcard:
        entity = self._build(front=front, back=back, source=source, generation_id=generation_id)
        self.db.add(entity)
        self._save(commit)
        if commit:
            self.db.refresh(entity)
            logger.info("Created %s flashcard %s for user %s", entity.source, entity.id, entity.user_id)
        return entity

    def create_many(self, items: Iterable[Mapping[str, Any]], *, commit: bool = True) -> list[Flashcard]:
        """Insert several flashcards in a single transaction; all or nothing."""
        entities = [self._build(**dict(item)) for item in items]
        self.db.add_all(entities)
        self._save(commit)
        if commit:
            for entity in entities:
                self.db.refresh(entity)
            logger.info("Created %d flashcards for user %s", len(entities), self.owner_id)
        return entities

    def get(self, flashcard_id: uuid.UUID) -> Flashcard:
        return self._get_owned(flashcard_id)

    def _filters(self, source: FlashcardSource | str | None, generation_id: uuid.UUID | None) -> list:
        criteria = []
        if source is not None:
            criteria.append(Flashcard.source == validate_source(source).value)
        if generation_id is not None:
            criteria.append(Flashcard.generation_id == generation_id)
        return criteria

    def list_flashcards(
        self,
        *,
        limit: int | None = None,
        offset: int | None = None,
        source: FlashcardSource | str | None = None,
        generation_id: uuid.UUID | None = None,
    ) -> list[Flashcard]:
        limit, offset = clamp_page(limit, offset)
        stmt = (
            self._select()
            .where(*self._filters(source, generation_id))
            .order_by(Flashcard.created_at.desc(), Flashcard.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.execute(stmt).scalars())

    def count(
        self,
        *,
        source: FlashcardSource | str | None = None,
        generation_id: uuid.UUID | None = None,
    ) -> int:
        return self._count(*self._filters(source, generation_id))

    def update(
        self,
        flashcard_id: uuid.UUID,
        *,
        front: str | None = None,
        back: str | None = None,
    ) -> Flashcard:
        entity = self._get_owned(flashcard_id)
        if front is not None:
            entity.front = _validate_side("front", front, FRONT_MAX_LENGTH)
        if back is not None:
            entity.back = _validate_side("back", back, BACK_MAX_LENGTH)
        self.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, flashcard_id: uuid.UUID) -> None:
        entity = self._get_owned(flashcard_id)
        self.db.delete(entity)
        self.commit()
        logger.info("Deleted flashcard %s", flashcard_id)
