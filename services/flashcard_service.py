import uuid

from sqlalchemy.orm import Session

from core.security import Principal
from models.enums import FlashcardSource
from models.flashcard import Flashcard
from repositories.flashcard_repo import FlashcardRepository


class FlashcardService:
    def __init__(self, db: Session, principal: Principal):
        self.repo = FlashcardRepository(db, principal)

    def create(
        self,
        *,
        front: str,
        back: str,
        source: FlashcardSource | str = FlashcardSource.MANUAL,
        generation_id: uuid.UUID | None = None,
    ) -> Flashcard:
        return self.repo.create(front=front, back=back, source=source, generation_id=generation_id)

    def create_batch(self, items: list[dict]) -> list[Flashcard]:
        return self.repo.create_many(items)

    def get(self, flashcard_id: uuid.UUID) -> Flashcard:
        return self.repo.get(flashcard_id)

    def list_flashcards(
        self,
        *,
        limit: int | None = None,
        offset: int | None = None,
        source: FlashcardSource | str | None = None,
        generation_id: uuid.UUID | None = None,
    ) -> tuple[int, list[Flashcard]]:
        total = self.repo.count(source=source, generation_id=generation_id)
        items = self.repo.list_flashcards(
            limit=limit,
            offset=offset,
            source=source,
            generation_id=generation_id,
        )
        return total, items

    def update(self, flashcard_id: uuid.UUID, *, front: str | None = None, back: str | None = None) -> Flashcard:
        return self.repo.update(flashcard_id, front=front, back=back)

    def delete(self, flashcard_id: uuid.UUID) -> None:
        self.repo.delete(flashcard_id)
