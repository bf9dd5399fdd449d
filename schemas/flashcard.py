import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from models.enums import FlashcardSource


class FlashcardCreateIn(BaseModel):
    front: str
    back: str
    source: str = FlashcardSource.MANUAL.value
    generation_id: uuid.UUID | None = None


class FlashcardBatchCreateIn(BaseModel):
    flashcards: list[FlashcardCreateIn]


class FlashcardUpdateIn(BaseModel):
    front: str | None = None
    back: str | None = None


class FlashcardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    front: str
    back: str
    source: FlashcardSource
    generation_id: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime


class FlashcardPageOut(BaseModel):
    total: int
    items: list[FlashcardOut]
