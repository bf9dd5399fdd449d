import uuid

from pydantic import BaseModel


class AccountOut(BaseModel):
    user_id: uuid.UUID


class AccountDeletedOut(BaseModel):
    user_id: uuid.UUID
    generation_sessions_deleted: int
    flashcards_deleted: int
