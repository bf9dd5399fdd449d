import uuid

from sqlalchemy import Column, Uuid, func
from sqlalchemy.orm import relationship

from core.database import Base
from models.types import UTCDateTime


class User(Base):
    """Local mirror of an identity provider account; the cascade parent."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(UTCDateTime, server_default=func.now(), nullable=False)

    generation_sessions = relationship(
        "GenerationSession", cascade="all, delete-orphan", passive_deletes=True
    )
    flashcards = relationship("Flashcard", cascade="all, delete-orphan", passive_deletes=True)
