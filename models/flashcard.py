import uuid

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import relationship

from core.database import Base
from models.enums import FlashcardSource
from models.types import UTCDateTime, utcnow

FRONT_MAX_LENGTH = 500
BACK_MAX_LENGTH = 2000


class Flashcard(Base):
    __tablename__ = "flashcards"
    __table_args__ = (
        CheckConstraint(
            "source IN ({})".format(", ".join(f"'{source.value}'" for source in FlashcardSource)),
            name="source_enum",
        ),
        Index("idx_flashcards_user_id", "user_id"),
        Index("idx_flashcards_generation_id", "generation_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE", name="fk_flashcards_user"),
        nullable=False,
    )
    front = Column(String(FRONT_MAX_LENGTH), nullable=False)
    back = Column(String(BACK_MAX_LENGTH), nullable=False)
    source = Column(String(20), nullable=False)
    generation_id = Column(
        Uuid,
        ForeignKey("flashcards_gen_sessions.id", ondelete="SET NULL", name="fk_flashcards_generation"),
        nullable=True,
    )
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    generation = relationship("GenerationSession", back_populates="flashcards")
