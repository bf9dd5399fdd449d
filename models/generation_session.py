import uuid

from sqlalchemy import JSON, CheckConstraint, Column, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from core.database import Base
from models.types import UTCDateTime, utcnow

SOURCE_TEXT_MIN_LENGTH = 1000
SOURCE_TEXT_MAX_LENGTH = 10000


class GenerationSession(Base):
    __tablename__ = "flashcards_gen_sessions"
    __table_args__ = (
        CheckConstraint(
            f"length(source_text) >= {SOURCE_TEXT_MIN_LENGTH} AND length(source_text) <= {SOURCE_TEXT_MAX_LENGTH}",
            name="source_text_length",
        ),
        CheckConstraint("generated_count >= 0", name="generated_count_non_negative"),
        CheckConstraint("accepted_count >= 0", name="accepted_count_non_negative"),
        Index("idx_flashcards_gen_sessions_user_id", "user_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE", name="fk_gen_sessions_user"),
        nullable=False,
    )
    source_text = Column(Text, nullable=False)
    # [{"id": "<uuid>", "front": "...", "back": "...", "status": "pending|accepted|rejected"}]
    proposals = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list)
    generated_count = Column(Integer, nullable=False, default=0, server_default="0")
    accepted_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Loaded children get generation_id nulled by the ORM, the rest by ON DELETE SET NULL.
    flashcards = relationship("Flashcard", back_populates="generation", passive_deletes=True)
