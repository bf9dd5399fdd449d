import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.enums import ProposalStatus


class Proposal(BaseModel):
    """One element of ``flashcards_gen_sessions.proposals``."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    front: str
    back: str
    status: ProposalStatus = ProposalStatus.PENDING
    # Set once the proposal has been turned into a flashcard.
    promoted_flashcard_id: uuid.UUID | None = None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class GenerationSessionCreateIn(BaseModel):
    source_text: str


# Lengths, statuses and counter ranges are checked by the repositories.
class GenerationSessionUpdateIn(BaseModel):
    proposals: list[dict] | None = None
    generated_count: int | None = None
    accepted_count: int | None = None


class ProposalIn(BaseModel):
    front: str
    back: str


class ProposalsAppendIn(BaseModel):
    proposals: list[ProposalIn]


class ProposalStatusIn(BaseModel):
    status: str


class PromoteIn(BaseModel):
    proposal_ids: list[uuid.UUID]


class GenerationSessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    source_text: str
    proposals: list[Proposal]
    generated_count: int
    accepted_count: int
    created_at: datetime
    updated_at: datetime


class GenerationSessionSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    generated_count: int
    accepted_count: int
    created_at: datetime
    updated_at: datetime
