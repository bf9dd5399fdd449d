from enum import Enum


class FlashcardSource(str, Enum):
    MANUAL = "manual"
    AI_GENERATED = "ai_generated"


class ProposalStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
