import logging

from sqlalchemy.orm import Session

from core.security import Principal
from models.user import User
from repositories.flashcard_repo import FlashcardRepository
from repositories.generation_session_repo import GenerationSessionRepository
from repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, db: Session, principal: Principal):
        self.user_repo = UserRepository(db, principal)
        self.session_repo = GenerationSessionRepository(db, principal)
        self.flashcard_repo = FlashcardRepository(db, principal)

    def register(self) -> User:
        return self.user_repo.ensure()

    def delete_account(self) -> dict:
        """Delete the principal's account; sessions and flashcards go with it."""
        sessions = self.session_repo.count()
        flashcards = self.flashcard_repo.count()
        user_id = self.user_repo.principal.user_id
        self.user_repo.delete()
        logger.info(
            "Account %s removed with %d generation sessions and %d flashcards",
            user_id,
            sessions,
            flashcards,
        )
        return {
            "user_id": user_id,
            "generation_sessions_deleted": sessions,
            "flashcards_deleted": flashcards,
        }
