import logging
import uuid

from sqlalchemy.orm import Session

from core.exceptions import AuthorizationError, NotFoundError
from core.policy import require_authenticated
from core.security import Principal
from models.user import User
from repositories.base import commit_or_translate

logger = logging.getLogger(__name__)


class UserRepository:
    """Access to the principal's own account row; there is no cross-account access."""

    def __init__(self, db: Session, principal: Principal):
        self.db = db
        self.principal = principal

    def _own_id(self, user_id: uuid.UUID | None) -> uuid.UUID:
        own_id = require_authenticated(self.principal)
        if user_id is not None and user_id != own_id:
            logger.warning("Principal %s attempted to access account %s", own_id, user_id)
            raise AuthorizationError("Accounts can only be managed by their owner")
        return own_id

    def ensure(self) -> User:
        own_id = self._own_id(None)
        user = self.db.get(User, own_id)
        if user is None:
            user = User(id=own_id)
            self.db.add(user)
            commit_or_translate(self.db)
            self.db.refresh(user)
            logger.info("Provisioned user %s", own_id)
        return user

    def delete(self, user_id: uuid.UUID | None = None) -> None:
        own_id = self._own_id(user_id)
        user = self.db.get(User, own_id)
        if user is None:
            raise NotFoundError(f"User {own_id} not found")
        self.db.delete(user)
        commit_or_translate(self.db)
        logger.info("Deleted user %s and all owned rows", own_id)
