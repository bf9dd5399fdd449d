import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from core.config import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The acting identity. ``user_id`` is None for anonymous callers."""

    user_id: Optional[uuid.UUID] = None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None


ANONYMOUS = Principal()


def _create_token(subject: str, expires_delta: timedelta, token_type: str) -> str:
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
    "sub": subject,
    "type": token_type,
    "iat": int(now.timestamp()),
    "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALG)


def create_access_token(sub: str) -> str:
    return _create_token(sub, timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES), "access")


def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALG])


def principal_from_token(token: str | None) -> Principal:
    if not token:
        return ANONYMOUS
    try:
        payload = decode_token(token)
    except JWTError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        return ANONYMOUS
    if payload.get("type") != "access":
        return ANONYMOUS
    try:
        return Principal(user_id=uuid.UUID(str(payload.get("sub"))))
    except ValueError:
        logger.warning("Bearer token carries a non-uuid subject")
        return ANONYMOUS


# dependency
def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    return principal_from_token(credentials.credentials if credentials else None)
