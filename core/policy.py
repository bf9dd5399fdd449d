"""
Row ownership gate.

Every read and write on an owned table passes through these helpers. A row is
visible to a principal only when ``row.user_id`` equals the principal's id;
anonymous principals see nothing and there is no bypass.
"""
import logging
import uuid
from typing import Any, TypeVar

from sqlalchemy import Select

from core.exceptions import AuthenticationRequiredError, AuthorizationError
from core.security import Principal

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")


def owns(principal: Principal, row: Any) -> bool:
    if principal is None or principal.is_anonymous:
        return False
    return getattr(row, "user_id", None) == principal.user_id


def require_authenticated(principal: Principal) -> uuid.UUID:
    if principal is None or principal.is_anonymous:
        raise AuthenticationRequiredError("Authentication required")
    return principal.user_id


def authorize(principal: Principal, row: RowT) -> RowT:
    require_authenticated(principal)
    if not owns(principal, row):
        logger.warning(
            "Denied %s %s to principal %s",
            type(row).__name__,
            getattr(row, "id", None),
            principal.user_id,
        )
        raise AuthorizationError(f"{type(row).__name__} is not owned by the caller")
    return row


def scoped(statement: Select, model: Any, principal: Principal) -> Select:
    """Restrict a select over ``model`` to the principal's own rows."""
    user_id = require_authenticated(principal)
    return statement.where(model.user_id == user_id)
