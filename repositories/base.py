"""
Shared plumbing for repositories over owned tables.

A repository is bound to one principal. Single-row access goes through
``_get_owned`` and bulk access through ``_select``, so the ownership gate is
applied on every path. Storage constraint failures are translated into the
store's error taxonomy in ``commit``/``flush``.
"""
import logging
import uuid
from typing import Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import FlashcardsError, NotFoundError, ReferenceError, ValidationError
from core.policy import authorize, require_authenticated, scoped
from core.security import Principal

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

# SQLSTATE codes raised by PostgreSQL for constraint violations.
_FOREIGN_KEY_VIOLATION = "23503"


def translate_storage_error(exc: IntegrityError | DataError) -> FlashcardsError:
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    message = str(orig)
    if sqlstate == _FOREIGN_KEY_VIOLATION or "FOREIGN KEY" in message.upper():
        return ReferenceError(f"Referenced row does not exist: {message}")
    return ValidationError(f"Constraint violated: {message}")


def commit_or_translate(db: Session) -> None:
    try:
        db.commit()
    except (IntegrityError, DataError) as exc:
        db.rollback()
        raise translate_storage_error(exc) from exc


def flush_or_translate(db: Session) -> None:
    try:
        db.flush()
    except (IntegrityError, DataError) as exc:
        db.rollback()
        raise translate_storage_error(exc) from exc


def clamp_page(limit: int | None, offset: int | None) -> tuple[int, int]:
    limit = settings.DEFAULT_PAGE_SIZE if limit is None else limit
    limit = max(1, min(limit, settings.MAX_PAGE_SIZE))
    return limit, max(0, offset or 0)


class OwnedRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, db: Session, principal: Principal):
        self.db = db
        self.principal = principal

    @property
    def owner_id(self) -> uuid.UUID:
        return require_authenticated(self.principal)

    def _select(self) -> Select:
        return scoped(select(self.model), self.model, self.principal)

    def _count(self, *criteria) -> int:
        stmt = scoped(select(func.count()).select_from(self.model), self.model, self.principal)
        if criteria:
            stmt = stmt.where(*criteria)
        return int(self.db.execute(stmt).scalar_one())

    def _get_owned(self, row_id: uuid.UUID) -> ModelT:
        require_authenticated(self.principal)
        row = self.db.get(self.model, row_id)
        if row is None:
            raise NotFoundError(f"{self.model.__name__} {row_id} not found")
        return authorize(self.principal, row)

    def flush(self) -> None:
        flush_or_translate(self.db)

    def commit(self) -> None:
        commit_or_translate(self.db)

    def _save(self, commit: bool) -> None:
        if commit:
            self.commit()
        else:
            self.flush()
