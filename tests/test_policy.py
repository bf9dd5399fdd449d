"""Tests for the row ownership gate."""

import uuid
from types import SimpleNamespace

import pytest
from sqlalchemy import select

from core.exceptions import AuthenticationRequiredError, AuthorizationError
from core.policy import authorize, owns, require_authenticated, scoped
from core.security import ANONYMOUS, Principal, create_access_token, principal_from_token
from models.flashcard import Flashcard


class TestOwns:
    def test_owner_owns_row(self):
        user_id = uuid.uuid4()
        assert owns(Principal(user_id=user_id), SimpleNamespace(user_id=user_id))

    def test_other_principal_does_not_own_row(self):
        row = SimpleNamespace(user_id=uuid.uuid4())
        assert not owns(Principal(user_id=uuid.uuid4()), row)

    def test_anonymous_owns_nothing(self):
        assert not owns(ANONYMOUS, SimpleNamespace(user_id=None))
        assert not owns(ANONYMOUS, SimpleNamespace(user_id=uuid.uuid4()))


class TestAuthorize:
    def test_returns_owned_row(self):
        user_id = uuid.uuid4()
        row = SimpleNamespace(id=1, user_id=user_id)
        assert authorize(Principal(user_id=user_id), row) is row

    def test_foreign_row_is_denied(self):
        row = SimpleNamespace(id=1, user_id=uuid.uuid4())
        with pytest.raises(AuthorizationError):
            authorize(Principal(user_id=uuid.uuid4()), row)

    def test_anonymous_is_asked_to_authenticate(self):
        with pytest.raises(AuthenticationRequiredError):
            authorize(ANONYMOUS, SimpleNamespace(id=1, user_id=uuid.uuid4()))

    def test_authentication_required_is_an_authorization_error(self):
        with pytest.raises(AuthorizationError):
            require_authenticated(ANONYMOUS)


class TestScoped:
    def test_adds_owner_filter(self):
        user_id = uuid.uuid4()
        stmt = scoped(select(Flashcard), Flashcard, Principal(user_id=user_id))
        compiled = str(stmt.compile())
        assert "flashcards.user_id = " in compiled

    def test_anonymous_cannot_build_a_query(self):
        with pytest.raises(AuthenticationRequiredError):
            scoped(select(Flashcard), Flashcard, ANONYMOUS)


class TestPrincipalFromToken:
    def test_valid_token(self):
        user_id = uuid.uuid4()
        principal = principal_from_token(create_access_token(str(user_id)))
        assert principal.user_id == user_id

    def test_missing_token_is_anonymous(self):
        assert principal_from_token(None).is_anonymous

    def test_garbage_token_is_anonymous(self):
        assert principal_from_token("not-a-jwt").is_anonymous

    def test_non_uuid_subject_is_anonymous(self):
        assert principal_from_token(create_access_token("42")).is_anonymous
