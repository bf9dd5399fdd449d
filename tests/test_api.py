"""HTTP surface tests: status mapping and per-owner isolation through the API."""

import uuid
from datetime import datetime, timedelta

import pytest

from conftest import SOURCE_TEXT, auth_headers
from core.security import Principal


@pytest.fixture
def user_a(client) -> Principal:
    principal = Principal(user_id=uuid.uuid4())
    response = client.post("/account", headers=auth_headers(principal))
    assert response.status_code == 201
    return principal


@pytest.fixture
def user_b(client) -> Principal:
    principal = Principal(user_id=uuid.uuid4())
    assert client.post("/account", headers=auth_headers(principal)).status_code == 201
    return principal


class TestStatus:
    def test_status(self, client):
        assert client.get("/status").json() == {"status": "ok"}


class TestAnonymous:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/flashcards"),
            ("get", "/generations"),
            ("post", "/account"),
            ("delete", "/account"),
        ],
    )
    def test_requests_without_token_are_unauthorized(self, client, method, path):
        response = client.request(method.upper(), path)
        assert response.status_code == 401
        assert response.json()["error"] == "AuthenticationRequiredError"

    def test_invalid_token_is_treated_as_anonymous(self, client, user_a):
        response = client.get("/flashcards", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401


class TestFlashcardsApi:
    def test_crud(self, client, user_a):
        headers = auth_headers(user_a)
        created = client.post("/flashcards", json={"front": "q", "back": "a"}, headers=headers)
        assert created.status_code == 201
        card = created.json()
        assert card["source"] == "manual"
        assert card["generation_id"] is None

        listing = client.get("/flashcards", headers=headers).json()
        assert listing["total"] == 1
        assert listing["items"][0]["id"] == card["id"]

        updated = client.put(f"/flashcards/{card['id']}", json={"back": "answer"}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["back"] == "answer"

        assert client.delete(f"/flashcards/{card['id']}", headers=headers).status_code == 204
        assert client.get(f"/flashcards/{card['id']}", headers=headers).status_code == 404

    def test_batch_create(self, client, user_a):
        response = client.post(
            "/flashcards/batch",
            json={"flashcards": [{"front": "q1", "back": "a1"}, {"front": "q2", "back": "a2"}]},
            headers=auth_headers(user_a),
        )
        assert response.status_code == 201
        assert len(response.json()) == 2

    def test_dangling_generation_reference_is_a_conflict(self, client, user_a):
        response = client.post(
            "/flashcards",
            json={
                "front": "q",
                "back": "a",
                "source": "ai_generated",
                "generation_id": str(uuid.uuid4()),
            },
            headers=auth_headers(user_a),
        )
        assert response.status_code == 409
        assert response.json()["error"] == "ReferenceError"

    def test_manual_card_with_generation_is_bad_request(self, client, user_a):
        headers = auth_headers(user_a)
        session = client.post("/generations", json={"source_text": SOURCE_TEXT}, headers=headers).json()
        response = client.post(
            "/flashcards",
            json={"front": "q", "back": "a", "source": "manual", "generation_id": session["id"]},
            headers=headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_other_user_is_forbidden(self, client, user_a, user_b):
        card = client.post(
            "/flashcards", json={"front": "q", "back": "a"}, headers=auth_headers(user_a)
        ).json()
        other = auth_headers(user_b)
        assert client.get(f"/flashcards/{card['id']}", headers=other).status_code == 403
        assert client.put(f"/flashcards/{card['id']}", json={"front": "x"}, headers=other).status_code == 403
        assert client.delete(f"/flashcards/{card['id']}", headers=other).status_code == 403
        assert client.get("/flashcards", headers=other).json() == {"total": 0, "items": []}


class TestGenerationsApi:
    def test_full_flow(self, client, user_a):
        headers = auth_headers(user_a)
        session = client.post("/generations", json={"source_text": SOURCE_TEXT}, headers=headers)
        assert session.status_code == 201
        session_id = session.json()["id"]
        assert session.json()["proposals"] == []

        appended = client.post(
            f"/generations/{session_id}/proposals",
            json={"proposals": [{"front": f"q{i}", "back": f"a{i}"} for i in range(3)]},
            headers=headers,
        )
        assert appended.status_code == 201
        body = appended.json()
        assert body["generated_count"] == 3

        accepted_ids = [p["id"] for p in body["proposals"][:2]]
        for proposal_id in accepted_ids:
            response = client.patch(
                f"/generations/{session_id}/proposals/{proposal_id}",
                json={"status": "accepted"},
                headers=headers,
            )
            assert response.status_code == 200

        promoted = client.post(
            f"/generations/{session_id}/promote",
            json={"proposal_ids": accepted_ids},
            headers=headers,
        )
        assert promoted.status_code == 201
        assert {card["generation_id"] for card in promoted.json()} == {session_id}

        summary = client.get("/generations", headers=headers).json()
        assert summary[0]["accepted_count"] == 2

        assert client.delete(f"/generations/{session_id}", headers=headers).status_code == 204
        cards = client.get("/flashcards", params={"source": "ai_generated"}, headers=headers).json()
        assert cards["total"] == 2
        assert {card["generation_id"] for card in cards["items"]} == {None}

    def test_other_user_is_forbidden(self, client, user_a, user_b):
        session = client.post(
            "/generations", json={"source_text": SOURCE_TEXT}, headers=auth_headers(user_a)
        ).json()
        other = auth_headers(user_b)
        assert client.get(f"/generations/{session['id']}", headers=other).status_code == 403
        assert client.delete(f"/generations/{session['id']}", headers=other).status_code == 403
        assert client.get("/generations", headers=other).json() == []

    def test_missing_session(self, client, user_a):
        response = client.get(f"/generations/{uuid.uuid4()}", headers=auth_headers(user_a))
        assert response.status_code == 404


class TestAccountApi:
    def test_delete_account_cascades(self, client, user_a):
        headers = auth_headers(user_a)
        client.post("/generations", json={"source_text": SOURCE_TEXT}, headers=headers)
        client.post("/flashcards", json={"front": "q", "back": "a"}, headers=headers)

        response = client.delete("/account", headers=headers)
        assert response.status_code == 200
        assert response.json() == {
            "user_id": str(user_a.user_id),
            "generation_sessions_deleted": 1,
            "flashcards_deleted": 1,
        }
        assert client.get("/flashcards", headers=headers).json()["total"] == 0


def _assert_validation_error(response):
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ValidationError"
    assert isinstance(body["detail"], str)


class TestValidationErrors:
    """Every validation failure reaches the client as 400 ValidationError."""

    @pytest.mark.parametrize(
        "payload",
        [
            {"front": "f" * 501, "back": "a"},
            {"front": "q", "back": "b" * 2001},
            {"front": "   ", "back": "a"},
            {"front": "q", "back": "a", "source": "imported"},
        ],
    )
    def test_flashcard_create(self, client, user_a, payload):
        _assert_validation_error(client.post("/flashcards", json=payload, headers=auth_headers(user_a)))

    def test_flashcard_update(self, client, user_a):
        headers = auth_headers(user_a)
        card = client.post("/flashcards", json={"front": "q", "back": "a"}, headers=headers).json()
        _assert_validation_error(
            client.put(f"/flashcards/{card['id']}", json={"front": "f" * 501}, headers=headers)
        )

    def test_unknown_source_filter(self, client, user_a):
        _assert_validation_error(
            client.get("/flashcards", params={"source": "imported"}, headers=auth_headers(user_a))
        )

    @pytest.mark.parametrize("length", [999, 10001])
    def test_source_text_length(self, client, user_a, length):
        _assert_validation_error(
            client.post("/generations", json={"source_text": "x" * length}, headers=auth_headers(user_a))
        )

    def test_negative_counter(self, client, user_a):
        headers = auth_headers(user_a)
        session = client.post("/generations", json={"source_text": SOURCE_TEXT}, headers=headers).json()
        _assert_validation_error(
            client.patch(f"/generations/{session['id']}", json={"accepted_count": -1}, headers=headers)
        )

    def test_unknown_proposal_status(self, client, user_a):
        headers = auth_headers(user_a)
        session = client.post("/generations", json={"source_text": SOURCE_TEXT}, headers=headers).json()
        session = client.post(
            f"/generations/{session['id']}/proposals",
            json={"proposals": [{"front": "q", "back": "a"}]},
            headers=headers,
        ).json()
        proposal_id = session["proposals"][0]["id"]
        _assert_validation_error(
            client.patch(
                f"/generations/{session['id']}/proposals/{proposal_id}",
                json={"status": "maybe"},
                headers=headers,
            )
        )

    def test_promoting_an_oversized_proposal_matches_direct_create(self, client, user_a):
        headers = auth_headers(user_a)
        session = client.post("/generations", json={"source_text": SOURCE_TEXT}, headers=headers).json()
        session = client.post(
            f"/generations/{session['id']}/proposals",
            json={"proposals": [{"front": "f" * 501, "back": "a"}]},
            headers=headers,
        ).json()
        proposal_id = session["proposals"][0]["id"]
        client.patch(
            f"/generations/{session['id']}/proposals/{proposal_id}",
            json={"status": "accepted"},
            headers=headers,
        )

        promoted = client.post(
            f"/generations/{session['id']}/promote", json={"proposal_ids": [proposal_id]}, headers=headers
        )
        direct = client.post("/flashcards", json={"front": "f" * 501, "back": "a"}, headers=headers)

        _assert_validation_error(promoted)
        _assert_validation_error(direct)

    def test_malformed_body(self, client, user_a):
        _assert_validation_error(client.post("/flashcards", json={"front": "q"}, headers=auth_headers(user_a)))

    def test_malformed_path_id(self, client, user_a):
        _assert_validation_error(client.get("/flashcards/not-a-uuid", headers=auth_headers(user_a)))


class TestTimestamps:
    def test_timestamps_carry_utc_offset(self, client, user_a):
        card = client.post(
            "/flashcards", json={"front": "q", "back": "a"}, headers=auth_headers(user_a)
        ).json()
        for field in ("created_at", "updated_at"):
            parsed = datetime.fromisoformat(card[field].replace("Z", "+00:00"))
            assert parsed.utcoffset() == timedelta(0)


class TestRepeatPromotion:
    def test_second_promotion_is_rejected(self, client, user_a):
        headers = auth_headers(user_a)
        session = client.post("/generations", json={"source_text": SOURCE_TEXT}, headers=headers).json()
        session = client.post(
            f"/generations/{session['id']}/proposals",
            json={"proposals": [{"front": "q", "back": "a"}]},
            headers=headers,
        ).json()
        proposal_id = session["proposals"][0]["id"]
        client.patch(
            f"/generations/{session['id']}/proposals/{proposal_id}",
            json={"status": "accepted"},
            headers=headers,
        )
        path = f"/generations/{session['id']}/promote"

        assert client.post(path, json={"proposal_ids": [proposal_id]}, headers=headers).status_code == 201
        _assert_validation_error(client.post(path, json={"proposal_ids": [proposal_id]}, headers=headers))

        body = client.get(f"/generations/{session['id']}", headers=headers).json()
        assert (body["generated_count"], body["accepted_count"]) == (1, 1)
        assert client.get("/flashcards", headers=headers).json()["total"] == 1
