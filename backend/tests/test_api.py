"""HTTP tests for the StackIt API.

Every response is checked against the success or error envelope, then the
payload is inspected.
"""

from unittest.mock import AsyncMock, patch

from jsonschema import validate
from sqlalchemy.exc import OperationalError

from stackit.models import Question
from stackit.services.question_service import QuestionService
from stackit.services.vote_service import VoteService

SUCCESS_ENVELOPE = {
    "type": "object",
    "required": ["status", "data"],
    "properties": {
        "status": {"const": "success"},
        "meta": {"type": ["object", "null"]},
    },
}

ERROR_ENVELOPE = {
    "type": "object",
    "required": ["status", "error"],
    "properties": {
        "status": {"const": "error"},
        "error": {
            "type": "object",
            "required": ["code", "message"],
            "properties": {
                "code": {"type": "string"},
                "message": {"type": "string"},
                "field": {"type": ["string", "null"]},
            },
        },
    },
}

QUESTION_BODY = {
    "title": "How to use React hooks effectively?",
    "description": "I'm struggling with state management when using hooks in a large app.",
    "tags": ["React", "Hooks"],
}


async def sign_up(client, email="dev@example.com", password="secret1"):
    resp = await client.post(
        "/api/v1/auth/signup",
        json={"email": email, "password": password, "confirm_password": password},
    )
    assert resp.status_code == 201
    return resp.json()["data"]["token"]["access_token"]


def auth(token):
    return {"Authorization": f"Bearer {token}"}


# ============================================================================
# TESTS: HEALTH AND AUTH
# ============================================================================

class TestHealthAndAuth:

    async def test_health(self, client):
        resp = await client.get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["database"] == "ok"
        assert body["redis"] == "ok"
        assert body["environment"] == "test"

    async def test_signup_and_session(self, client):
        token = await sign_up(client)

        resp = await client.get("/api/v1/auth/session", headers=auth(token))
        body = resp.json()
        validate(body, SUCCESS_ENVELOPE)
        assert body["data"]["user"]["email"] == "dev@example.com"
        assert body["data"]["profile"]["email"] == "dev@example.com"

    async def test_session_without_token_is_null(self, client):
        resp = await client.get("/api/v1/auth/session")
        assert resp.status_code == 200
        assert resp.json()["data"] is None

    async def test_signup_password_mismatch(self, client):
        resp = await client.post(
            "/api/v1/auth/signup",
            json={"email": "x@example.com", "password": "secret1", "confirm_password": "secret2"},
        )
        assert resp.status_code == 422
        body = resp.json()
        validate(body, ERROR_ENVELOPE)
        assert body["error"]["message"] == "Passwords do not match"

    async def test_signup_duplicate_email(self, client):
        await sign_up(client)
        resp = await client.post(
            "/api/v1/auth/signup",
            json={"email": "dev@example.com", "password": "secret1", "confirm_password": "secret1"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "validation_error"

    async def test_login(self, client):
        await sign_up(client)

        bad = await client.post(
            "/api/v1/auth/login", json={"email": "dev@example.com", "password": "nope-nope"}
        )
        assert bad.status_code == 401
        validate(bad.json(), ERROR_ENVELOPE)

        good = await client.post(
            "/api/v1/auth/login", json={"email": "dev@example.com", "password": "secret1"}
        )
        assert good.status_code == 200
        assert good.json()["data"]["token"]["access_token"]

    async def test_logout_revokes_token(self, client):
        token = await sign_up(client)

        resp = await client.post("/api/v1/auth/logout", headers=auth(token))
        assert resp.status_code == 200
        assert resp.json()["data"]["revoked"] is True

        session = await client.get("/api/v1/auth/session", headers=auth(token))
        assert session.json()["data"] is None

        ask = await client.post(
            "/api/v1/questions", json=QUESTION_BODY, headers=auth(token)
        )
        assert ask.status_code == 401

    async def test_logout_requires_session(self, client):
        resp = await client.post("/api/v1/auth/logout")
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "authorization_required"


# ============================================================================
# TESTS: QUESTIONS, ANSWERS AND VOTES
# ============================================================================

class TestQuestionFlow:

    async def test_ask_answer_vote(self, client):
        token = await sign_up(client)

        created = await client.post("/api/v1/questions", json=QUESTION_BODY, headers=auth(token))
        assert created.status_code == 201
        question = created.json()["data"]
        assert question["tags"] == ["React", "Hooks"]
        qid = question["id"]

        answered = await client.post(
            f"/api/v1/questions/{qid}/answers",
            json={"content": "Split state into custom hooks."},
            headers=auth(token),
        )
        assert answered.status_code == 201
        aid = answered.json()["data"]["id"]

        up = await client.post(
            f"/api/v1/questions/{qid}/vote", json={"vote_type": "up"}, headers=auth(token)
        )
        validate(up.json(), SUCCESS_ENVELOPE)
        assert up.json()["data"]["vote_count"] == 1
        assert up.json()["data"]["user_vote"] == "up"

        down = await client.post(
            f"/api/v1/answers/{aid}/vote", json={"vote_type": "down"}, headers=auth(token)
        )
        assert down.json()["data"]["vote_count"] == -1

        detail = await client.get(f"/api/v1/questions/{qid}", headers=auth(token))
        data = detail.json()["data"]
        assert data["vote_count"] == 1
        assert data["answer_count"] == 1
        assert data["answers"][0]["id"] == aid
        assert data["user_votes"] == {qid: "up", aid: "down"}

        retract = await client.post(
            f"/api/v1/questions/{qid}/vote", json={"vote_type": "up"}, headers=auth(token)
        )
        assert retract.json()["data"]["vote_count"] == 0
        assert retract.json()["data"]["user_vote"] is None

    async def test_anonymous_vote_rejected(self, client):
        token = await sign_up(client)
        created = await client.post("/api/v1/questions", json=QUESTION_BODY, headers=auth(token))
        qid = created.json()["data"]["id"]

        resp = await client.post(f"/api/v1/questions/{qid}/vote", json={"vote_type": "up"})
        assert resp.status_code == 401
        body = resp.json()
        validate(body, ERROR_ENVELOPE)
        assert body["error"]["code"] == "authorization_required"
        assert body["error"]["message"] == "Please log in to vote"

        detail = await client.get(f"/api/v1/questions/{qid}")
        assert detail.json()["data"]["vote_count"] == 0

    async def test_anonymous_answer_rejected(self, client):
        token = await sign_up(client)
        created = await client.post("/api/v1/questions", json=QUESTION_BODY, headers=auth(token))
        qid = created.json()["data"]["id"]

        resp = await client.post(f"/api/v1/questions/{qid}/answers", json={"content": "Hi"})
        assert resp.status_code == 401

        answers = await client.get(f"/api/v1/questions/{qid}/answers")
        assert answers.json()["data"] == []

    async def test_short_title_rejected(self, client):
        token = await sign_up(client)
        resp = await client.post(
            "/api/v1/questions",
            json={**QUESTION_BODY, "title": "Too short"},
            headers=auth(token),
        )
        assert resp.status_code == 422
        body = resp.json()
        validate(body, ERROR_ENVELOPE)
        assert body["error"]["field"] == "title"

    async def test_too_many_tags_rejected(self, client):
        token = await sign_up(client)
        resp = await client.post(
            "/api/v1/questions",
            json={**QUESTION_BODY, "tags": ["a", "b", "c", "d", "e", "f"]},
            headers=auth(token),
        )
        assert resp.status_code == 422
        assert resp.json()["error"]["message"] == "Add up to 5 tags"

    async def test_unknown_question_is_404(self, client):
        resp = await client.get("/api/v1/questions/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "not_found"

    async def test_invalid_vote_type_rejected(self, client):
        token = await sign_up(client)
        created = await client.post("/api/v1/questions", json=QUESTION_BODY, headers=auth(token))
        qid = created.json()["data"]["id"]

        resp = await client.post(
            f"/api/v1/questions/{qid}/vote", json={"vote_type": "sideways"}, headers=auth(token)
        )
        assert resp.status_code == 422


# ============================================================================
# TESTS: LISTING
# ============================================================================

class TestListing:

    async def test_sort_and_filter(self, client, session_factory):
        token = await sign_up(client)
        for title, tags in (
            ("Next.js performance tuning", ["Next.js", "Performance"]),
            ("CSS grid versus flexbox layouts", ["CSS", "Flexbox"]),
            ("React state with TypeScript", ["TypeScript", "React"]),
        ):
            resp = await client.post(
                "/api/v1/questions",
                json={**QUESTION_BODY, "title": title, "tags": tags},
                headers=auth(token),
            )
            assert resp.status_code == 201

        async with session_factory() as db:
            css = (await db.execute(
                Question.__table__.select().where(Question.title.like("CSS%"))
            )).first()
            await db.execute(
                Question.__table__.update().where(Question.id == css.id).values(vote_count=9)
            )
            await db.commit()

        by_votes = await client.get("/api/v1/questions", params={"sort_by": "votes"})
        body = by_votes.json()
        validate(body, SUCCESS_ENVELOPE)
        assert body["data"][0]["title"] == "CSS grid versus flexbox layouts"
        assert body["meta"]["total"] == 3

        filtered = await client.get("/api/v1/questions", params={"tag": "script"})
        assert [q["title"] for q in filtered.json()["data"]] == ["React state with TypeScript"]

        tags = await client.get("/api/v1/questions/tags/popular")
        assert {"tag": "React", "count": 1} in tags.json()["data"]

    async def test_bad_sort_rejected(self, client):
        resp = await client.get("/api/v1/questions", params={"sort_by": "random"})
        assert resp.status_code == 422

    async def test_listing_cache_invalidated_on_post(self, client, cache):
        token = await sign_up(client)

        empty = await client.get("/api/v1/questions")
        assert empty.json()["meta"]["total"] == 0
        assert any(k.startswith("questions:") for k in cache.store)

        await client.post("/api/v1/questions", json=QUESTION_BODY, headers=auth(token))
        assert not any(k.startswith("questions:") for k in cache.store)

        listed = await client.get("/api/v1/questions")
        assert listed.json()["meta"]["total"] == 1


# ============================================================================
# TESTS: PROFILE
# ============================================================================

class TestProfile:

    async def test_update_avatar(self, client):
        token = await sign_up(client)
        resp = await client.patch(
            "/api/v1/profile/me",
            json={"avatar_url": "https://img.example.com/me.png"},
            headers=auth(token),
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["avatar_url"] == "https://img.example.com/me.png"

        me = await client.get("/api/v1/profile/me", headers=auth(token))
        assert me.json()["data"]["avatar_url"] == "https://img.example.com/me.png"

    async def test_profile_requires_session(self, client):
        resp = await client.get("/api/v1/profile/me")
        assert resp.status_code == 401


# ============================================================================
# TESTS: DATA-LAYER FAILURES
# ============================================================================

class TestRemoteFailures:

    async def test_database_error_is_503(self, client):
        failure = OperationalError("SELECT questions", {}, Exception("connection refused"))
        with patch.object(QuestionService, "list_questions", AsyncMock(side_effect=failure)):
            resp = await client.get("/api/v1/questions")

        assert resp.status_code == 503
        body = resp.json()
        validate(body, ERROR_ENVELOPE)
        assert body["error"]["code"] == "remote_error"
        assert body["error"]["message"] == "The service is temporarily unavailable"
        assert "connection refused" not in body["error"]["message"]

    async def test_conflicting_vote_is_503(self, client):
        token = await sign_up(client)
        created = await client.post("/api/v1/questions", json=QUESTION_BODY, headers=auth(token))
        qid = created.json()["data"]["id"]
        await client.post(
            f"/api/v1/questions/{qid}/vote", json={"vote_type": "up"}, headers=auth(token)
        )

        with patch.object(VoteService, "_current_vote", AsyncMock(return_value=None)):
            resp = await client.post(
                f"/api/v1/questions/{qid}/vote", json={"vote_type": "up"}, headers=auth(token)
            )

        assert resp.status_code == 503
        body = resp.json()
        validate(body, ERROR_ENVELOPE)
        assert body["error"]["code"] == "remote_error"
        assert body["error"]["message"] == "Failed to submit vote"

        detail = await client.get(f"/api/v1/questions/{qid}", headers=auth(token))
        assert detail.json()["data"]["vote_count"] == 1
        assert detail.json()["data"]["user_votes"] == {qid: "up"}
