"""
Unit tests for the HTTP layer.

Service functions are monkeypatched and the database session dependency is
overridden, so these tests check request validation, status codes and the
error-kind header rather than persistence.
"""
import pytest
from fastapi.testclient import TestClient
from golfbuddy.api.main import app
from golfbuddy.api.routes import ERROR_KIND_HEADER
from golfbuddy.database.db import get_db_session
from golfbuddy.services import (
    user_service,
    course_service,
    search_service,
    match_service,
    conversation_service,
    message_service,
)
from golfbuddy.utils.errors import (
    DuplicateEmailError,
    DuplicateMatchError,
    SelfMatchError,
    NotParticipantError,
    ConversationNotFoundError,
    MatchNotFoundOrNotPendingError,
)

TS = "2024-05-01T12:00:00+00:00"


def _user(user_id=1, **overrides):
    user = {
        "id": user_id,
        "email": f"golfer{user_id}@example.com",
        "username": f"golfer{user_id}",
        "full_name": "Test Golfer",
        "skill_level": "intermediate",
        "handicap": 10,
        "location": "San Francisco",
        "bio": None,
        "home_course": None,
        "created_at": TS,
        "updated_at": TS,
    }
    user.update(overrides)
    return user


def _match(status="pending"):
    return {
        "id": 7,
        "requester_id": 1,
        "recipient_id": 2,
        "status": status,
        "created_at": TS,
        "updated_at": TS,
    }


async def _fake_db_session():
    yield None


@pytest.fixture
def client():
    app.dependency_overrides[get_db_session] = _fake_db_session
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# Health
# ============================================================================


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# ============================================================================
# Users
# ============================================================================


class TestUserEndpoints:
    payload = {
        "email": "golfer1@example.com",
        "username": "golfer1",
        "full_name": "Test Golfer",
        "skill_level": "intermediate",
        "location": "San Francisco",
        "handicap": 10,
    }

    def test_create_user(self, client, monkeypatch):
        async def fake_create_user(session, **kwargs):
            assert kwargs["skill_level"] == "intermediate"
            return _user()

        monkeypatch.setattr(user_service, "create_user", fake_create_user, raising=True)
        response = client.post("/api/users", json=self.payload)
        assert response.status_code == 201
        assert response.json()["username"] == "golfer1"

    def test_create_user_duplicate_email(self, client, monkeypatch):
        async def fake_create_user(session, **kwargs):
            raise DuplicateEmailError()

        monkeypatch.setattr(user_service, "create_user", fake_create_user, raising=True)
        response = client.post("/api/users", json=self.payload)
        assert response.status_code == 409
        assert response.headers[ERROR_KIND_HEADER] == "duplicate_email"

    def test_create_user_invalid_email(self, client):
        response = client.post("/api/users", json={**self.payload, "email": "nope"})
        assert response.status_code == 422

    def test_create_user_invalid_skill_level(self, client):
        response = client.post("/api/users", json={**self.payload, "skill_level": "expert"})
        assert response.status_code == 422

    def test_get_user_not_found(self, client, monkeypatch):
        async def fake_get_user_by_id(session, user_id):
            return None

        monkeypatch.setattr(user_service, "get_user_by_id", fake_get_user_by_id, raising=True)
        response = client.get("/api/users/42")
        assert response.status_code == 404

    def test_update_user_sends_only_supplied_fields(self, client, monkeypatch):
        seen = {}

        async def fake_update_user(session, user_id, changes):
            seen.update(changes)
            return _user(user_id, bio=None, location="Austin")

        monkeypatch.setattr(user_service, "update_user", fake_update_user, raising=True)
        response = client.patch("/api/users/1", json={"bio": None, "location": "Austin"})
        assert response.status_code == 200
        assert seen == {"bio": None, "location": "Austin"}

    def test_update_user_null_username(self, client):
        response = client.patch("/api/users/1", json={"username": None})
        assert response.status_code == 422


# ============================================================================
# Courses and search
# ============================================================================


def test_create_course_requires_positive_par(client):
    response = client.post("/api/courses", json={"name": "Presidio", "location": "SF", "par": 0})
    assert response.status_code == 422


def test_get_courses(client, monkeypatch):
    async def fake_get_courses(session):
        return [
            {"id": 1, "name": "Presidio", "location": "SF", "description": None, "par": 72, "created_at": TS}
        ]

    monkeypatch.setattr(course_service, "get_courses", fake_get_courses, raising=True)
    response = client.get("/api/courses")
    assert response.status_code == 200
    assert response.json()[0]["name"] == "Presidio"


def test_search_passes_filters(client, monkeypatch):
    seen = {}

    async def fake_search_buddies(session, **kwargs):
        seen.update(kwargs)
        return [_user()]

    monkeypatch.setattr(search_service, "search_buddies", fake_search_buddies, raising=True)
    response = client.get(
        "/api/buddies/search",
        params={"location": "San Francisco", "skill_level": "intermediate", "max_handicap_diff": 0},
    )
    assert response.status_code == 200
    assert len(response.json()) == 1
    assert seen["location"] == "San Francisco"
    assert seen["skill_level"] == "intermediate"
    assert seen["max_handicap_diff"] == 0
    assert seen["course_id"] is None
    assert seen["time_preference"] is None


def test_search_accepts_negative_handicap_diff(client, monkeypatch):
    seen = {}

    async def fake_search_buddies(session, **kwargs):
        seen.update(kwargs)
        return []

    monkeypatch.setattr(search_service, "search_buddies", fake_search_buddies, raising=True)
    response = client.get("/api/buddies/search", params={"max_handicap_diff": -1})
    assert response.status_code == 200
    assert seen["max_handicap_diff"] == -1


# ============================================================================
# Buddy matches
# ============================================================================


class TestBuddyMatchEndpoints:
    def test_create_match(self, client, monkeypatch):
        async def fake_create(session, requester_id, recipient_id):
            return _match()

        monkeypatch.setattr(match_service, "create_buddy_match", fake_create, raising=True)
        response = client.post("/api/buddy-matches", json={"requester_id": 1, "recipient_id": 2})
        assert response.status_code == 201
        assert response.json()["status"] == "pending"

    def test_create_match_duplicate(self, client, monkeypatch):
        async def fake_create(session, requester_id, recipient_id):
            raise DuplicateMatchError()

        monkeypatch.setattr(match_service, "create_buddy_match", fake_create, raising=True)
        response = client.post("/api/buddy-matches", json={"requester_id": 2, "recipient_id": 1})
        assert response.status_code == 409
        assert response.headers[ERROR_KIND_HEADER] == "duplicate_match"

    def test_create_match_with_self(self, client, monkeypatch):
        async def fake_create(session, requester_id, recipient_id):
            raise SelfMatchError()

        monkeypatch.setattr(match_service, "create_buddy_match", fake_create, raising=True)
        response = client.post("/api/buddy-matches", json={"requester_id": 1, "recipient_id": 1})
        assert response.status_code == 400
        assert response.headers[ERROR_KIND_HEADER] == "self_match"

    def test_update_status(self, client, monkeypatch):
        async def fake_update(session, match_id, status):
            assert match_id == 7
            return _match(status)

        monkeypatch.setattr(match_service, "update_buddy_match_status", fake_update, raising=True)
        response = client.patch("/api/buddy-matches/7", json={"status": "accepted"})
        assert response.status_code == 200
        assert response.json()["status"] == "accepted"

    def test_update_status_not_pending(self, client, monkeypatch):
        async def fake_update(session, match_id, status):
            raise MatchNotFoundOrNotPendingError()

        monkeypatch.setattr(match_service, "update_buddy_match_status", fake_update, raising=True)
        response = client.patch("/api/buddy-matches/7", json={"status": "declined"})
        assert response.status_code == 409
        assert response.headers[ERROR_KIND_HEADER] == "match_not_found_or_not_pending"

    @pytest.mark.parametrize("status", ["pending", "maybe"])
    def test_update_status_rejects_other_values(self, client, status):
        response = client.patch("/api/buddy-matches/7", json={"status": status})
        assert response.status_code == 422


# ============================================================================
# Conversations and messages
# ============================================================================


class TestConversationEndpoints:
    def test_create_conversation(self, client, monkeypatch):
        async def fake_get_or_create(session, user_a, user_b):
            return {"id": 3, "user1_id": 1, "user2_id": 2, "created_at": TS, "updated_at": TS}

        monkeypatch.setattr(
            conversation_service, "get_or_create_conversation", fake_get_or_create, raising=True
        )
        response = client.post("/api/conversations", json={"user1_id": 2, "user2_id": 1})
        assert response.status_code == 200
        assert response.json()["user1_id"] == 1

    def test_send_message_not_participant(self, client, monkeypatch):
        async def fake_send(session, conversation_id, sender_id, content):
            raise NotParticipantError()

        monkeypatch.setattr(message_service, "send_message", fake_send, raising=True)
        response = client.post(
            "/api/conversations/3/messages", json={"sender_id": 9, "content": "Hi"}
        )
        assert response.status_code == 403
        assert response.headers[ERROR_KIND_HEADER] == "not_participant"

    def test_send_empty_message(self, client):
        response = client.post("/api/conversations/3/messages", json={"sender_id": 1, "content": ""})
        assert response.status_code == 422

    def test_get_messages_passes_window(self, client, monkeypatch):
        seen = {}

        async def fake_get_messages(session, conversation_id, limit=None, offset=None):
            seen.update(limit=limit, offset=offset)
            return []

        monkeypatch.setattr(message_service, "get_messages", fake_get_messages, raising=True)
        response = client.get("/api/conversations/3/messages", params={"limit": 2, "offset": 1})
        assert response.status_code == 200
        assert response.json() == []
        assert seen == {"limit": 2, "offset": 1}

    def test_get_messages_unknown_conversation(self, client, monkeypatch):
        async def fake_get_messages(session, conversation_id, limit=None, offset=None):
            raise ConversationNotFoundError()

        monkeypatch.setattr(message_service, "get_messages", fake_get_messages, raising=True)
        response = client.get("/api/conversations/3/messages")
        assert response.status_code == 404
        assert response.headers[ERROR_KIND_HEADER] == "conversation_not_found"
