"""
Tests for the HTTP layer: routing, status codes and error bodies.
"""
import pytest
from fastapi.testclient import TestClient

from questforge.database import get_db
from questforge.main import app, get_date_service


@pytest.fixture
def client(db_session, date_service):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_date_service] = lambda: date_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class TestApi:
    """End-to-end request flows"""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "active"

    def test_not_initialized_is_conflict(self, client):
        response = client.post("/api/stats/INT/xp", json={"amount": 10})

        assert response.status_code == 409
        body = response.json()
        assert body["ok"] is False
        assert body["reason"] == "no_character"

    def test_daily_generation_before_init(self, client):
        response = client.post("/api/quests/daily")

        assert response.status_code == 200
        assert response.json() == {
            "ok": False, "generated": False, "reason": "no_character", "count": 0, "date": None
        }

    def test_full_flow(self, client):
        assert client.post("/api/character/init").json()["seeded"] is True
        assert client.post("/api/character/init").json()["seeded"] is False

        quests = client.get("/api/quests").json()
        open_quest = next(q for q in quests if not q["is_boss"])

        completed = client.post(f"/api/quests/{open_quest['id']}/complete").json()
        assert completed["unlocked_achievements"] == ["first_quest"]
        assert completed["streak_count"] == 1

        again = client.post(f"/api/quests/{open_quest['id']}/complete").json()
        assert again["already_completed"] is True

        dashboard = client.get("/api/dashboard").json()
        assert dashboard["today"] == "2026-01-30"
        assert len(dashboard["completed_today"]) == 1
        assert dashboard["overall_total_xp"] == open_quest["xp_reward"]

    def test_award_xp(self, client):
        client.post("/api/character/init?seed_quests=false")

        response = client.post("/api/stats/CRE/xp", json={"amount": 120})

        assert response.status_code == 200
        assert response.json()["level"] == 2
        assert response.json()["xp"] == 20

    def test_oversized_award_rejected(self, client):
        client.post("/api/character/init?seed_quests=false")

        too_big = client.post("/api/stats/INT/xp", json={"amount": 2 ** 62})
        too_small = client.post("/api/stats/INT/xp", json={"amount": -(2 ** 62)})
        huge_reward = client.post("/api/quests/log", json={"name": "Gym", "stat": "STR", "xp_reward": 10 ** 15})

        assert too_big.status_code == 422
        assert too_small.status_code == 422
        assert huge_reward.status_code == 422

    def test_set_stat_validation_error(self, client):
        client.post("/api/character/init?seed_quests=false")

        response = client.put("/api/stats/INT", json={"level": 1, "xp": 100, "total_xp": 100})

        assert response.status_code == 400
        assert response.json()["field"] == "xp"

    def test_unknown_quest_is_404(self, client):
        client.post("/api/character/init?seed_quests=false")

        response = client.post("/api/quests/999/complete")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_invalid_stat_in_body_is_rejected(self, client):
        client.post("/api/character/init?seed_quests=false")

        response = client.post("/api/quests/log", json={"name": "Gym", "stat": "LUCK", "xp_reward": 10})

        assert response.status_code == 422

    def test_log_quest_duplicate(self, client):
        client.post("/api/character/init?seed_quests=false")
        payload = {"name": "Gym", "stat": "STR", "xp_reward": 40}

        first = client.post("/api/quests/log", json=payload).json()
        second = client.post("/api/quests/log", json=payload).json()

        assert first["created"] is True
        assert second["duplicate"] is True

    def test_boss_lifecycle(self, client):
        client.post("/api/character/init?seed_quests=false")

        assert client.put("/api/boss/progress", json={"current_value": 1}).status_code == 404

        created = client.post("/api/boss", json={"name": "Launch MVP", "stat": "DISC", "xp_reward": 150, "target_value": 3})
        assert created.status_code == 201

        progress = client.put("/api/boss/progress", json={"current_value": 2}).json()
        assert progress["id"] == created.json()["quest_id"]
        assert progress["current_value"] == 2

    def test_achievements(self, client):
        client.post("/api/character/init?seed_quests=false")

        created = client.post("/api/achievements", json={"key": "marathon", "name": "Marathoner", "icon": "🏃"})
        duplicate = client.post("/api/achievements", json={"key": "marathon", "name": "Other", "icon": "x"})
        updated = client.put("/api/achievements/marathon", json={"condition": "Run 42km"})
        missing = client.put("/api/achievements/nope", json={"name": "x"})

        assert created.json()["created"] is True
        assert duplicate.json()["reason"] == "already_exists"
        assert updated.json()["condition"] == "Run 42km"
        assert updated.json()["name"] == "Marathoner"
        assert missing.status_code == 404
