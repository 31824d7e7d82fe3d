"""
Tests for the agent registry endpoints.
"""

from mission_control.services.agent_service import DEFAULT_TEAM


def test_init_team_is_idempotent(client):
    first = client.post("/api/agents/init-team").json()
    assert [a["name"] for a in first] == [member["name"] for member in DEFAULT_TEAM]
    assert {a["action"] for a in first} == {"created"}

    second = client.post("/api/agents/init-team").json()
    assert {a["action"] for a in second} == {"exists"}
    assert [a["id"] for a in second] == [a["id"] for a in first]
    assert len(client.get("/api/agents").json()) == len(DEFAULT_TEAM)


def test_register_and_lookups(client):
    res = client.post(
        "/api/agents",
        json={
            "name": "Echo",
            "role": "Docs",
            "mention_patterns": ["@echo"],
            "session_key": "agent:echo:main",
        },
    )
    assert res.status_code == 201, res.text
    agent = res.json()
    assert agent["status"] == "idle"
    assert agent["last_heartbeat"] is None

    assert client.get(f"/api/agents/{agent['id']}").json()["name"] == "Echo"
    assert client.get("/api/agents/by-name/Echo").json()["id"] == agent["id"]
    assert client.get("/api/agents/by-session/agent:echo:main").json()["id"] == agent["id"]


def test_duplicate_name_is_rejected(client, team):
    res = client.post("/api/agents", json={"name": "Nova", "role": "impostor"})
    assert res.status_code == 400
    assert res.json()["error"] == "InvalidState"


def test_duplicate_session_key_is_rejected(client, team):
    res = client.post(
        "/api/agents",
        json={"name": "Nova II", "role": "lead", "session_key": "agent:nova:main"},
    )
    assert res.status_code == 400


def test_unknown_agent_lookups_are_404(client):
    assert client.get("/api/agents/nope").status_code == 404
    assert client.get("/api/agents/by-name/Nobody").status_code == 404
    assert client.get("/api/agents/by-session/agent:none:main").status_code == 404
    assert client.post("/api/agents/nope/heartbeat").status_code == 404


def test_status_update(client, team):
    atlas = team["Atlas"]
    res = client.patch(
        f"/api/agents/{atlas}/status",
        json={"status": "active", "current_task_id": "task-1"},
    )
    assert res.status_code == 200, res.text
    assert res.json()["status"] == "active"
    assert res.json()["current_task_id"] == "task-1"

    res = client.patch(f"/api/agents/{atlas}/status", json={"status": "sleeping"})
    assert res.status_code == 422


def test_heartbeat_stamps_and_logs(client, team):
    vision = team["Vision"]
    res = client.post(f"/api/agents/{vision}/heartbeat")
    assert res.status_code == 200, res.text
    assert res.json()["last_heartbeat"] is not None

    acts = client.get(f"/api/activities/agent/{vision}").json()
    assert len(acts) == 1
    assert acts[0]["type"] == "agent_heartbeat"
    assert acts[0]["task_id"] is None
    assert acts[0]["message"] == "Vision heartbeat"


def test_health_reports_roster(client, team):
    body = client.get("/api/health").json()
    assert body["status"] == "ok"
    assert body["database"] == "ok"
    assert body["agents_count"] == len(DEFAULT_TEAM)
