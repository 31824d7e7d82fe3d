"""
Tests for notification delivery and the activity feed endpoints.
"""


def _notify(client, team, content="Ping", recipient="Friday", sender="Nova"):
    res = client.post(
        "/api/notifications",
        json={"recipient_id": team[recipient], "sender_id": team[sender], "content": content},
    )
    assert res.status_code == 201, res.text
    return res.json()


class TestNotifications:
    def test_free_text_is_truncated(self, client, team):
        body = _notify(client, team, content="x" * 500)
        assert len(body["content"]) == 200
        assert body["delivered"] is False

    def test_short_content_untouched(self, client, team):
        body = _notify(client, team, content="@friday can you check the build?")
        assert body["content"] == "@friday can you check the build?"

    def test_empty_content_is_400(self, client, team):
        res = client.post(
            "/api/notifications",
            json={"recipient_id": team["Friday"], "sender_id": team["Nova"], "content": "  "},
        )
        assert res.status_code == 400

    def test_unknown_recipient_is_404(self, client, team):
        res = client.post(
            "/api/notifications",
            json={"recipient_id": "ghost", "sender_id": team["Nova"], "content": "hi"},
        )
        assert res.status_code == 404

    def test_mark_delivered(self, client, team):
        first = _notify(client, team, content="one")
        _notify(client, team, content="two")

        pending = client.get(f"/api/notifications/{team['Friday']}/undelivered").json()
        assert [n["content"] for n in pending] == ["one", "two"]

        res = client.post(f"/api/notifications/{first['id']}/delivered")
        assert res.status_code == 200
        assert res.json()["delivered"] is True

        pending = client.get(f"/api/notifications/{team['Friday']}/undelivered").json()
        assert [n["content"] for n in pending] == ["two"]

    def test_mark_all_delivered_counts(self, client, team):
        for i in range(3):
            _notify(client, team, content=f"n{i}")
        _notify(client, team, content="other", recipient="Sage")

        res = client.post(f"/api/notifications/{team['Friday']}/delivered-all")
        assert res.json() == {"marked": 3}
        assert client.get(f"/api/notifications/{team['Friday']}/undelivered").json() == []
        assert len(client.get(f"/api/notifications/{team['Sage']}/undelivered").json()) == 1

        res = client.post(f"/api/notifications/{team['Friday']}/delivered-all")
        assert res.json() == {"marked": 0}

    def test_mark_unknown_notification_is_404(self, client):
        assert client.post("/api/notifications/9999/delivered").status_code == 404

    def test_history_is_newest_first_and_limited(self, client, team):
        for i in range(4):
            _notify(client, team, content=f"n{i}")
        res = client.get(f"/api/notifications/{team['Friday']}", params={"limit": 2})
        assert [n["content"] for n in res.json()] == ["n3", "n2"]


class TestActivities:
    def test_recent_and_filters(self, client, team):
        nova, sage = team["Nova"], team["Sage"]
        res = client.post("/api/tasks", json={"title": "Survey", "priority": "P1", "created_by": nova})
        task_id = res.json()["task_id"]
        client.post(f"/api/agents/{sage}/heartbeat")

        recent = client.get("/api/activities").json()
        assert [a["type"] for a in recent] == ["agent_heartbeat", "task_created"]

        assert len(client.get("/api/activities", params={"limit": 1}).json()) == 1
        assert [a["agent_id"] for a in client.get(f"/api/activities/agent/{nova}").json()] == [nova]
        assert [a["task_id"] for a in client.get(f"/api/activities/task/{task_id}").json()] == [task_id]
        assert len(client.get("/api/activities/today").json()) == 2

    def test_non_positive_limit_is_rejected(self, client):
        assert client.get("/api/activities", params={"limit": 0}).status_code == 422
