from datetime import date, datetime, timedelta

from studytrack.tests.conftest import add_task


def _log(client, subject_id, minutes, when=None):
    payload = {"subject_id": subject_id, "duration_minutes": minutes}
    if when is not None:
        payload["date"] = when.isoformat()
    res = client.post("/api/v1/sessions/", json=payload)
    assert res.status_code == 200, res.text
    return res.json()


def test_sessions_filter_by_subject_and_day(client, subject):
    other = client.post("/api/v1/subjects/", json={"name": "Biology"}).json()
    _log(client, subject["id"], 45, datetime(2024, 4, 1, 9))
    _log(client, subject["id"], 30, datetime(2024, 4, 2, 9))
    _log(client, other["id"], 60, datetime(2024, 4, 2, 11))

    assert len(client.get("/api/v1/sessions/").json()) == 3
    assert len(client.get("/api/v1/sessions/", params={"subject_id": subject["id"]}).json()) == 2
    on_day = client.get("/api/v1/sessions/", params={"day": "2024-04-02"}).json()
    assert sorted(s["duration_minutes"] for s in on_day) == [30, 60]

    assert client.post("/api/v1/sessions/", json={"subject_id": subject["id"], "duration_minutes": 0}).status_code == 422
    assert client.delete(f"/api/v1/sessions/{on_day[0]['id']}").status_code == 200
    assert client.delete(f"/api/v1/sessions/{on_day[0]['id']}").status_code == 404


def test_daily_goals_and_summary(client, subject):
    add_task(client, subject["id"], "Done topic")
    add_task(client, subject["id"], "Open topic")
    first = client.get(f"/api/v1/subjects/{subject['id']}/tasks").json()[0]
    client.post(f"/api/v1/tasks/{first['id']}/toggle")

    now = datetime.now()
    _log(client, subject["id"], 90, now)
    _log(client, subject["id"], 60, now - timedelta(days=1))

    goals = client.get("/api/v1/stats/daily-goals").json()
    assert goals == [
        {
            "subject_id": subject["id"],
            "subject_name": "Calculus",
            "daily_goal_hours": 1.0,
            "hours_studied": 1.5,
            "goal_met": True,
            "progress_percent": 150.0,
        }
    ]
    yesterday = client.get("/api/v1/stats/daily-goals", params={"day": (now - timedelta(days=1)).date().isoformat()})
    assert yesterday.json()[0]["hours_studied"] == 1.0

    summary = client.get("/api/v1/stats/summary").json()
    assert summary["streak"] == 2
    assert summary["weekly"]["total_sessions"] == 2
    assert summary["weekly"]["active_days"] == 2
    assert summary["total_hours"] == 2.5
    assert summary["subjects"][0]["progress"] == 50.0
    assert len(summary["weekly_hours"]) == 4
    assert summary["weekly_hours"][-1]["hours"] == 2.5


def test_only_one_timer_runs_and_completion_logs_session(client, subject):
    other = client.post("/api/v1/subjects/", json={"name": "Biology"}).json()

    started = client.post("/api/v1/timer/start", json={"subject_id": subject["id"], "mode": "pomodoro"})
    assert started.status_code == 200, started.text
    assert started.json()["is_running"] is True
    assert started.json()["target_seconds"] == 25 * 60

    client.post("/api/v1/timer/start", json={"subject_id": other["id"], "mode": "focus"})
    state = client.get("/api/v1/timer/").json()
    assert state["active"]["subject_id"] == other["id"]
    assert state["active"]["remaining_seconds"] is None
    running = {t["subject_id"]: t["is_running"] for t in state["timers"]}
    assert running == {subject["id"]: False, other["id"]: True}

    done = client.post(f"/api/v1/timer/{subject['id']}/complete", json={"notes": "chapter 3"})
    assert done.status_code == 200, done.text
    body = done.json()
    assert body["session"]["duration_minutes"] == 25
    assert body["session"]["notes"] == "chapter 3"
    assert body["timer"]["is_running"] is False
    assert body["timer"]["elapsed_seconds"] == 0

    # a focus timer stopped straight away has nothing to log
    assert client.post(f"/api/v1/timer/{other['id']}/complete").json()["session"] is None
    assert len(client.get("/api/v1/sessions/").json()) == 1


def test_timer_pause_resume_reset(client, subject):
    client.patch("/api/v1/settings/", json={"short_break_minutes": 10})
    res = client.post("/api/v1/timer/start", json={"subject_id": subject["id"], "mode": "short_break", "elapsed_seconds": 60})
    assert res.json()["target_seconds"] == 600
    assert res.json()["elapsed_seconds"] >= 60

    paused = client.post(f"/api/v1/timer/{subject['id']}/pause").json()
    assert paused["is_running"] is False
    assert 60 <= paused["elapsed_seconds"] < 120

    resumed = client.post(f"/api/v1/timer/{subject['id']}/resume").json()
    assert resumed["is_running"] is True

    reset = client.post(f"/api/v1/timer/{subject['id']}/reset").json()
    assert reset["is_running"] is False
    assert reset["elapsed_seconds"] == 0
    assert reset["remaining_seconds"] == 600

    assert client.post("/api/v1/timer/999/pause").status_code == 404
    assert client.post("/api/v1/timer/start", json={"subject_id": 999}).status_code == 404


def test_blogs_period_filter_and_update(client, subject):
    blog = client.post("/api/v1/blogs/", json={"title": "Week one", "content": "Limits", "subject_id": subject["id"]})
    assert blog.status_code == 200, blog.text
    blog_id = blog.json()["id"]
    client.post("/api/v1/blogs/", json={"title": "Loose thoughts"})

    assert len(client.get("/api/v1/blogs/", params={"period": "today"}).json()) == 2
    assert [b["title"] for b in client.get("/api/v1/blogs/", params={"subject_id": subject["id"]}).json()] == ["Week one"]
    assert client.get("/api/v1/blogs/", params={"period": "year"}).status_code == 422

    updated = client.patch(f"/api/v1/blogs/{blog_id}", json={"content": "Limits and continuity"}).json()
    assert updated["content"] == "Limits and continuity"
    assert updated["title"] == "Week one"

    assert client.post("/api/v1/blogs/", json={"title": "x", "subject_id": 999}).status_code == 404
    assert client.delete(f"/api/v1/blogs/{blog_id}").status_code == 200
    assert len(client.get("/api/v1/blogs/").json()) == 1


def test_attachments(client, subject):
    res = client.post(
        f"/api/v1/subjects/{subject['id']}/attachments",
        json={"name": "Syllabus", "url": "https://example.com/syllabus.pdf", "mime_type": "application/pdf"},
    )
    assert res.status_code == 200, res.text

    listed = client.get(f"/api/v1/subjects/{subject['id']}/attachments").json()
    assert [a["name"] for a in listed] == ["Syllabus"]

    assert client.delete(f"/api/v1/attachments/{listed[0]['id']}").status_code == 200
    assert client.get(f"/api/v1/subjects/{subject['id']}/attachments").json() == []


def test_settings_and_export(client, subject):
    settings = client.get("/api/v1/settings/").json()
    assert settings["planning_days"] == 7
    assert settings["pomodoro_minutes"] == 25

    assert client.patch("/api/v1/settings/", json={"planning_days": 0}).status_code == 422
    assert client.patch("/api/v1/settings/", json={"ai_model": "gemini-2.5-pro"}).json()["ai_model"] == "gemini-2.5-pro"

    add_task(client, subject["id"], "Limits", estimated_minutes=30)
    _log(client, subject["id"], 20, datetime.combine(date.today(), datetime.min.time()))
    client.post("/api/v1/blogs/", json={"title": "Notes"})

    export = client.get("/api/v1/settings/export").json()
    assert [s["name"] for s in export["subjects"]] == ["Calculus"]
    assert [t["name"] for t in export["subjects"][0]["tasks"]] == ["Limits"]
    assert export["sessions"][0]["duration_minutes"] == 20
    assert export["blogs"][0]["title"] == "Notes"


def test_completing_a_pomodoro_twice_logs_one_session(client, subject):
    client.post("/api/v1/timer/start", json={"subject_id": subject["id"], "mode": "pomodoro"})

    first = client.post(f"/api/v1/timer/{subject['id']}/complete").json()
    second = client.post(f"/api/v1/timer/{subject['id']}/complete").json()

    assert first["session"]["duration_minutes"] == 25
    assert second["session"] is None
    assert len(client.get("/api/v1/sessions/").json()) == 1

    client.post("/api/v1/timer/start", json={"subject_id": subject["id"], "mode": "pomodoro"})
    client.post(f"/api/v1/timer/{subject['id']}/reset")
    assert client.post(f"/api/v1/timer/{subject['id']}/complete").json()["session"] is None
