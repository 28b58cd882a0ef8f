from datetime import datetime, timedelta, timezone

from acadtrack.models.task import Task


def _set_due(db, seed, due_at):
    task = db.query(Task).filter(Task.id == seed.task_id).one()
    task.due_at = due_at
    db.commit()


def test_register_login_and_me(client):
    r = client.post(
        "/auth/register",
        json={"email": "new@example.com", "password": "supersecret", "role": "faculty"},
    )
    assert r.status_code == 201, r.text
    assert r.json()["role"] == "faculty"

    r = client.post("/auth/login", json={"email": "new@example.com", "password": "supersecret"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["email"] == "new@example.com"


def test_register_duplicate_email(client):
    r = client.post(
        "/auth/register",
        json={"email": "student1@example.com", "password": "password123"},
    )
    assert r.status_code == 400


def test_submission_is_accepted_once(client, seed, student_headers):
    r = client.post(f"/tasks/{seed.task_id}/submission", headers=student_headers, json={"content": "first"})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["status"] == "submitted"
    assert body["submission_text"] == "first"
    assert body["submitted_at"] is not None

    r = client.post(f"/tasks/{seed.task_id}/submission", headers=student_headers, json={"content": "second"})
    assert r.status_code == 409


def test_faculty_assigns_task(client, seed, faculty_headers, other_faculty_headers):
    r = client.post(
        f"/tasks/{seed.task_id}/assignments",
        headers=other_faculty_headers,
        json={"student_id": seed.other_student_id},
    )
    assert r.status_code == 403

    r = client.post(
        f"/tasks/{seed.task_id}/assignments",
        headers=faculty_headers,
        json={"student_id": seed.other_student_id},
    )
    assert r.status_code == 201, r.text
    assert r.json()["status"] == "assigned"

    r = client.post(
        f"/tasks/{seed.task_id}/assignments",
        headers=faculty_headers,
        json={"student_id": seed.other_student_id},
    )
    assert r.status_code == 409
    assert r.json()["error"] == "conflict"


def test_late_submission_status_and_penalty(client, db, seed, student_headers, faculty_headers):
    _set_due(db, seed, datetime.now(timezone.utc) - timedelta(days=1, hours=2))

    r = client.post(f"/tasks/{seed.task_id}/submission", headers=student_headers, json={"content": "late"})
    assert r.status_code == 201, r.text

    r = client.get(f"/tasks/{seed.task_id}/late-status", headers=student_headers)
    assert r.status_code == 200
    status = r.json()
    assert status["is_late"] is True
    assert status["days_late"] == 2
    assert status["penalty_percent"] == 20

    r = client.post(
        "/penalties/assess-late",
        headers=faculty_headers,
        json={"task_id": seed.task_id, "student_id": seed.student_id},
    )
    assert r.status_code == 200, r.text
    assert r.json()["penalty_percent"] == 20
    first_id = r.json()["id"]

    r = client.post(
        "/penalties/assess-late",
        headers=faculty_headers,
        json={"task_id": seed.task_id, "student_id": seed.student_id},
    )
    assert r.json()["id"] == first_id


def test_assess_on_time_returns_null(client, seed, student_headers, faculty_headers):
    client.post(f"/tasks/{seed.task_id}/submission", headers=student_headers, json={"content": "on time"})

    r = client.post(
        "/penalties/assess-late",
        headers=faculty_headers,
        json={"task_id": seed.task_id, "student_id": seed.student_id},
    )
    assert r.status_code == 200
    assert r.json() is None


def test_record_and_list_penalties(client, seed, faculty_headers):
    for percent, reason in ((10, "late"), (5, "missing checklist item")):
        r = client.post(
            "/penalties",
            headers=faculty_headers,
            json={"task_id": seed.task_id, "student_id": seed.student_id, "percent": percent, "reason": reason},
        )
        assert r.status_code == 201, r.text

    r = client.get(
        "/penalties",
        headers=faculty_headers,
        params={"task_id": seed.task_id, "student_id": seed.student_id},
    )
    assert r.status_code == 200
    assert [p["penalty_percent"] for p in r.json()] == [10, 5]


def test_penalty_percent_is_validated(client, seed, faculty_headers):
    r = client.post(
        "/penalties",
        headers=faculty_headers,
        json={"task_id": seed.task_id, "student_id": seed.student_id, "percent": 150},
    )
    assert r.status_code == 422
    assert r.json()["error"] == "validation"


def test_delete_task(client, seed, student_headers, faculty_headers, other_faculty_headers):
    client.post(f"/tasks/{seed.task_id}/submission", headers=student_headers, json={"content": "x" * 300})
    client.post(
        "/grading/auto-grade",
        headers=faculty_headers,
        json={"task_id": seed.task_id, "student_id": seed.student_id},
    )

    assert client.delete(f"/tasks/{seed.task_id}", headers=other_faculty_headers).status_code == 403

    r = client.delete(f"/tasks/{seed.task_id}", headers=faculty_headers)
    assert r.status_code == 204

    r = client.get("/grading", headers=faculty_headers, params={"task_id": seed.task_id})
    assert r.json() == []
    assert client.delete(f"/tasks/{seed.task_id}", headers=faculty_headers).status_code == 404


def test_penalty_by_id(client, seed, faculty_headers, other_faculty_headers):
    r = client.post(
        "/penalties",
        headers=faculty_headers,
        json={"task_id": seed.task_id, "student_id": seed.student_id, "percent": 10, "reason": "late"},
    )
    penalty_id = r.json()["id"]

    r = client.get(f"/penalties/{penalty_id}", headers=faculty_headers)
    assert r.status_code == 200
    assert r.json()["reason"] == "late"

    assert client.get(f"/penalties/{penalty_id}", headers=other_faculty_headers).status_code == 403

    r = client.put(f"/penalties/{penalty_id}", headers=faculty_headers, json={"percent": 30, "reason": "very late"})
    assert r.status_code == 200, r.text
    assert r.json()["penalty_percent"] == 30

    r = client.put(f"/penalties/{penalty_id}", headers=faculty_headers, json={"percent": 130})
    assert r.status_code == 422

    assert client.delete(f"/penalties/{penalty_id}", headers=other_faculty_headers).status_code == 403
    assert client.delete(f"/penalties/{penalty_id}", headers=faculty_headers).status_code == 204
    assert client.get(f"/penalties/{penalty_id}", headers=faculty_headers).status_code == 404


def test_penalties_are_hidden_from_other_faculty(client, seed, faculty_headers, other_faculty_headers):
    client.post(
        "/penalties",
        headers=faculty_headers,
        json={"task_id": seed.task_id, "student_id": seed.student_id, "percent": 10, "reason": "late"},
    )
    r = client.get(
        "/penalties",
        headers=other_faculty_headers,
        params={"task_id": seed.task_id, "student_id": seed.student_id},
    )
    assert r.status_code == 403
    assert r.json()["error"] == "authorization"
