def _submit(client, seed, headers, content="a" * 1200):
    r = client.post(f"/tasks/{seed.task_id}/submission", headers=headers, json={"content": content})
    assert r.status_code == 201, r.text
    return r.json()


def _auto_grade(client, seed, headers, **extra):
    return client.post(
        "/grading/auto-grade",
        headers=headers,
        json={"task_id": seed.task_id, "student_id": seed.student_id, **extra},
    )


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_student_cannot_auto_grade(client, seed, student_headers):
    r = _auto_grade(client, seed, student_headers)
    assert r.status_code == 403


def test_grading_requires_a_token(client, seed):
    r = _auto_grade(client, seed, {})
    assert r.status_code == 401


def test_auto_grade_before_submission_is_409(client, seed, faculty_headers):
    r = _auto_grade(client, seed, faculty_headers)
    assert r.status_code == 409, r.text
    assert r.json()["error"] == "precondition"


def test_full_grading_flow(client, seed, student_headers, faculty_headers):
    _submit(client, seed, student_headers)

    r = _auto_grade(client, seed, faculty_headers, strictness="medium")
    assert r.status_code == 201, r.text
    grade = r.json()
    assert grade["status"] == "pending"
    assert grade["auto_score"] == 100
    assert grade["feedback"].startswith("Excellent")

    r = client.put(
        f"/grading/{grade['id']}/review",
        headers=faculty_headers,
        json={"score": 92, "feedback": "Nicely structured"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "reviewed"
    assert r.json()["final_score"] == 92

    r = client.post(f"/grading/{grade['id']}/approve", headers=faculty_headers)
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "approved"

    r = client.get(f"/grading/{grade['id']}", headers=faculty_headers)
    assert r.status_code == 200
    assert r.json()["graded_by"] == seed.faculty_id


def test_duplicate_auto_grade_is_rejected(client, seed, student_headers, faculty_headers):
    _submit(client, seed, student_headers)
    assert _auto_grade(client, seed, faculty_headers).status_code == 201

    r = _auto_grade(client, seed, faculty_headers)
    assert r.status_code == 409
    assert r.json()["error"] == "precondition"


def test_override_and_list_overrides(client, seed, student_headers, faculty_headers):
    _submit(client, seed, student_headers)
    grade_id = _auto_grade(client, seed, faculty_headers).json()["id"]

    for score, reason in ((70, "first"), (85, "second")):
        r = client.post(
            f"/grading/{grade_id}/override",
            headers=faculty_headers,
            json={"new_score": score, "reason": reason},
        )
        assert r.status_code == 200, r.text

    r = client.get(f"/grading/{grade_id}/overrides", headers=faculty_headers)
    assert r.status_code == 200
    overrides = r.json()
    assert [o["reason"] for o in overrides] == ["second", "first"]
    assert [o["original_score"] for o in overrides] == [70, 100]

    grade = client.get(f"/grading/{grade_id}", headers=faculty_headers).json()
    assert grade["status"] == "overridden"
    assert grade["final_score"] == 85


def test_override_by_other_faculty_is_forbidden(
    client, seed, student_headers, faculty_headers, other_faculty_headers
):
    _submit(client, seed, student_headers)
    grade_id = _auto_grade(client, seed, faculty_headers).json()["id"]

    r = client.post(
        f"/grading/{grade_id}/override",
        headers=other_faculty_headers,
        json={"new_score": 10, "reason": "not mine"},
    )
    assert r.status_code == 403
    assert r.json()["error"] == "authorization"

    assert client.get(f"/grading/{grade_id}/overrides", headers=faculty_headers).json() == []
    assert client.get(f"/grading/{grade_id}", headers=faculty_headers).json()["status"] == "pending"


def test_override_without_reason_is_422(client, seed, student_headers, faculty_headers):
    _submit(client, seed, student_headers)
    grade_id = _auto_grade(client, seed, faculty_headers).json()["id"]

    r = client.post(
        f"/grading/{grade_id}/override",
        headers=faculty_headers,
        json={"new_score": 50, "reason": "  "},
    )
    assert r.status_code == 422
    assert r.json()["error"] == "validation"


def test_missing_grade_is_404(client, faculty_headers):
    r = client.put("/grading/999/review", headers=faculty_headers, json={"score": 1})
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


def test_list_grades_by_task(client, seed, student_headers, faculty_headers):
    _submit(client, seed, student_headers)
    _auto_grade(client, seed, faculty_headers)

    r = client.get("/grading", headers=faculty_headers, params={"task_id": seed.task_id})
    assert r.status_code == 200
    rows = r.json()
    assert len(rows) == 1
    assert rows[0]["student_id"] == seed.student_id


def test_grades_are_hidden_from_other_faculty(
    client, seed, student_headers, faculty_headers, other_faculty_headers
):
    _submit(client, seed, student_headers)
    grade_id = _auto_grade(client, seed, faculty_headers).json()["id"]

    assert client.get(f"/grading/{grade_id}", headers=other_faculty_headers).status_code == 403
    assert client.get(f"/grading/{grade_id}/overrides", headers=other_faculty_headers).status_code == 403

    r = client.get("/grading", headers=other_faculty_headers, params={"task_id": seed.task_id})
    assert r.status_code == 200
    assert r.json() == []


def test_review_without_feedback_keeps_auto_feedback(client, seed, student_headers, faculty_headers):
    _submit(client, seed, student_headers)
    grade = _auto_grade(client, seed, faculty_headers).json()

    r = client.put(f"/grading/{grade['id']}/review", headers=faculty_headers, json={"score": 64})
    assert r.status_code == 200, r.text
    assert r.json()["final_score"] == 64
    assert r.json()["feedback"] == grade["feedback"]
