"""API tests for POST /api/v1/assignments/{id}/{student}/start and student read-back."""

import pytest
from sqlalchemy.exc import OperationalError

from classwork.components.assignments import service as service_module
from classwork.platform import middleware as middleware_module
from tests.conftest import create_assignment, create_category, row_counts, setup_assignment, student_id


def _start(client, assignment_id, student):
    return client.post(f"/api/v1/assignments/{assignment_id}/{student}/start")


# ---------------------------------------------------------------------------
# POST /start: success
# ---------------------------------------------------------------------------


def test_start_success(client, db):
    assignment, _, _ = setup_assignment(db, [(2, 5), (1, 3)])
    student = student_id()

    resp = _start(client, assignment.id, student)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Assignment successfully started.", "task_count": 3}
    assert row_counts(db, assignment.id, student) == {
        "assignment_progress": 1,
        "student_tasks": 3,
        "current_tasks": 1,
    }


def test_start_then_read_back_sequence_and_current_task(client, db):
    assignment, categories, pools = setup_assignment(db, [(2, 5), (1, 3)])
    student = "student-42"
    assert _start(client, assignment.id, student).status_code == 200

    tasks_resp = client.get(f"/api/v1/assignments/{assignment.id}/{student}/tasks")
    assert tasks_resp.status_code == 200
    tasks = tasks_resp.json()
    assert [t["task_number"] for t in tasks] == [1, 2, 3]
    assert {tasks[0]["task_id"], tasks[1]["task_id"]} <= pools[categories[0].id]
    assert tasks[2]["task_id"] in pools[categories[1].id]

    current_resp = client.get(f"/api/v1/assignments/{assignment.id}/{student}/current-task")
    assert current_resp.status_code == 200
    current = current_resp.json()
    assert current["task_id"] == tasks[0]["task_id"]
    assert current["student"] == student


# ---------------------------------------------------------------------------
# POST /start: refusals
# ---------------------------------------------------------------------------


def test_start_twice_conflict(client, db):
    assignment, _, _ = setup_assignment(db, [(1, 2)])
    student = student_id()
    assert _start(client, assignment.id, student).status_code == 200

    resp = _start(client, assignment.id, student)

    assert resp.status_code == 409
    body = resp.json()
    assert body["message"] == f"Starting assignment for student {student} failed."
    assert body["reason"] == "already_started"
    assert body["student"] == student
    assert body["assignment_id"] == str(assignment.id)
    assert "already started" in body["detail"]
    assert row_counts(db, assignment.id, student)["assignment_progress"] == 1


def test_start_missing_assignment_404(client, db):
    create_category(db)
    resp = _start(client, 9999, student_id())
    assert resp.status_code == 404
    assert resp.json()["reason"] == "assignment_not_found"


def test_start_non_numeric_assignment_404(client):
    resp = _start(client, "intro-to-sql", student_id())
    assert resp.status_code == 404
    assert resp.json()["assignment_id"] == "intro-to-sql"


@pytest.mark.parametrize("raw_id", ["%C2%B2", "99999999999999999999", "2147483648"])
def test_start_out_of_range_or_unicode_id_404(client, db, raw_id):
    setup_assignment(db, [(1, 2)])
    resp = _start(client, raw_id, student_id())
    assert resp.status_code == 404
    assert resp.json()["reason"] == "assignment_not_found"


def test_read_back_out_of_range_id_404(client):
    resp = client.get(f"/api/v1/assignments/99999999999999999999/{student_id()}/tasks")
    assert resp.status_code == 404
    assert resp.json()["reason"] == "assignment_not_started"


def test_start_inactive_assignment_409(client, db):
    assignment, _, _ = setup_assignment(db, [(1, 2)], active=False)
    resp = _start(client, assignment.id, student_id())
    assert resp.status_code == 409
    assert resp.json()["reason"] == "assignment_not_active"
    assert row_counts(db, assignment.id)["assignment_progress"] == 0


def test_start_insufficient_tasks_422(client, db):
    assignment, categories, _ = setup_assignment(db, [(3, 2)])
    resp = _start(client, assignment.id, student_id())
    assert resp.status_code == 422
    body = resp.json()
    assert body["reason"] == "insufficient_tasks_in_category"
    assert body["category_id"] == categories[0].id
    assert body["required"] == 3
    assert body["available"] == 2
    assert row_counts(db, assignment.id) == {
        "assignment_progress": 0,
        "student_tasks": 0,
        "current_tasks": 0,
    }


def test_start_without_categories_500_with_reason(client, db):
    assignment = create_assignment(db)
    resp = _start(client, assignment.id, student_id())
    assert resp.status_code == 500
    assert resp.json()["reason"] == "no_categories_defined"


def test_start_without_tasks_422(client, db):
    create_category(db)
    assignment = create_assignment(db)
    resp = _start(client, assignment.id, student_id())
    assert resp.status_code == 422
    assert resp.json()["reason"] == "no_tasks_for_assignment"


def test_start_database_failure_is_opaque(client, db, monkeypatch):
    assignment, _, _ = setup_assignment(db, [(1, 2)])

    def broken_insert(*_args):
        raise OperationalError("INSERT INTO assignment_progress", {}, Exception("password authentication failed"))

    monkeypatch.setattr(service_module, "_insert_progress", broken_insert)

    resp = _start(client, assignment.id, student_id())

    assert resp.status_code == 500
    body = resp.json()
    assert body["reason"] == "internal_error"
    assert body["detail"] == "Internal database error."
    assert "password" not in resp.text
    assert "INSERT" not in resp.text


def test_start_rate_limited(client, db, monkeypatch):
    monkeypatch.setattr(middleware_module.settings, "START_RATE_LIMIT_PER_MINUTE", 2)
    assignment, _, _ = setup_assignment(db, [(1, 5)])

    assert _start(client, assignment.id, student_id()).status_code == 200
    assert _start(client, assignment.id, student_id()).status_code == 200
    resp = _start(client, assignment.id, student_id())
    assert resp.status_code == 429


def test_start_response_carries_request_id(client, db):
    assignment, _, _ = setup_assignment(db, [(1, 2)])
    resp = client.post(
        f"/api/v1/assignments/{assignment.id}/{student_id()}/start",
        headers={"X-Request-ID": "req-123"},
    )
    assert resp.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time-Ms" in resp.headers


# ---------------------------------------------------------------------------
# GET read-back before start
# ---------------------------------------------------------------------------


def test_tasks_before_start_404(client, db):
    assignment, _, _ = setup_assignment(db, [(1, 2)])
    resp = client.get(f"/api/v1/assignments/{assignment.id}/{student_id()}/tasks")
    assert resp.status_code == 404
    assert resp.json()["reason"] == "assignment_not_started"


def test_current_task_before_start_404(client, db):
    assignment, _, _ = setup_assignment(db, [(1, 2)])
    resp = client.get(f"/api/v1/assignments/{assignment.id}/{student_id()}/current-task")
    assert resp.status_code == 404
