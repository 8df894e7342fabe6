"""Tests for auth, subjects, tasks and progress logs endpoints."""

from conftest import STUDENT, auth_headers, in_days


class TestAuth:
    """Header authentication."""

    def test_missing_token(self, client):
        response = client.get("/v1/tasks", headers={"X-User-Email": STUDENT})
        assert response.status_code == 401

    def test_wrong_token(self, client):
        response = client.get("/v1/tasks", headers=auth_headers(token="nope"))
        assert response.status_code == 401

    def test_missing_email(self, client):
        response = client.get("/v1/tasks", headers={"X-Backend-Token": "test-backend-secret"})
        assert response.status_code == 401

    def test_health(self, client):
        assert client.get("/health").json() == {"ok": True}


class TestSubjects:
    """Subject CRUD."""

    def test_list_includes_allowed_absences(self, client, headers, subject):
        response = client.get("/v1/subjects", headers=headers)
        assert response.status_code == 200
        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["name"] == "Linear Algebra"
        assert items[0]["color"] == "#6A0DAD"
        assert items[0]["allowed_absences"] == 11

    def test_blank_name_rejected(self, client, headers):
        response = client.post("/v1/subjects", json={"name": "   "}, headers=headers)
        assert response.status_code == 400

    def test_update(self, client, headers, subject):
        response = client.patch(f"/v1/subjects/{subject['id']}", json={"credits": 4}, headers=headers)
        assert response.status_code == 200
        assert response.json()["credits"] == 4

    def test_delete_cascades_to_tasks(self, client, headers, subject, make_task):
        make_task()
        response = client.delete(f"/v1/subjects/{subject['id']}", headers=headers)
        assert response.status_code == 200
        assert client.get("/v1/tasks", headers=headers).json()["items"] == []

    def test_missing_subject(self, client, headers):
        assert client.delete("/v1/subjects/missing", headers=headers).status_code == 404


class TestTasks:
    """Task CRUD and annotations."""

    def test_create_and_list_with_progress(self, client, headers, subject, make_task):
        task = make_task(hours_required=5)
        assert task["status"] == "pending"
        assert task["subject_name"] == "Linear Algebra"

        response = client.post(
            "/v1/progress/logs",
            json={"subject_id": subject["id"], "task_id": task["id"], "hours_studied": 2},
            headers=headers,
        )
        assert response.status_code == 200

        items = client.get("/v1/tasks", headers=headers).json()["items"]
        assert len(items) == 1
        assert items[0]["remaining_hours"] == 3.0
        assert items[0]["progress_percent"] == 40
        assert items[0]["display_status"] == "pending"

    def test_unknown_subject(self, client, headers):
        response = client.post(
            "/v1/tasks",
            json={"subject_id": "missing", "title": "X", "hours_required": 1, "due_date": in_days(3)},
            headers=headers,
        )
        assert response.status_code == 400

    def test_hours_required_must_be_positive(self, client, headers, subject):
        response = client.post(
            "/v1/tasks",
            json={"subject_id": subject["id"], "title": "X", "hours_required": 0, "due_date": in_days(3)},
            headers=headers,
        )
        assert response.status_code == 422

    def test_past_due_is_overdue(self, client, headers, make_task):
        task = make_task(due_date=in_days(-1))
        response = client.get(f"/v1/tasks/{task['id']}", headers=headers)
        assert response.json()["display_status"] == "overdue"

    def test_upcoming_only(self, client, headers, make_task):
        make_task(title="Late", due_date=in_days(-1))
        make_task(title="Soon", due_date=in_days(2))
        items = client.get("/v1/tasks", params={"upcoming_only": "true"}, headers=headers).json()["items"]
        assert [item["title"] for item in items] == ["Soon"]

    def test_filter_by_priority(self, client, headers, make_task):
        make_task(title="Urgent", priority="high")
        make_task(title="Later", priority="low")
        items = client.get("/v1/tasks", params={"priority": "high"}, headers=headers).json()["items"]
        assert [item["title"] for item in items] == ["Urgent"]

    def test_manual_overdue_rejected(self, client, headers, make_task):
        task = make_task()
        response = client.patch(f"/v1/tasks/{task['id']}/status", json={"status": "overdue"}, headers=headers)
        assert response.status_code == 400

    def test_status_change(self, client, headers, make_task):
        task = make_task()
        response = client.patch(f"/v1/tasks/{task['id']}/status", json={"status": "completed"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert response.json()["completed_at"]

    def test_other_users_cannot_see_task(self, client, make_task):
        task = make_task()
        response = client.get(f"/v1/tasks/{task['id']}", headers=auth_headers("someone@example.com"))
        assert response.status_code == 404

    def test_delete_detaches_logs(self, client, headers, subject, make_task):
        task = make_task()
        client.post(
            "/v1/progress/logs",
            json={"subject_id": subject["id"], "task_id": task["id"], "hours_studied": 1},
            headers=headers,
        )
        assert client.delete(f"/v1/tasks/{task['id']}", headers=headers).status_code == 200
        assert client.get(f"/v1/tasks/{task['id']}", headers=headers).status_code == 404
        logs = client.get("/v1/progress/logs", headers=headers).json()["items"]
        assert len(logs) == 1
        assert logs[0]["task_id"] is None


class TestCompletion:
    """Logging progress against a task."""

    def test_partial_then_complete(self, client, headers, make_task):
        task = make_task(hours_required=5)

        response = client.post(
            f"/v1/tasks/{task['id']}/complete",
            json={"hours_studied": 1, "progress_percentage": 50},
            headers=headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "pending"
        assert body["progress_percent"] == 50
        assert body["remaining_hours"] == 4.0

        response = client.post(
            f"/v1/tasks/{task['id']}/complete",
            json={"hours_studied": 4, "progress_percentage": 80},
            headers=headers,
        )
        body = response.json()
        assert body["status"] == "completed"
        assert body["remaining_hours"] == 0.0
        assert body["completed_at"]

    def test_full_progress_completes(self, client, headers, make_task):
        task = make_task(hours_required=10)
        response = client.post(
            f"/v1/tasks/{task['id']}/complete",
            json={"hours_studied": 1},
            headers=headers,
        )
        assert response.json()["status"] == "completed"
        logs = client.get("/v1/progress/logs", headers=headers).json()["items"]
        assert logs[0]["notes"] == "Completed: Problem set"

    def test_hours_validated(self, client, headers, make_task):
        task = make_task()
        response = client.post(
            f"/v1/tasks/{task['id']}/complete",
            json={"hours_studied": 0},
            headers=headers,
        )
        assert response.status_code == 422


class TestProgressSummary:
    """Completion summary by subject."""

    def test_summary(self, client, headers, subject, make_task):
        task = make_task()
        make_task(title="Second")
        client.patch(f"/v1/tasks/{task['id']}/status", json={"status": "completed"}, headers=headers)
        rows = client.get("/v1/progress/summary", headers=headers).json()["subjects"]
        assert rows[0]["subject_id"] == subject["id"]
        assert rows[0]["total"] == 2
        assert rows[0]["completed"] == 1
        assert rows[0]["completion_rate"] == 50

    def test_log_requires_known_subject(self, client, headers):
        response = client.post(
            "/v1/progress/logs",
            json={"subject_id": "missing", "hours_studied": 1},
            headers=headers,
        )
        assert response.status_code == 400
