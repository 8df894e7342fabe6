"""Tests for profile, dashboard, reports and admin endpoints."""

from datetime import datetime, timezone

from conftest import ADMIN, STUDENT, auth_headers, in_days


class TestProfile:
    """Lazy profile creation and settings."""

    def test_defaults(self, client, headers):
        body = client.get("/v1/profile", headers=headers).json()
        assert body["user_email"] == STUDENT
        assert body["role"] == "student"
        assert body["reminder_time"] == "07:00:00"
        assert body["semester_length_weeks"] == 16
        assert body["full_name"] == "Student"

    def test_email_is_case_insensitive(self, client):
        body = client.get("/v1/profile", headers=auth_headers("Student@Example.com")).json()
        assert body["user_email"] == STUDENT

    def test_update_settings(self, client, headers):
        response = client.put(
            "/v1/profile/settings",
            json={"full_name": "Ada Student", "semester_length_weeks": 20, "reminder_time": "08:30"},
            headers=headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["full_name"] == "Ada Student"
        assert body["semester_length_weeks"] == 20
        assert body["reminder_time"] == "08:30:00"

    def test_semester_bounds(self, client, headers):
        response = client.put("/v1/profile/settings", json={"semester_length_weeks": 60}, headers=headers)
        assert response.status_code == 422

    def test_semester_length_changes_absences(self, client, headers, subject):
        client.put("/v1/profile/settings", json={"semester_length_weeks": 10}, headers=headers)
        items = client.get("/v1/subjects", headers=headers).json()["items"]
        # 3 credits * 10 weeks = 30 classes
        assert items[0]["allowed_absences"] == 7

    def test_reminder_time_drives_synthesis(self, client, headers, make_task):
        client.put("/v1/profile/settings", json={"reminder_time": "18:15"}, headers=headers)
        make_task(due_date=in_days(10))
        upcoming = client.get("/v1/reminders", headers=headers).json()["upcoming"]
        assert all(item["remind_at"].endswith("T18:15:00+00:00") for item in upcoming)


class TestDashboard:
    """Home view aggregates."""

    def test_empty(self, client, headers):
        body = client.get("/v1/dashboard", headers=headers).json()
        assert body["stats"] == {"total_subjects": 0, "total_tasks": 0, "completed_tasks": 0, "upcoming_tasks": 0}
        assert body["todo"] == [] and body["due_soon"] == [] and body["today_plans"] == []

    def test_populated(self, client, headers, subject, make_task):
        make_task(title="Tomorrow-ish", due_date=in_days(0, hours=12))
        make_task(title="Next week", due_date=in_days(5))
        make_task(title="Far", due_date=in_days(30))
        make_task(title="Missed", due_date=in_days(-2))
        done = make_task(title="Done", due_date=in_days(3))
        client.patch(f"/v1/tasks/{done['id']}/status", json={"status": "completed"}, headers=headers)

        today = (datetime.now(timezone.utc).weekday() + 1) % 7
        client.post(
            "/v1/plans",
            json={"subject_id": subject["id"], "day_of_week": today, "start_time": "09:00", "end_time": "10:00"},
            headers=headers,
        )
        client.post(
            "/v1/plans",
            json={"subject_id": subject["id"], "day_of_week": (today + 1) % 7, "start_time": "09:00", "end_time": "10:00"},
            headers=headers,
        )

        body = client.get("/v1/dashboard", headers=headers).json()
        assert body["stats"] == {"total_subjects": 1, "total_tasks": 5, "completed_tasks": 1, "upcoming_tasks": 2}
        assert [task["title"] for task in body["todo"]] == ["Tomorrow-ish", "Next week", "Far"]
        assert [task["title"] for task in body["due_soon"]] == ["Tomorrow-ish"]
        assert len(body["today_plans"]) == 1
        assert body["today_plans"][0]["day_of_week"] == today

    def test_fully_logged_task_leaves_due_soon(self, client, headers, subject, make_task):
        task = make_task(title="Lab report", hours_required=2, due_date=in_days(0, hours=5))
        client.post(
            "/v1/progress/logs",
            json={"subject_id": subject["id"], "task_id": task["id"], "hours_studied": 2},
            headers=headers,
        )
        body = client.get("/v1/dashboard", headers=headers).json()
        assert body["todo"] == []
        assert body["due_soon"] == []
        assert body["stats"]["upcoming_tasks"] == 1


class TestReports:
    """Report view."""

    def test_invalid_range(self, client, headers):
        assert client.get("/v1/reports", params={"range": "decade"}, headers=headers).status_code == 400

    def test_week_report(self, client, headers, subject, make_task):
        task = make_task()
        client.post(
            f"/v1/tasks/{task['id']}/complete",
            json={"hours_studied": 2.5},
            headers=headers,
        )
        body = client.get("/v1/reports", params={"range": "week"}, headers=headers).json()
        assert body["range"] == "week"
        assert body["summary"] == {"total_hours": 2.5, "tasks_completed": 1, "tasks_total": 1, "completion_rate": 100}
        assert body["subject_performance"][0]["name"] == "Linear Algebra"
        assert body["subject_performance"][0]["hours_studied"] == 2.5
        assert sum(row["hours"] for row in body["weekly_progress"]) == 2.5
        statuses = {row["status"]: row["count"] for row in body["task_status"]}
        assert statuses["completed"] == 1


class TestAdmin:
    """Admin-only endpoints."""

    def test_student_forbidden(self, client, headers):
        response = client.get("/v1/admin/overview", headers=headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied. Admin privileges required."

    def test_overview(self, client, headers, subject, make_task):
        make_task()
        body = client.get("/v1/admin/overview", headers=auth_headers(ADMIN)).json()
        assert body["stats"]["total_users"] == 2
        assert body["stats"]["active_users"] == 2
        assert body["stats"]["total_subjects"] == 1
        assert body["stats"]["total_tasks"] == 1
        assert {user["user_email"] for user in body["users"]} == {STUDENT, ADMIN}

    def test_change_role(self, client, headers):
        client.get("/v1/profile", headers=headers)
        response = client.put(
            f"/v1/admin/users/{STUDENT}/role",
            json={"role": "mentor"},
            headers=auth_headers(ADMIN),
        )
        assert response.status_code == 200
        assert response.json()["role"] == "mentor"
        logs = client.get("/v1/admin/overview", headers=auth_headers(ADMIN)).json()["logs"]
        assert any("mentor" in log["message"] for log in logs)

    def test_change_role_unknown_user(self, client):
        response = client.put(
            "/v1/admin/users/ghost@example.com/role",
            json={"role": "admin"},
            headers=auth_headers(ADMIN),
        )
        assert response.status_code == 404

    def test_promoted_user_gains_access(self, client, headers):
        client.get("/v1/profile", headers=headers)
        client.put(f"/v1/admin/users/{STUDENT}/role", json={"role": "admin"}, headers=auth_headers(ADMIN))
        assert client.get("/v1/admin/overview", headers=headers).status_code == 200
