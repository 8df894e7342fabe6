from datetime import date, datetime, time

from dashboard.data import api_client


def configure(secret_getter, current_user_getter):
    api_client.configure(secret_getter, current_user_getter)


def _iso(value):
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


def _clean(payload):
    return {key: _iso(value) for key, value in payload.items()}


# profile


def get_profile():
    return api_client.request("GET", "/v1/profile")


def update_settings(full_name=None, semester_length_weeks=None, reminder_time=None):
    payload = {
        "full_name": full_name,
        "semester_length_weeks": semester_length_weeks,
        "reminder_time": reminder_time,
    }
    return api_client.request(
        "PUT",
        "/v1/profile/settings",
        json=_clean({key: value for key, value in payload.items() if value is not None}),
    )


# subjects


def list_subjects(order="created"):
    payload = api_client.request("GET", "/v1/subjects", params={"order": order})
    return payload.get("items", [])


def create_subject(name, instructor=None, credits=None, color=None):
    return api_client.request(
        "POST",
        "/v1/subjects",
        json={"name": name, "instructor": instructor, "credits": credits, "color": color},
    )


def update_subject(subject_id, **patch):
    return api_client.request("PATCH", f"/v1/subjects/{subject_id}", json=_clean(patch))


def delete_subject(subject_id):
    api_client.request("DELETE", f"/v1/subjects/{subject_id}")


# tasks


def list_tasks(status=None, priority=None, upcoming_only=False):
    params = {"upcoming_only": str(bool(upcoming_only)).lower()}
    if status:
        params["status"] = status
    if priority:
        params["priority"] = priority
    payload = api_client.request("GET", "/v1/tasks", params=params)
    return payload.get("items", [])


def create_task(payload):
    return api_client.request("POST", "/v1/tasks", json=_clean(payload))


def update_task(task_id, **patch):
    return api_client.request("PATCH", f"/v1/tasks/{task_id}", json=_clean(patch))


def set_task_status(task_id, status):
    return api_client.request("PATCH", f"/v1/tasks/{task_id}/status", json={"status": status})


def log_task_completion(task_id, hours_studied, progress_percentage, description=None):
    return api_client.request(
        "POST",
        f"/v1/tasks/{task_id}/complete",
        json={
            "hours_studied": hours_studied,
            "progress_percentage": progress_percentage,
            "description": description,
        },
    )


def delete_task(task_id):
    api_client.request("DELETE", f"/v1/tasks/{task_id}")


# progress


def list_progress_logs():
    payload = api_client.request("GET", "/v1/progress/logs")
    return payload.get("items", [])


def create_progress_log(payload):
    return api_client.request("POST", "/v1/progress/logs", json=_clean(payload))


def delete_progress_log(log_id):
    api_client.request("DELETE", f"/v1/progress/logs/{log_id}")


def get_progress_summary():
    payload = api_client.request("GET", "/v1/progress/summary")
    return payload.get("subjects", [])


# study plans


def list_study_plans(day_of_week=None):
    params = {"day_of_week": day_of_week} if day_of_week is not None else None
    payload = api_client.request("GET", "/v1/plans", params=params)
    return payload.get("items", [])


def create_study_plan(payload):
    body = _clean(payload)
    if payload.get("new_task"):
        body["new_task"] = _clean(payload["new_task"])
    return api_client.request("POST", "/v1/plans", json=body)


def delete_study_plan(plan_id):
    api_client.request("DELETE", f"/v1/plans/{plan_id}")


# reminders


def list_reminders():
    return api_client.request("GET", "/v1/reminders")


def create_reminder(payload):
    return api_client.request("POST", "/v1/reminders", json=_clean(payload))


def update_reminder(reminder_id, **patch):
    return api_client.request("PATCH", f"/v1/reminders/{reminder_id}", json=_clean(patch))


def set_reminder_status(reminder_id, status):
    return api_client.request("PATCH", f"/v1/reminders/{reminder_id}/status", json={"status": status})


def delete_reminder(reminder_id):
    api_client.request("DELETE", f"/v1/reminders/{reminder_id}")


# derived views


def get_dashboard():
    return api_client.request("GET", "/v1/dashboard")


def get_report(range_name="week"):
    return api_client.request("GET", "/v1/reports", params={"range": range_name})


def get_admin_overview():
    return api_client.request("GET", "/v1/admin/overview")


def update_user_role(user_email, role):
    return api_client.request("PUT", f"/v1/admin/users/{user_email}/role", json={"role": role})
