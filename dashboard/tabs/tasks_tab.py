import logging
from datetime import date, datetime, time, timedelta

import pandas as pd
import streamlit as st

from dashboard.constants import PRIORITIES, PRIORITY_META, TASK_STATUSES, TASK_TYPES
from dashboard.data import repositories
from dashboard.data.api_client import ApiError
from dashboard.visualizations import progress_bar_html

logger = logging.getLogger(__name__)

STATUS_FILTERS = ["all", "pending", "in_progress", "completed", "overdue"]
PRIORITY_FILTERS = ["all"] + PRIORITIES


def _label(value):
    return str(value or "").replace("_", " ").title()


def _render_create_form(subjects):
    subject_labels = {subject["id"]: subject["name"] for subject in subjects}
    with st.form("tasks.create", clear_on_submit=True):
        title = st.text_input("Title")
        subject_id = st.selectbox(
            "Subject",
            list(subject_labels.keys()),
            format_func=lambda key: subject_labels[key],
        )
        description = st.text_area("Description", height=80)
        cols = st.columns(3)
        task_type = cols[0].selectbox("Type", TASK_TYPES, format_func=_label)
        priority = cols[1].selectbox("Priority", PRIORITIES, index=1, format_func=_label)
        hours = cols[2].number_input("Hours required", min_value=0.0, value=2.0, step=0.5)
        cols = st.columns(2)
        due_day = cols[0].date_input("Due date", value=date.today() + timedelta(days=7))
        due_time = cols[1].time_input("Due time", value=time(23, 59))
        submitted = st.form_submit_button("Create task")
    if not submitted:
        return
    if not title.strip():
        st.error("Title is required.")
        return
    if hours <= 0:
        st.error("Hours required must be greater than zero.")
        return
    try:
        repositories.create_task(
            {
                "title": title.strip(),
                "subject_id": subject_id,
                "description": description.strip() or None,
                "task_type": task_type,
                "priority": priority,
                "hours_required": float(hours),
                "due_date": datetime.combine(due_day, due_time),
            }
        )
        st.success("Task created.")
    except RuntimeError as exc:
        logger.warning("Task create failed: %s", exc)
        st.error("Failed to save task. Please try again.")


def _render_completion_form(task):
    key = f"tasks.complete.{task['id']}"
    with st.form(key):
        cols = st.columns(2)
        hours = cols[0].number_input("Hours studied", min_value=0.0, max_value=24.0, value=1.0, step=0.5)
        progress = cols[1].slider("Progress %", 0, 100, value=100)
        note = st.text_input("What did you do?")
        submitted = st.form_submit_button("Log progress")
    if not submitted:
        return
    if hours <= 0:
        st.error("Hours studied must be greater than zero.")
        return
    try:
        repositories.log_task_completion(task["id"], float(hours), int(progress), note.strip() or None)
        st.session_state[key] = False
        st.rerun()
    except RuntimeError as exc:
        logger.warning("Task completion failed: %s", exc)
        st.error("Failed to log progress.")


def _render_task(task):
    status = task.get("display_status") or task.get("status")
    color = PRIORITY_META.get(task.get("priority"), {}).get("color", "#A78BFA")
    due = pd.to_datetime(task.get("due_date"), utc=True, errors="coerce")
    with st.container(border=True):
        cols = st.columns([5, 2, 2])
        cols[0].markdown(
            f"**{task.get('title')}** · <span style='color:{task.get('subject_color') or color}'>"
            f"{task.get('subject_name') or 'No subject'}</span>",
            unsafe_allow_html=True,
        )
        if task.get("description"):
            cols[0].caption(task["description"])
        cols[1].caption(f"{_label(task.get('task_type'))} · {_label(task.get('priority'))}")
        cols[1].caption("Due " + (due.strftime("%b %d, %H:%M") if not pd.isna(due) else "-"))
        cols[2].caption(f"{_label(status)} · {task.get('remaining_hours', 0)} h left")
        st.markdown(
            progress_bar_html(task.get("progress_percent"), task.get("subject_color") or color),
            unsafe_allow_html=True,
        )

        action_cols = st.columns([2, 1, 1])
        choices = TASK_STATUSES
        current = task.get("status") if task.get("status") in choices else "pending"
        new_status = action_cols[0].selectbox(
            "Status",
            choices,
            index=choices.index(current),
            format_func=_label,
            key=f"tasks.status.{task['id']}",
            label_visibility="collapsed",
        )
        if new_status != current:
            try:
                repositories.set_task_status(task["id"], new_status)
                st.rerun()
            except ApiError as exc:
                st.error(str(exc.detail))
            except RuntimeError as exc:
                logger.warning("Task status change failed: %s", exc)
                st.error("Failed to update task status.")

        complete_key = f"tasks.complete.{task['id']}"
        if task.get("status") != "completed" and action_cols[1].button("Log progress", key=f"{complete_key}.toggle"):
            st.session_state[complete_key] = not st.session_state.get(complete_key, False)
        if action_cols[2].button("Delete", key=f"tasks.delete.{task['id']}"):
            try:
                repositories.delete_task(task["id"])
                st.rerun()
            except RuntimeError as exc:
                logger.warning("Task delete failed: %s", exc)
                st.error("Failed to delete task.")
        if st.session_state.get(complete_key):
            _render_completion_form(task)


def render_tasks_tab(ctx):
    st.markdown("<div class='section-title'>Tasks</div>", unsafe_allow_html=True)
    try:
        subjects = repositories.list_subjects(order="name")
    except RuntimeError as exc:
        logger.warning("Subjects load failed: %s", exc)
        st.error("Failed to load subjects.")
        return

    if not subjects:
        st.info("Add a subject before creating tasks.")
        return

    with st.expander("Add task", expanded=False):
        _render_create_form(subjects)

    cols = st.columns(3)
    status_filter = cols[0].selectbox("Status", STATUS_FILTERS, format_func=_label, key="tasks.filter.status")
    priority_filter = cols[1].selectbox("Priority", PRIORITY_FILTERS, format_func=_label, key="tasks.filter.priority")
    upcoming_only = cols[2].toggle("Upcoming only", key="tasks.filter.upcoming")

    try:
        tasks = repositories.list_tasks(
            priority=None if priority_filter == "all" else priority_filter,
            upcoming_only=upcoming_only,
        )
    except RuntimeError as exc:
        logger.warning("Tasks load failed: %s", exc)
        st.error("Failed to load tasks.")
        return

    if status_filter != "all":
        tasks = [task for task in tasks if (task.get("display_status") or task.get("status")) == status_filter]
    if not tasks:
        st.caption("No tasks match these filters.")
        return
    for task in tasks:
        _render_task(task)
