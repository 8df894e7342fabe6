import logging
from datetime import date, datetime, time, timedelta

import pandas as pd
import streamlit as st

from dashboard.constants import DAY_LABELS, PRIORITIES, RECURRENCES, TASK_TYPES
from dashboard.data import repositories
from dashboard.data.api_client import ApiError

logger = logging.getLogger(__name__)

ASSIGN_NONE = "No task"
ASSIGN_EXISTING = "Existing task"
ASSIGN_NEW = "New task"


def _plan_form(subjects, tasks):
    subject_labels = {subject["id"]: subject["name"] for subject in subjects}
    subject_id = st.selectbox(
        "Subject",
        list(subject_labels.keys()),
        format_func=lambda key: subject_labels[key],
        key="planner.subject",
    )
    day_of_week = st.selectbox(
        "Day",
        list(range(7)),
        format_func=lambda idx: DAY_LABELS[idx],
        index=(date.today().weekday() + 1) % 7,
        key="planner.day",
    )
    cols = st.columns(2)
    start_time = cols[0].time_input("Start", value=time(9, 0), step=timedelta(minutes=15), key="planner.start")
    end_time = cols[1].time_input("End", value=time(10, 0), step=timedelta(minutes=15), key="planner.end")
    recurrence = st.selectbox("Recurrence", RECURRENCES, key="planner.recurrence")

    mode = st.radio("Assign", [ASSIGN_NONE, ASSIGN_EXISTING, ASSIGN_NEW], horizontal=True, key="planner.mode")
    payload = {
        "subject_id": subject_id,
        "day_of_week": day_of_week,
        "start_time": start_time,
        "end_time": end_time,
        "recurrence": recurrence,
    }
    if mode == ASSIGN_EXISTING:
        options = [task for task in tasks if task.get("subject_id") == subject_id and task.get("status") != "completed"]
        if not options:
            st.caption("No open tasks for this subject.")
        else:
            labels = {task["id"]: task["title"] for task in options}
            payload["task_id"] = st.selectbox(
                "Task",
                list(labels.keys()),
                format_func=lambda key: labels[key],
                key="planner.task",
            )
    elif mode == ASSIGN_NEW:
        title = st.text_input("Task title", key="planner.new.title")
        cols = st.columns(3)
        task_type = cols[0].selectbox("Type", TASK_TYPES, key="planner.new.type")
        priority = cols[1].selectbox("Priority", PRIORITIES, index=1, key="planner.new.priority")
        hours = cols[2].number_input("Hours required", min_value=0.0, value=1.0, step=0.5, key="planner.new.hours")
        due_day = st.date_input("Due date", value=date.today() + timedelta(days=7), key="planner.new.due")
        payload["new_task"] = {
            "title": title.strip(),
            "task_type": task_type,
            "priority": priority,
            "hours_required": float(hours),
            "due_date": datetime.combine(due_day, time(23, 59)),
        }
    return payload


def _validate(payload):
    if payload["start_time"] >= payload["end_time"]:
        return "End time must be after start time."
    new_task = payload.get("new_task")
    if new_task is not None:
        if not new_task["title"]:
            return "Task title is required."
        if new_task["hours_required"] <= 0:
            return "Hours required must be greater than zero."
    return None


def render_planner_tab(ctx):
    st.markdown("<div class='section-title'>Study Planner</div>", unsafe_allow_html=True)
    try:
        subjects = repositories.list_subjects(order="name")
        tasks = repositories.list_tasks()
        plans = repositories.list_study_plans()
    except RuntimeError as exc:
        logger.warning("Planner load failed: %s", exc)
        st.error("Failed to load study plans.")
        return

    if not subjects:
        st.info("Add a subject before planning study sessions.")
        return

    with st.expander("Add study session", expanded=not plans):
        payload = _plan_form(subjects, tasks)
        if st.button("Save session", key="planner.save"):
            error = _validate(payload)
            if error:
                st.error(error)
            else:
                try:
                    repositories.create_study_plan(payload)
                    st.success("Study session added.")
                    st.rerun()
                except ApiError as exc:
                    if exc.status_code in (400, 409):
                        st.error(str(exc.detail))
                    else:
                        logger.warning("Study plan create failed: %s", exc)
                        st.error("Failed to save study session.")
                except RuntimeError as exc:
                    logger.warning("Study plan create failed: %s", exc)
                    st.error("Failed to save study session.")

    if not plans:
        st.caption("No study sessions yet.")
        return

    st.markdown("<div class='small-label'>Weekly schedule</div>", unsafe_allow_html=True)
    frame = pd.DataFrame(plans)
    for day_index, day_label in enumerate(DAY_LABELS):
        day_rows = frame[frame["day_of_week"] == day_index]
        if day_rows.empty:
            continue
        st.markdown(f"**{day_label}**")
        for _, row in day_rows.iterrows():
            cols = st.columns([5, 1])
            cols[0].markdown(
                f"<span style='color:{row.get('subject_color') or '#A78BFA'}'>●</span> "
                f"{row['start_time']}-{row['end_time']} · {row.get('subject_name') or 'Unknown'} "
                f"({row.get('recurrence')})",
                unsafe_allow_html=True,
            )
            if pd.notna(row.get("notes")) and row.get("notes"):
                cols[0].caption(row["notes"])
            if cols[1].button("Delete", key=f"planner.delete.{row['id']}"):
                try:
                    repositories.delete_study_plan(row["id"])
                    st.rerun()
                except RuntimeError as exc:
                    logger.warning("Study plan delete failed: %s", exc)
                    st.error("Failed to delete study session.")
