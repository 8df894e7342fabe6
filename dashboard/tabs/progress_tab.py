import logging
from datetime import date

import pandas as pd
import streamlit as st

from dashboard.data import repositories
from dashboard.visualizations import progress_bar_html

logger = logging.getLogger(__name__)


def _render_log_form(subjects, tasks):
    subject_labels = {subject["id"]: subject["name"] for subject in subjects}
    subject_id = st.selectbox(
        "Subject",
        list(subject_labels.keys()),
        format_func=lambda key: subject_labels[key],
        key="progress.subject",
    )
    task_labels = {"": "No task"}
    task_labels.update(
        {task["id"]: task["title"] for task in tasks if task.get("subject_id") == subject_id}
    )
    task_id = st.selectbox(
        "Task (optional)",
        list(task_labels.keys()),
        format_func=lambda key: task_labels[key],
        key="progress.task",
    )
    cols = st.columns(2)
    log_date = cols[0].date_input("Date", value=date.today(), max_value=date.today(), key="progress.date")
    hours = cols[1].number_input("Hours studied", min_value=0.0, max_value=24.0, value=1.0, step=0.25, key="progress.hours")
    notes = st.text_input("Notes", key="progress.notes")
    if not st.button("Log session", key="progress.save"):
        return
    if hours <= 0:
        st.error("Hours studied must be greater than zero.")
        return
    try:
        repositories.create_progress_log(
            {
                "subject_id": subject_id,
                "task_id": task_id or None,
                "date": log_date,
                "hours_studied": float(hours),
                "notes": notes.strip() or None,
            }
        )
        st.success("Study session logged.")
        st.rerun()
    except RuntimeError as exc:
        logger.warning("Progress log create failed: %s", exc)
        st.error("Failed to log study session.")


def render_progress_tab(ctx):
    st.markdown("<div class='section-title'>Progress</div>", unsafe_allow_html=True)
    try:
        summary = repositories.get_progress_summary()
        subjects = repositories.list_subjects(order="name")
        tasks = repositories.list_tasks()
        logs = repositories.list_progress_logs()
    except RuntimeError as exc:
        logger.warning("Progress load failed: %s", exc)
        st.error("Failed to load progress data.")
        return

    if not subjects:
        st.info("Add a subject to start tracking progress.")
        return

    st.markdown("<div class='small-label'>Completion by subject</div>", unsafe_allow_html=True)
    for stat in summary:
        cols = st.columns([3, 5, 2])
        cols[0].markdown(f"**{stat.get('name')}**")
        cols[1].markdown(progress_bar_html(stat.get("completion_rate"), stat.get("color")), unsafe_allow_html=True)
        cols[2].caption(f"{stat.get('completed', 0)}/{stat.get('total', 0)} tasks · {stat.get('completion_rate', 0)}%")

    with st.expander("Log a study session", expanded=False):
        _render_log_form(subjects, tasks)

    st.markdown("<div class='small-label' style='margin-top:8px;'>Study log</div>", unsafe_allow_html=True)
    if not logs:
        st.caption("No study sessions logged yet.")
        return
    frame = pd.DataFrame(logs)
    frame["subject"] = frame["subject_name"].fillna("Unknown")
    st.metric("Total hours", round(float(frame["hours_studied"].sum()), 1))
    st.dataframe(
        frame[["date", "subject", "hours_studied", "notes"]],
        hide_index=True,
        use_container_width=True,
    )
    log_labels = {log["id"]: f"{log['date']} · {log.get('subject_name') or 'Unknown'} · {log['hours_studied']} h" for log in logs}
    to_delete = st.selectbox(
        "Remove entry",
        list(log_labels.keys()),
        format_func=lambda key: log_labels[key],
        key="progress.delete.choice",
    )
    if st.button("Delete entry", key="progress.delete"):
        try:
            repositories.delete_progress_log(to_delete)
            st.rerun()
        except RuntimeError as exc:
            logger.warning("Progress log delete failed: %s", exc)
            st.error("Failed to delete study session.")
