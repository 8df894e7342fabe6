import logging
from datetime import date, datetime, time, timedelta

import pandas as pd
import streamlit as st

from dashboard.constants import NOTIFICATION_TYPES
from dashboard.data import repositories

logger = logging.getLogger(__name__)


def _when(value):
    stamp = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(stamp):
        return "-"
    return stamp.strftime("%a %b %d, %H:%M UTC")


def _render_create_form(tasks):
    open_tasks = {task["id"]: task["title"] for task in tasks if task.get("status") != "completed"}
    if not open_tasks:
        st.caption("No open tasks to remind about.")
        return
    with st.form("reminders.create", clear_on_submit=True):
        task_id = st.selectbox("Task", list(open_tasks.keys()), format_func=lambda key: open_tasks[key])
        cols = st.columns(3)
        remind_day = cols[0].date_input("Date", value=date.today() + timedelta(days=1))
        remind_time = cols[1].time_input("Time", value=time(7, 0))
        notification_type = cols[2].selectbox("Channel", NOTIFICATION_TYPES)
        message = st.text_input("Message")
        submitted = st.form_submit_button("Add reminder")
    if not submitted:
        return
    try:
        repositories.create_reminder(
            {
                "task_id": task_id,
                "remind_at": datetime.combine(remind_day, remind_time),
                "message": message.strip() or None,
                "notification_type": notification_type,
            }
        )
        st.success("Reminder added.")
    except RuntimeError as exc:
        logger.warning("Reminder create failed: %s", exc)
        st.error("Failed to save reminder.")


def _render_reminder(reminder, upcoming):
    with st.container(border=True):
        cols = st.columns([5, 2, 1, 1])
        cols[0].markdown(f"**{reminder.get('task_title') or 'Task removed'}**")
        cols[0].caption(reminder.get("message") or "")
        cols[1].caption(_when(reminder.get("remind_at")))
        cols[1].caption(f"{reminder.get('notification_type')} · {reminder.get('status')}")
        if upcoming and cols[2].button("Mark sent", key=f"reminders.sent.{reminder['id']}"):
            try:
                repositories.set_reminder_status(reminder["id"], "sent")
                st.rerun()
            except RuntimeError as exc:
                logger.warning("Reminder status change failed: %s", exc)
                st.error("Failed to update reminder.")
        if cols[3].button("Delete", key=f"reminders.delete.{reminder['id']}"):
            try:
                repositories.delete_reminder(reminder["id"])
                st.rerun()
            except RuntimeError as exc:
                logger.warning("Reminder delete failed: %s", exc)
                st.error("Failed to delete reminder.")


def render_reminders_tab(ctx):
    st.markdown("<div class='section-title'>Reminders</div>", unsafe_allow_html=True)
    try:
        payload = repositories.list_reminders()
        tasks = repositories.list_tasks()
    except RuntimeError as exc:
        logger.warning("Reminders load failed: %s", exc)
        st.error("Failed to load reminders.")
        return

    created = int(payload.get("created") or 0)
    removed = int(payload.get("removed_duplicates") or 0)
    if created:
        st.toast(f"Scheduled {created} new reminder(s) for upcoming deadlines.")
    if removed:
        st.caption(f"Cleaned up {removed} duplicate reminder(s).")

    with st.expander("Add reminder", expanded=False):
        _render_create_form(tasks)

    upcoming = payload.get("upcoming", [])
    past = payload.get("past", [])
    st.markdown(f"<div class='small-label'>Upcoming ({len(upcoming)})</div>", unsafe_allow_html=True)
    if not upcoming:
        st.caption("No upcoming reminders.")
    for reminder in upcoming:
        _render_reminder(reminder, upcoming=True)

    with st.expander(f"Past ({len(past)})", expanded=False):
        for reminder in past:
            _render_reminder(reminder, upcoming=False)
