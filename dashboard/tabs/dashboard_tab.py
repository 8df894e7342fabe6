import logging

import pandas as pd
import streamlit as st

from dashboard.constants import PRIORITY_META
from dashboard.data import repositories
from dashboard.visualizations import progress_bar_html

logger = logging.getLogger(__name__)


def _due_label(value):
    stamp = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(stamp):
        return "-"
    return stamp.strftime("%b %d, %H:%M")


def render_dashboard_tab(ctx):
    st.markdown("<div class='section-title'>Dashboard</div>", unsafe_allow_html=True)
    try:
        payload = repositories.get_dashboard()
    except RuntimeError as exc:
        logger.warning("Dashboard load failed: %s", exc)
        st.error("Failed to load dashboard data. Please try again.")
        return

    stats = payload.get("stats", {})
    cols = st.columns(4)
    cols[0].metric("Subjects", stats.get("total_subjects", 0))
    cols[1].metric("Tasks", stats.get("total_tasks", 0))
    cols[2].metric("Completed", stats.get("completed_tasks", 0))
    cols[3].metric("Due this week", stats.get("upcoming_tasks", 0))

    left, right = st.columns([3, 2])
    with left:
        st.markdown("<div class='small-label'>To do</div>", unsafe_allow_html=True)
        todo = payload.get("todo", [])
        if not todo:
            st.caption("Nothing pending. Add a task to get started.")
        for task in todo:
            color = PRIORITY_META.get(task.get("priority"), {}).get("color", "#A78BFA")
            st.markdown(
                f"**{task.get('title')}** · {task.get('subject_name') or 'No subject'} · "
                f"<span style='color:{color}'>{str(task.get('priority') or '').title()}</span>",
                unsafe_allow_html=True,
            )
            st.caption(
                f"Due {_due_label(task.get('due_date'))} · {task.get('remaining_hours', 0)} h remaining"
            )
            st.markdown(
                progress_bar_html(task.get("progress_percent"), task.get("subject_color") or color),
                unsafe_allow_html=True,
            )

    with right:
        st.markdown("<div class='small-label'>Due in the next 24 hours</div>", unsafe_allow_html=True)
        due_soon = payload.get("due_soon", [])
        if not due_soon:
            st.caption("No deadlines in the next day.")
        for task in due_soon:
            st.warning(f"{task.get('title')} · {_due_label(task.get('due_date'))}")

        st.markdown("<div class='small-label' style='margin-top:8px;'>Today's study plan</div>", unsafe_allow_html=True)
        plans = payload.get("today_plans", [])
        if not plans:
            st.caption("No study sessions scheduled today.")
        else:
            frame = pd.DataFrame(plans)
            frame["subject"] = frame["subject_name"].fillna("Unknown")
            st.dataframe(
                frame[["subject", "start_time", "end_time", "duration_hours"]],
                hide_index=True,
                use_container_width=True,
            )
