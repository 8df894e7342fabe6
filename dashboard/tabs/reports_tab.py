import logging

import pandas as pd
import streamlit as st

from dashboard.constants import REPORT_RANGES
from dashboard.data import repositories
from dashboard.visualizations import status_pie_chart, subject_hours_chart, weekly_hours_chart

logger = logging.getLogger(__name__)


def render_reports_tab(ctx):
    st.markdown("<div class='section-title'>Reports</div>", unsafe_allow_html=True)
    range_name = st.selectbox(
        "Window",
        list(REPORT_RANGES.keys()),
        format_func=lambda key: REPORT_RANGES[key],
        key="reports.range",
    )
    try:
        report = repositories.get_report(range_name)
    except RuntimeError as exc:
        logger.warning("Report load failed: %s", exc)
        st.error("Failed to load report.")
        return

    summary = report.get("summary", {})
    cols = st.columns(3)
    cols[0].metric("Hours studied", summary.get("total_hours", 0))
    cols[1].metric("Tasks completed", f"{summary.get('tasks_completed', 0)}/{summary.get('tasks_total', 0)}")
    cols[2].metric("Completion rate", f"{summary.get('completion_rate', 0)}%")

    performance = report.get("subject_performance", [])
    weekly = report.get("weekly_progress", [])
    statuses = report.get("task_status", [])
    if not performance and not weekly:
        st.info("No study activity in this window yet.")
        return

    chart_cols = st.columns(2)
    if performance:
        chart_cols[0].plotly_chart(subject_hours_chart(performance), use_container_width=True)
    if weekly:
        chart_cols[1].plotly_chart(weekly_hours_chart(weekly), use_container_width=True)
    if any(int(row.get("count") or 0) for row in statuses):
        st.plotly_chart(status_pie_chart(statuses), use_container_width=True)

    if performance:
        frame = pd.DataFrame(performance)
        frame = frame.rename(
            columns={
                "name": "Subject",
                "tasks_completed": "Completed",
                "tasks_total": "Tasks",
                "hours_studied": "Hours",
            }
        )
        st.dataframe(frame[["Subject", "Completed", "Tasks", "Hours"]], hide_index=True, use_container_width=True)
