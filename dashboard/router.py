import streamlit as st

from dashboard.constants import (
    TAB_ADMIN,
    TAB_DASHBOARD,
    TAB_PLANNER,
    TAB_PROGRESS,
    TAB_REMINDERS,
    TAB_REPORTS,
    TAB_SETTINGS,
    TAB_SUBJECTS,
    TAB_TASKS,
)
from dashboard.tabs.admin_tab import render_admin_tab
from dashboard.tabs.dashboard_tab import render_dashboard_tab
from dashboard.tabs.planner_tab import render_planner_tab
from dashboard.tabs.progress_tab import render_progress_tab
from dashboard.tabs.reminders_tab import render_reminders_tab
from dashboard.tabs.reports_tab import render_reports_tab
from dashboard.tabs.settings_tab import render_settings_tab
from dashboard.tabs.subjects_tab import render_subjects_tab
from dashboard.tabs.tasks_tab import render_tasks_tab


TAB_OPTIONS = [
    TAB_DASHBOARD,
    TAB_SUBJECTS,
    TAB_PLANNER,
    TAB_TASKS,
    TAB_PROGRESS,
    TAB_REMINDERS,
    TAB_REPORTS,
    TAB_SETTINGS,
]

TAB_RENDERERS = {
    TAB_DASHBOARD: render_dashboard_tab,
    TAB_SUBJECTS: render_subjects_tab,
    TAB_PLANNER: render_planner_tab,
    TAB_TASKS: render_tasks_tab,
    TAB_PROGRESS: render_progress_tab,
    TAB_REMINDERS: render_reminders_tab,
    TAB_REPORTS: render_reports_tab,
    TAB_ADMIN: render_admin_tab,
    TAB_SETTINGS: render_settings_tab,
}


def tab_options(is_admin):
    if not is_admin:
        return list(TAB_OPTIONS)
    return TAB_OPTIONS[:-1] + [TAB_ADMIN, TAB_SETTINGS]


def render_router(ctx):
    options = tab_options(ctx.is_admin)
    if st.session_state.get("ui.active_tab") not in options:
        st.session_state["ui.active_tab"] = options[0]
    with st.sidebar:
        active = st.radio("Navigate", options, key="ui.active_tab")
    return _render_active(active, ctx)


@st.fragment
def _render_active(active, ctx):
    TAB_RENDERERS[active](ctx)
