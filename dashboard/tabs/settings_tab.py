import logging
from datetime import time

import streamlit as st

from dashboard.data import repositories

logger = logging.getLogger(__name__)


def _parse_time(value):
    parts = [int(part) for part in str(value or "07:00:00").split(":")[:2]]
    return time(parts[0], parts[1] if len(parts) > 1 else 0)


def render_settings_tab(ctx):
    st.markdown("<div class='section-title'>Settings</div>", unsafe_allow_html=True)
    profile = ctx.get("profile") or {}
    st.caption(f"Signed in as {ctx.get('current_user_email')}")

    with st.form("settings.profile"):
        full_name = st.text_input("Full name", value=profile.get("full_name") or "")
        semester_weeks = st.number_input(
            "Semester length (weeks)",
            min_value=1,
            max_value=52,
            value=int(profile.get("semester_length_weeks") or 16),
            step=1,
        )
        reminder_time = st.time_input("Daily reminder time", value=_parse_time(profile.get("reminder_time")))
        submitted = st.form_submit_button("Save settings")
    if not submitted:
        return
    try:
        repositories.update_settings(
            full_name=full_name.strip() or None,
            semester_length_weeks=int(semester_weeks),
            reminder_time=reminder_time,
        )
        st.success("Settings saved.")
    except RuntimeError as exc:
        logger.warning("Settings save failed: %s", exc)
        st.error("Failed to save settings.")
