import logging

import pandas as pd
import streamlit as st

from dashboard.constants import ROLES
from dashboard.data import repositories
from dashboard.data.api_client import ApiError

logger = logging.getLogger(__name__)


def render_admin_tab(ctx):
    st.markdown("<div class='section-title'>Admin</div>", unsafe_allow_html=True)
    if not ctx.is_admin:
        st.error("Access denied. Admin privileges required.")
        return
    try:
        overview = repositories.get_admin_overview()
    except ApiError as exc:
        if exc.status_code == 403:
            st.error("Access denied. Admin privileges required.")
            return
        logger.warning("Admin overview failed: %s", exc)
        st.error("Failed to load admin data.")
        return
    except RuntimeError as exc:
        logger.warning("Admin overview failed: %s", exc)
        st.error("Failed to load admin data.")
        return

    stats = overview.get("stats", {})
    cols = st.columns(4)
    cols[0].metric("Users", stats.get("total_users", 0))
    cols[1].metric("Active (7d)", stats.get("active_users", 0))
    cols[2].metric("Subjects", stats.get("total_subjects", 0))
    cols[3].metric("Tasks", stats.get("total_tasks", 0))

    users = overview.get("users", [])
    st.markdown("<div class='small-label'>Users</div>", unsafe_allow_html=True)
    if users:
        st.dataframe(
            pd.DataFrame(users)[["user_email", "full_name", "role", "created_at", "updated_at"]],
            hide_index=True,
            use_container_width=True,
        )
        with st.form("admin.role"):
            emails = [user["user_email"] for user in users]
            target = st.selectbox("User", emails)
            role = st.selectbox("Role", ROLES)
            submitted = st.form_submit_button("Update role")
        if submitted:
            try:
                repositories.update_user_role(target, role)
                st.success(f"{target} is now {role}.")
            except RuntimeError as exc:
                logger.warning("Role update failed: %s", exc)
                st.error("Failed to update role.")

    st.markdown("<div class='small-label' style='margin-top:8px;'>Recent system logs</div>", unsafe_allow_html=True)
    logs = overview.get("logs", [])
    if not logs:
        st.caption("No system logs.")
    else:
        st.dataframe(
            pd.DataFrame(logs)[["created_at", "log_type", "message", "user_email"]],
            hide_index=True,
            use_container_width=True,
        )
