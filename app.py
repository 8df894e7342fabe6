import logging

import streamlit as st

from dashboard.auth import (
    enforce_google_login,
    get_current_user_email,
    get_display_name,
    get_secret,
    load_local_env,
)
from dashboard.context import PlannerContext
from dashboard.data import api_client, repositories
from dashboard.header import render_global_header
from dashboard.logging_config import configure_logging
from dashboard.router import render_router
from dashboard.theme import inject_base_css

configure_logging()
load_local_env()
logger = logging.getLogger("dashboard")

st.set_page_config(page_title="Study Planner", layout="wide")
inject_base_css()

enforce_google_login()
repositories.configure(get_secret, get_current_user_email)

if not api_client.is_enabled():
    st.error("Backend is not configured. Set API_BASE_URL and BACKEND_SESSION_SECRET.")
    st.stop()

current_user_email = get_current_user_email()
backend_ok = True
try:
    profile = repositories.get_profile()
except RuntimeError as exc:
    logger.warning("Profile load failed: %s", exc)
    profile = {}
    backend_ok = False

current_user_name = get_display_name(current_user_email, profile)

render_global_header(
    {
        "current_user_name": current_user_name,
        "profile": profile,
        "backend_ok": backend_ok,
    }
)

context = PlannerContext(
    {
        "current_user_email": current_user_email,
        "current_user_name": current_user_name,
        "profile": profile,
    }
)

render_router(context)
