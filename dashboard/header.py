from datetime import date

import streamlit as st


def render_global_header(ctx):
    name = ctx.get("current_user_name") or "Student"
    profile = ctx.get("profile") or {}
    backend_ok = ctx.get("backend_ok", True)

    st.markdown("<div class='sticky-header-wrap'>", unsafe_allow_html=True)
    st.markdown(
        f"<div class='small-label'>{date.today().strftime('%A, %B %d, %Y')}</div>",
        unsafe_allow_html=True,
    )
    st.markdown(f"<div class='section-title'>Welcome back, {name}</div>", unsafe_allow_html=True)
    role = profile.get("role")
    if role and role != "student":
        st.caption(f"Role: {role.title()}")
    if not backend_ok:
        st.warning("Backend unavailable. Data may take a moment to appear.")
    st.markdown("</div>", unsafe_allow_html=True)
