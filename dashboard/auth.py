from __future__ import annotations

import os
from urllib.parse import urlparse

import streamlit as st

ENV_PATH = os.path.join(os.path.dirname(__file__), "..", ".env")

ENV_FALLBACK_KEYS = {
    ("auth", "redirect_uri"): "AUTH_REDIRECT_URI",
    ("auth", "cookie_secret"): "AUTH_COOKIE_SECRET",
    ("auth", "google", "client_id"): "GOOGLE_CLIENT_ID",
    ("auth", "google", "client_secret"): "GOOGLE_CLIENT_SECRET",
    ("auth", "google", "server_metadata_url"): "GOOGLE_SERVER_METADATA_URL",
    ("app", "allowed_emails"): "ALLOWED_EMAILS",
    ("app", "API_BASE_URL"): "API_BASE_URL",
    ("app", "BACKEND_SESSION_SECRET"): "BACKEND_SESSION_SECRET",
}


def load_local_env():
    if not os.path.exists(ENV_PATH):
        return
    with open(ENV_PATH, "r", encoding="utf-8") as env_file:
        for raw_line in env_file:
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def get_secret(path, default=None):
    env_key = ENV_FALLBACK_KEYS.get(tuple(path))
    if env_key:
        env_value = os.getenv(env_key)
        if env_value:
            return env_value
    try:
        current = st.secrets
        for key in path:
            if key not in current:
                return default
            current = current[key]
    except Exception:
        # st.secrets raises when no secrets.toml exists at all.
        return default
    return current


def auth_configured():
    return bool(
        get_secret(("auth", "redirect_uri"))
        and get_secret(("auth", "cookie_secret"))
        and get_secret(("auth", "google", "client_id"))
        and get_secret(("auth", "google", "client_secret"))
    )


def allowed_emails():
    raw = get_secret(("app", "allowed_emails")) or ""
    return [email.strip().lower() for email in str(raw).split(",") if email.strip()]


def enforce_google_login():
    """Gate the app behind Streamlit's Google login when auth secrets exist.

    Without auth secrets the app runs in local mode as the first allowed
    e-mail (see ``get_current_user_email``).
    """
    if not auth_configured():
        return

    redirect_uri = (get_secret(("auth", "redirect_uri")) or "").strip()
    if urlparse(redirect_uri).path != "/oauth2callback":
        st.error("Invalid auth.redirect_uri. For Streamlit st.login it must end with /oauth2callback.")
        st.stop()

    if not st.user.is_logged_in:
        st.markdown("<div class='section-title'>Login Required</div>", unsafe_allow_html=True)
        st.markdown("Use your Google account to access your study planner.")
        if st.button("Login with Google", key="google_login"):
            st.login("google")
        st.stop()

    allowed_set = allowed_emails()
    user_email = str(getattr(st.user, "email", "")).strip().lower()
    if allowed_set and user_email not in allowed_set:
        st.error("Access denied for this account.")
        if st.button("Logout", key="logout_denied"):
            st.logout()
        st.stop()

    with st.sidebar:
        st.caption(f"Logged as: {getattr(st.user, 'email', 'unknown')}")
        if st.button("Logout", key="logout_sidebar"):
            st.logout()


def get_current_user_email():
    user_email = str(getattr(st.user, "email", "") or "").strip().lower()
    if user_email:
        return user_email
    fallback = allowed_emails()
    return fallback[0] if fallback else "local@offline"


def get_display_name(user_email, profile=None):
    full_name = str((profile or {}).get("full_name") or "").strip()
    if full_name:
        return full_name.split()[0]
    user_name = str(getattr(st.user, "name", "") or "").strip()
    if user_name:
        return user_name.split()[0]
    local = (user_email or "").split("@")[0].replace(".", " ").strip()
    return local.title() if local else "Student"
