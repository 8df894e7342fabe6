import logging

import streamlit as st

from dashboard.constants import SUBJECT_COLORS
from dashboard.data import repositories

logger = logging.getLogger(__name__)


def _subject_form(prefix, subject=None):
    subject = subject or {}
    name = st.text_input("Subject name", value=subject.get("name", ""), key=f"{prefix}.name")
    instructor = st.text_input("Instructor", value=subject.get("instructor") or "", key=f"{prefix}.instructor")
    credits = st.number_input(
        "Credits (weekly classes)",
        min_value=0,
        max_value=20,
        value=int(subject.get("credits") or 0),
        step=1,
        key=f"{prefix}.credits",
    )
    current_color = subject.get("color") or SUBJECT_COLORS[0]
    color_index = SUBJECT_COLORS.index(current_color) if current_color in SUBJECT_COLORS else 0
    color = st.selectbox("Color", SUBJECT_COLORS, index=color_index, key=f"{prefix}.color")
    return {
        "name": name.strip(),
        "instructor": instructor.strip() or None,
        "credits": int(credits) or None,
        "color": color,
    }


def render_subjects_tab(ctx):
    st.markdown("<div class='section-title'>Subjects</div>", unsafe_allow_html=True)

    with st.expander("Add subject", expanded=False):
        with st.form("subjects.create", clear_on_submit=True):
            values = _subject_form("subjects.create")
            submitted = st.form_submit_button("Create subject")
        if submitted:
            if not values["name"]:
                st.error("Subject name is required.")
            else:
                try:
                    repositories.create_subject(**values)
                    st.success("Subject created.")
                except RuntimeError as exc:
                    logger.warning("Subject create failed: %s", exc)
                    st.error("Failed to save subject. Please try again.")

    try:
        subjects = repositories.list_subjects()
    except RuntimeError as exc:
        logger.warning("Subjects load failed: %s", exc)
        st.error("Failed to load subjects.")
        return

    if not subjects:
        st.info("No subjects yet. Add your first subject above.")
        return

    for subject in subjects:
        color = subject.get("color") or SUBJECT_COLORS[0]
        absences = subject.get("allowed_absences")
        with st.container(border=True):
            cols = st.columns([4, 2, 1, 1])
            cols[0].markdown(
                f"<span style='color:{color}'>●</span> **{subject.get('name')}**",
                unsafe_allow_html=True,
            )
            cols[0].caption(subject.get("instructor") or "No instructor")
            cols[1].caption(f"{subject.get('credits') or 0} credits")
            if absences is not None:
                cols[1].caption(f"Allowed absences: {absences}")
            edit_key = f"subjects.edit.{subject['id']}"
            if cols[2].button("Edit", key=f"{edit_key}.toggle"):
                st.session_state[edit_key] = not st.session_state.get(edit_key, False)
            if cols[3].button("Delete", key=f"subjects.delete.{subject['id']}"):
                try:
                    repositories.delete_subject(subject["id"])
                    st.rerun()
                except RuntimeError as exc:
                    logger.warning("Subject delete failed: %s", exc)
                    st.error("Failed to delete subject.")

            if st.session_state.get(edit_key):
                with st.form(f"{edit_key}.form"):
                    values = _subject_form(edit_key, subject)
                    saved = st.form_submit_button("Save")
                if saved:
                    if not values["name"]:
                        st.error("Subject name is required.")
                    else:
                        try:
                            repositories.update_subject(subject["id"], **values)
                            st.session_state[edit_key] = False
                            st.rerun()
                        except RuntimeError as exc:
                            logger.warning("Subject update failed: %s", exc)
                            st.error("Failed to update subject.")
