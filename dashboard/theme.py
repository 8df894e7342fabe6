import streamlit as st

BASE_CSS = """
<style>
.section-title {
    font-size: 20px;
    font-weight: 600;
    margin: 0 0 8px 0;
}

.small-label {
    color: #6B6780;
    font-size: 13px;
    letter-spacing: 0.2px;
}

.stMetric {
    padding: 10px 12px;
    border-radius: 12px;
    border: 1px solid rgba(120, 110, 150, 0.35);
}

.progress-track {
    width: 100%;
    height: 8px;
    border-radius: 6px;
    background: rgba(120, 110, 150, 0.18);
    margin: 4px 0 10px 0;
}

.progress-fill {
    height: 8px;
    border-radius: 6px;
}

.sticky-header-wrap {
    margin-bottom: 10px;
}
</style>
"""


def inject_base_css():
    st.markdown(BASE_CSS, unsafe_allow_html=True)
