# Main navigation file
import logging
import os
import sys

import streamlit as st

from .constants import LOG_LEVEL, PAGE_ICON, PAGE_LAYOUT, PAGE_TITLE, STEP_ANALYSIS, STEP_CLEANING
from .utils.state_utils import get_session, initialize_session_state, show_flash

from .components.sidebar import sidebar_navigation

from .steps.step1_upload import step1_upload
from .steps.step2_analysis import step2_analysis
from .steps.step3_cleaning import step3_cleaning

DARK_CSS = """
<style>
.stApp { background-color: #111827; color: #f3f4f6; }
[data-testid="stSidebar"] { background-color: #1f2937; }
</style>
"""


# ---------------------------------------------------------------------
# Main App
# ---------------------------------------------------------------------
def main():
    st.set_page_config(
        page_title=PAGE_TITLE,
        page_icon=PAGE_ICON,
        layout=PAGE_LAYOUT,
        initial_sidebar_state="expanded"
    )
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    initialize_session_state()
    session = get_session()

    if session.view.dark_mode:
        st.markdown(DARK_CSS, unsafe_allow_html=True)

    sidebar_navigation(session)

    step = session.view.current_step
    if step == STEP_ANALYSIS and session.has_data:
        show_flash()
        step2_analysis(session)
    elif step == STEP_CLEANING and session.has_data:
        step3_cleaning(session)
    else:
        show_flash()
        step1_upload(session)


def run():
    """Console entry point: launch the Streamlit app"""
    from streamlit.web import cli as stcli

    app_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app.py")
    sys.argv = ["streamlit", "run", app_path]
    sys.exit(stcli.main())

