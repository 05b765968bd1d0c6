# Navigation sidebar
import streamlit as st

from ..constants import STEP_LABELS, STEP_UPLOAD, STEPS
from ..session_state import CleaningSession
from ..utils.state_utils import flash
from .history_panel import render_history_panel


def sidebar_navigation(session: CleaningSession):
    st.sidebar.header("🧹 Data Cleaning Tool")

    dark = st.sidebar.toggle("🌙 Dark mode", value=session.view.dark_mode, key="dark_mode_toggle")
    if dark != session.view.dark_mode:
        session.toggle_dark_mode()
        st.rerun()

    if not session.has_data:
        st.sidebar.info("Upload a dataset to start cleaning.")
        return

    labels = [STEP_LABELS[s] for s in STEPS]
    chosen = st.sidebar.radio(
        "Navigation:", labels,
        index=STEPS.index(session.view.current_step),
        key=f"nav_{session.view.current_step}",
    )
    step = STEPS[labels.index(chosen)]
    if step != session.view.current_step:
        ok, message = session.go_to(step)
        if ok:
            st.rerun()
        flash(ok, message)

    st.sidebar.divider()
    st.sidebar.markdown("### 📊 Data Summary")
    st.sidebar.caption(session.filename or "")
    table = session.table
    st.sidebar.metric("Rows", f"{len(table):,}")
    st.sidebar.metric("Columns", f"{len(session.headers):,}")
    if session.analysis is not None:
        st.sidebar.metric("Quality Score (at last analysis)", f"{session.analysis.quality_score}%")

    if st.sidebar.button("🆕 New Dataset", use_container_width=True):
        session.reset()
        session.go_to(STEP_UPLOAD)
        st.rerun()

    st.sidebar.divider()
    with st.sidebar:
        render_history_panel(session)
