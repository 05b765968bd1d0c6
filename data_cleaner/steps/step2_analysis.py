# Step 2: Quality Analysis
import streamlit as st

from ..components.overview_metrics import show_overview_metrics
from ..constants import STEP_CLEANING
from ..session_state import CleaningSession

ISSUE_ICONS = {"critical": "🔴", "high": "🟠", "medium": "🟡"}


def step2_analysis(session: CleaningSession):
    st.header("Step 2 · Quality Analysis")

    report = session.analysis or session.analyze()
    if report is None:
        st.warning("Please upload a dataset first!")
        return

    show_overview_metrics(report)

    if report.issues:
        st.subheader(f"Issues Found ({len(report.issues)})")
        for issue in report.issues:
            icon = ISSUE_ICONS.get(issue.type, "⚪")
            with st.container(border=True):
                st.markdown(f"{icon} **{issue.title}** · `{issue.type}` · {issue.count}")
                st.caption(issue.description)

    c1, c2 = st.columns(2)
    with c1:
        if st.button("🔄 Re-run Analysis", use_container_width=True):
            session.analyze()
            st.rerun()
    with c2:
        if st.button("Start Cleaning →", type="primary", use_container_width=True):
            session.go_to(STEP_CLEANING)
            st.rerun()
