# Data overview cards
import streamlit as st
import plotly.express as px

from ..utils.data_quality_utils import AnalysisReport

SEVERITY_COLORS = {"critical": "#dc2626", "high": "#ea580c", "medium": "#ca8a04"}


def show_overview_metrics(report: AnalysisReport):
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Rows", f"{report.total_rows:,}")
    with c2:
        st.metric("Columns", f"{report.total_columns:,}")
    with c3:
        st.metric("Issues Found", f"{len(report.issues):,}")
    with c4:
        st.metric("Quality Score", f"{report.quality_score}%")

    if not report.issues:
        st.success("🎉 No issues found!")
        return

    by_type = report.issues_by_type()
    fig = px.bar(
        x=list(by_type.keys()),
        y=list(by_type.values()),
        color=list(by_type.keys()),
        color_discrete_map=SEVERITY_COLORS,
        title="Issues by Severity",
    )
    fig.update_layout(showlegend=False, xaxis_title="", yaxis_title="Issues")
    st.plotly_chart(fig, use_container_width=True)
