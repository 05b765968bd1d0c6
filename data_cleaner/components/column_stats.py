# Column statistics card
import streamlit as st
import plotly.express as px

from ..session_state import CleaningSession
from ..utils.table_utils import coerce_float


def show_column_stats_card(session: CleaningSession, col: str):
    stats = session.column_stats(col)
    st.markdown(f"**{col}**")
    st.caption(f"Count: {stats['count']} · Unique: {stats['unique']}")
    if 'avg' in stats:
        st.caption(f"Min: {stats['min']:g} · Max: {stats['max']:g} · Avg: {stats['avg']:.2f}")
        numbers = [n for n in (coerce_float(v) for v in session.table[col].tolist()) if n is not None]
        if len(numbers) > 1:
            fig = px.histogram(x=numbers, nbins=20, title=f"Distribution of {col}")
            fig.update_layout(height=220, margin=dict(l=10, r=10, t=30, b=10), xaxis_title="", yaxis_title="")
            st.plotly_chart(fig, use_container_width=True)


def show_column_stats_grid(session: CleaningSession, per_row: int = 4):
    headers = session.headers
    for start in range(0, len(headers), per_row):
        cols = st.columns(per_row)
        for slot, header in zip(cols, headers[start:start + per_row]):
            with slot:
                show_column_stats_card(session, header)
