# Applied steps timeline
import streamlit as st
import pandas as pd
from datetime import datetime

from ..session_state import CleaningSession
from ..utils.state_utils import flash


def render_history_panel(session: CleaningSession):
    """Timeline of snapshots with undo/redo/revert and the cleaning log"""
    history = session.history
    st.markdown("#### 📝 Applied Steps Timeline")

    if not history.entries:
        st.info("No steps yet.")
        return

    hist_rows = []
    for position, h in enumerate(history.entries):
        hist_rows.append({
            "Step": f"#{h.id}",
            "Action": h.label,
            "Time": h.time,
            "Rows": len(h.table),
            "Status": "👉" if position == history.index else ("✅" if position < history.index else "↪️"),
        })
    st.dataframe(pd.DataFrame(hist_rows), use_container_width=True, height=240, hide_index=True)

    # Controls
    c1, c2 = st.columns(2)
    with c1:
        if st.button("↩️ Undo", use_container_width=True, disabled=not history.can_undo, key="undo_btn"):
            flash(*session.undo())
            st.rerun()
    with c2:
        if st.button("↪️ Redo", use_container_width=True, disabled=not history.can_redo, key="redo_btn"):
            flash(*session.redo())
            st.rerun()

    earlier = history.entries[:history.index]
    if earlier:
        revert_options = {f"#{h.id} - {h.label[:30]}": h.id for h in earlier}
        revert_to = st.selectbox("Revert to:", list(revert_options), key="revert_select")
        if st.button("⏪ Revert to Selected Step", use_container_width=True, key="revert_btn"):
            flash(*session.revert_to(revert_options[revert_to]))
            st.rerun()

    st.markdown("#### 🧾 Cleaning Log")
    for entry in reversed(history.log_entries[-20:]):
        st.caption(str(entry))

    st.download_button(
        "📥 Export Action Log",
        history.export_log(),
        file_name=f"action_log_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt",
        mime="text/plain",
        use_container_width=True,
        key="log_download",
    )
