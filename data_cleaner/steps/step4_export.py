# steps/step4_export.py

import streamlit as st

from ..constants import EXPORT_FORMATS, EXPORT_LABELS
from ..session_state import CleaningSession


# ---------------------------------------------------------------------
# Step 4: Export
# ---------------------------------------------------------------------
def step4_export(session: CleaningSession):
    st.subheader("📤 Export")

    if not session.has_data:
        st.warning("No dataset found. Please complete previous steps.")
        return

    fmt = st.radio(
        "Format",
        list(EXPORT_FORMATS),
        format_func=lambda f: EXPORT_LABELS[f],
        horizontal=True,
        key="export_format",
    )
    file_name, mime = EXPORT_FORMATS[fmt]
    key = session.export_key(fmt)

    if st.button(f"Prepare {EXPORT_LABELS[fmt]}", key="export_prepare"):
        st.session_state.export_payload = (key, session.export(fmt))

    # Prepared bytes are only valid for the snapshot and headers they were built from
    payload = st.session_state.get("export_payload")
    if payload and payload[0] == key:
        st.download_button(
            f"📥 Download {file_name}",
            payload[1],
            file_name=file_name,
            mime=mime,
            type="primary",
            key="export_download",
        )
    elif payload:
        st.session_state.export_payload = None
