# Step 1: Upload Data
import streamlit as st

from ..constants import UPLOAD_EXTENSIONS
from ..session_state import CleaningSession
from ..utils.state_utils import flash


def step1_upload(session: CleaningSession):
    st.header("Step 1 · Upload Data")
    st.markdown("Upload your Excel or CSV file and get an automatic quality assessment.")

    uploaded_file = st.file_uploader("Choose a file", type=UPLOAD_EXTENSIONS)

    if uploaded_file is not None:
        file_size_mb = uploaded_file.size / (1024 * 1024)
        if file_size_mb > 100:
            st.warning(f"⚠️ Large file detected ({file_size_mb:.1f} MB). Processing may take longer.")

        if st.button("🔍 Load & Analyze", type="primary"):
            with st.spinner("Reading file and analyzing quality..."):
                ok, message = session.load_file(uploaded_file.getvalue(), uploaded_file.name)
            if ok:
                flash(ok, message)
                st.rerun()
            else:
                st.error(f"❌ {message}")

    c1, c2, c3 = st.columns(3)
    with c1:
        st.info("**Auto Detection**\n\nDuplicates, missing values, case and spacing issues.")
    with c2:
        st.info("**Quality Score**\n\nA single 0-100 score for the loaded table.")
    with c3:
        st.info("**Undo / Redo**\n\nEvery cleaning step can be taken back.")
