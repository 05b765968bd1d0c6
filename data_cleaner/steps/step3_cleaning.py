# Step 3: Cleaning
import streamlit as st

from ..components.column_stats import show_column_stats_grid
from ..constants import PREVIEW_ROW_LIMIT
from ..session_state import CleaningSession
from ..utils.state_utils import flash, show_flash
from ..utils.table_utils import cell_text
from .step4_export import step4_export


def _run(result):
    """Store the outcome and refresh; failures stay on screen without a rerun"""
    ok, message = result
    flash(ok, message)
    if ok:
        st.rerun()


def _operations_panel(session: CleaningSession):
    selected = session.view.selected_columns

    with st.expander("🧹 Whole Table", expanded=True):
        c1, c2 = st.columns(2)
        with c1:
            if st.button("🗑️ Remove Duplicates", use_container_width=True):
                _run(session.remove_duplicates())
        with c2:
            if st.button("✂️ Trim Spaces", use_container_width=True):
                _run(session.trim_spaces())

    with st.expander("🔠 Text", expanded=True):
        c1, c2, c3 = st.columns(3)
        with c1:
            if st.button("UPPER", use_container_width=True):
                _run(session.change_case("upper"))
        with c2:
            if st.button("lower", use_container_width=True):
                _run(session.change_case("lower"))
        with c3:
            if st.button("Proper", use_container_width=True):
                _run(session.change_case("proper"))

        c1, c2, c3 = st.columns(3)
        with c1:
            if st.button("Remove Special", use_container_width=True):
                _run(session.remove_special_characters())
        with c2:
            if st.button("Extract Numbers", use_container_width=True):
                _run(session.extract_numbers())
        with c3:
            if st.button("Extract Text", use_container_width=True):
                _run(session.extract_text())

        st.markdown("**🔄 Find & Replace**")
        c1, c2 = st.columns(2)
        with c1:
            find_text = st.text_input("Find text:", key="find_text")
        with c2:
            replace_text = st.text_input("Replace with:", key="replace_text")
        if st.button("Replace", disabled=not selected):
            _run(session.find_replace(find_text, replace_text))

    with st.expander("❓ Missing Values", expanded=True):
        if st.button("Remove Rows", use_container_width=True):
            _run(session.remove_missing_rows())
        fill_value = st.text_input("Fill value:", key="fill_value")
        if st.button("Fill Values", use_container_width=True):
            _run(session.fill_missing(fill_value))

    with st.expander("🧩 Columns", expanded=False):
        delimiter = st.text_input("Split delimiter:", key="split_delimiter")
        if st.button("Split (1 col)", use_container_width=True, disabled=len(selected) != 1):
            _run(session.split_column(delimiter))
        separator = st.text_input("Merge separator:", key="merge_separator")
        if st.button("Merge (2+ cols)", use_container_width=True, disabled=len(selected) < 2):
            _run(session.merge_columns(separator))
        if st.button("Drop Columns", use_container_width=True, disabled=not selected):
            _run(session.drop_columns())

    with st.expander("🧪 Formats & Checks", expanded=False):
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Format Dates", use_container_width=True, disabled=not selected):
                _run(session.format_dates())
            if st.button("Remove Outliers", use_container_width=True):
                _run(session.remove_outliers())
        with c2:
            if st.button("Validate Emails", use_container_width=True):
                ok, message = session.validate_emails()
                flash(ok, message)
            if st.button("Format Phones", use_container_width=True):
                _run(session.format_phone_numbers())


def step3_cleaning(session: CleaningSession):
    st.header("Step 3 · Clean & Export")

    if not session.has_data:
        st.warning("Please upload a dataset first!")
        return

    chosen = st.multiselect(
        "Selected columns:",
        session.headers,
        default=session.view.selected_columns,
        key=f"column_select_{len(session.history)}_{'|'.join(session.headers)}",
    )
    if chosen != session.view.selected_columns:
        session.select_columns(chosen)

    col_ops, col_data = st.columns([1, 2])

    with col_ops:
        _operations_panel(session)

    with col_data:
        show_flash()

        c1, c2, c3 = st.columns([2, 2, 1])
        with c1:
            search = st.text_input("🔎 Search", value=session.view.search_text, placeholder="Search...")
            if search != session.view.search_text:
                session.set_search(search)
        with c2:
            sort_col = st.selectbox("Sort by", [""] + session.headers, key="sort_select")
            arrow = "↓" if session.view.sort_direction == "desc" else "↑"
            label = f"Sort {arrow}" if sort_col and sort_col == session.view.sort_column else "Sort"
            if st.button(label, disabled=not sort_col):
                _run(session.sort_by(sort_col))
        with c3:
            session.view.show_stats = st.toggle("Stats", value=session.view.show_stats)

        if session.view.show_stats:
            show_column_stats_grid(session)

        visible = session.visible_rows()
        st.caption(f"{len(visible)} rows")
        preview = visible.head(PREVIEW_ROW_LIMIT).apply(lambda col: col.map(cell_text))
        st.dataframe(preview, use_container_width=True, hide_index=True)
        if len(visible) > PREVIEW_ROW_LIMIT:
            st.caption(f"Showing {PREVIEW_ROW_LIMIT} of {len(visible)} rows")

        st.divider()
        step4_export(session)
