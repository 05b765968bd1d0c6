# utils/state_utils.py
import streamlit as st

from ..session_state import CleaningSession


def initialize_session_state():
    """Initialize all session state variables"""
    defaults = {
        'cleaning_session': CleaningSession,
        'flash': None,
        'fill_value': '',
        'find_text': '',
        'replace_text': '',
        'split_delimiter': ',',
        'merge_separator': ' ',
    }

    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value() if callable(value) else value


def get_session() -> CleaningSession:
    """The CleaningSession owned by the current browser session"""
    if 'cleaning_session' not in st.session_state:
        initialize_session_state()
    return st.session_state.cleaning_session


def flash(ok: bool, message: str) -> None:
    """Keep an action's outcome so it can be shown after st.rerun()"""
    st.session_state.flash = (ok, message) if message else None


def show_flash() -> None:
    pending = st.session_state.get('flash')
    if not pending:
        return
    ok, message = pending
    if ok:
        st.success(message)
    else:
        st.warning(message)
    st.session_state.flash = None
