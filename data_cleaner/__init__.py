"""
Data Cleaning Tool

An interactive tabular-data cleaning tool built with Streamlit: load a
spreadsheet, get an automatic quality assessment, apply cleaning steps with
full undo/redo, then export the result.

Structure:
- main.py: Main entry point and navigation
- session_state.py: Session controller and view state
- utils/: Table model, quality analysis, transforms, history, file I/O
- components/: Reusable UI components
- steps/: Upload, analysis and cleaning screens
"""

__version__ = "1.0.0"

# Export engine components
from .session_state import CleaningSession, ViewState
from .exceptions import DataCleanerError, ValidationError, LoadError, TableError, HistoryError

# Export utilities
from .utils.history_utils import HistoryManager, HistoryEntry, LogEntry
from .utils.data_quality_utils import AnalysisReport, Issue, analyze_table, column_stats
from .utils.table_utils import make_table, table_to_records, is_missing
from .utils.io_utils import read_table, to_csv_bytes, to_json_bytes, to_excel_bytes
from .utils.transform_utils import (
    remove_duplicates, trim_spaces, change_case, remove_missing_rows,
    fill_missing_values, find_replace, remove_special_characters,
    extract_numbers, extract_text, split_column, merge_columns, drop_columns,
    format_dates, remove_outliers, validate_emails, format_phone_numbers,
    sort_table,
)
