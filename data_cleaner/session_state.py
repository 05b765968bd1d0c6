# Session controller
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .constants import EXPORT_LABELS, STEP_ANALYSIS, STEP_UPLOAD
from .exceptions import DataCleanerError
from .utils import transform_utils as tf
from .utils.data_quality_utils import AnalysisReport, analyze_table, column_stats
from .utils.history_utils import HistoryManager
from .utils.io_utils import EXPORTERS, read_table
from .utils.table_utils import align_table, cell_text, is_missing, make_table, table_to_records

logger = logging.getLogger("data_cleaner.session")

Result = Tuple[bool, str]

NEED_SELECTION = "Please select at least one column first!"
NEED_ONE_COLUMN = "Please select exactly ONE column to split!"
NEED_TWO_COLUMNS = "Please select at least TWO columns to merge!"
NO_DATA = "Please upload a dataset first!"


@dataclass
class ViewState:
    """View-only state. None of it takes part in undo/redo."""
    current_step: str = STEP_UPLOAD
    selected_columns: List[str] = field(default_factory=list)
    search_text: str = ""
    sort_column: Optional[str] = None
    sort_direction: str = "asc"
    dark_mode: bool = False
    show_stats: bool = False


class CleaningSession:
    """
    One user's cleaning session: the history of table snapshots, the header
    list and the view state. Every action returns (success, message); user
    mistakes come back as messages instead of exceptions.
    """

    def __init__(self):
        self.history = HistoryManager()
        self.headers: List[str] = []
        self.filename: Optional[str] = None
        self.analysis: Optional[AnalysisReport] = None
        self.view = ViewState()
        self._loads = 0

    # -----------------------------------------------------------------
    # State
    # -----------------------------------------------------------------
    @property
    def has_data(self) -> bool:
        return self.history.current_entry is not None

    @property
    def table(self) -> Optional[pd.DataFrame]:
        """Current snapshot with columns in header order."""
        current = self.history.current
        if current is None:
            return None
        return align_table(current, self.headers)

    def records(self) -> List[Dict[str, Any]]:
        if not self.has_data:
            return []
        return table_to_records(self.table, self.headers)

    # -----------------------------------------------------------------
    # Loading
    # -----------------------------------------------------------------
    def load_file(self, data: bytes, filename: str) -> Result:
        try:
            table, headers = read_table(data, filename)
        except DataCleanerError as e:
            logger.info("Load of %s rejected: %s", filename, e.message)
            return False, e.message
        return self._start(table, headers, filename)

    def load_table(self, rows: Iterable[Mapping[str, Any]], headers: Sequence[str], label: str = "dataset") -> Result:
        rows = list(rows)
        if not rows:
            return False, "The uploaded file has no data rows."
        try:
            table = make_table(rows, headers)
        except DataCleanerError as e:
            return False, e.message
        return self._start(table, list(headers), label)

    def _start(self, table: pd.DataFrame, headers: List[str], label: str) -> Result:
        self._loads += 1
        self.headers = list(headers)
        self.filename = label
        self.view = ViewState(dark_mode=self.view.dark_mode)
        self.history.start(table, f"Uploaded dataset: {label} ({len(table)} rows, {len(headers)} columns)")
        self.analyze()
        self.view.current_step = STEP_ANALYSIS
        return True, f"✅ Uploaded: {label}"

    def analyze(self) -> Optional[AnalysisReport]:
        """Recompute the quality report for the current table."""
        if not self.has_data:
            self.analysis = None
            return None
        self.analysis = analyze_table(self.table, self.headers)
        return self.analysis

    def reset(self) -> None:
        self.history.reset()
        self.headers = []
        self.filename = None
        self.analysis = None
        self.view = ViewState(dark_mode=self.view.dark_mode)

    # -----------------------------------------------------------------
    # Selection and view
    # -----------------------------------------------------------------
    def toggle_column(self, column: str) -> None:
        selected = self.view.selected_columns
        if column in selected:
            selected.remove(column)
        elif column in self.headers:
            selected.append(column)

    def select_columns(self, columns: Iterable[str]) -> None:
        chosen = []
        for col in columns:
            if col in self.headers and col not in chosen:
                chosen.append(col)
        self.view.selected_columns = chosen

    def clear_selection(self) -> None:
        self.view.selected_columns = []

    def set_search(self, text: str) -> None:
        self.view.search_text = text or ""

    def toggle_dark_mode(self) -> bool:
        self.view.dark_mode = not self.view.dark_mode
        return self.view.dark_mode

    def go_to(self, step: str) -> Result:
        if step != STEP_UPLOAD and not self.has_data:
            return False, NO_DATA
        if step == STEP_ANALYSIS:
            self.analyze()
        self.view.current_step = step
        return True, ""

    def _sync_selection(self) -> None:
        self.view.selected_columns = [c for c in self.view.selected_columns if c in self.headers]
        if self.view.sort_column not in self.headers:
            self.view.sort_column = None
            self.view.sort_direction = "asc"

    def visible_rows(self) -> pd.DataFrame:
        """Rows matching the search text (case-insensitive, any cell)."""
        table = self.table
        if table is None:
            return pd.DataFrame(columns=self.headers, dtype=object)
        query = self.view.search_text.lower()
        if not query:
            return table
        mask = [
            any(not is_missing(value) and query in cell_text(value).lower() for value in values)
            for values in table.itertuples(index=False, name=None)
        ]
        return table.loc[mask]

    def column_stats(self, column: str) -> Dict:
        if not self.has_data:
            return {"count": 0, "unique": 0}
        return column_stats(self.table, column)

    # -----------------------------------------------------------------
    # Operation plumbing
    # -----------------------------------------------------------------
    def _check_selection(self, minimum: int = 1, exact: Optional[int] = None) -> Optional[str]:
        count = len(self.view.selected_columns)
        if exact is not None and count != exact:
            return NEED_ONE_COLUMN if exact == 1 else NEED_SELECTION
        if count < minimum:
            return NEED_TWO_COLUMNS if minimum == 2 else NEED_SELECTION
        return None

    def _apply(self, transform: Callable[[pd.DataFrame], Any], describe: Callable[[pd.DataFrame, pd.DataFrame], str]) -> Result:
        if not self.has_data:
            return False, NO_DATA
        before = self.table
        try:
            outcome = transform(before)
        except DataCleanerError as e:
            logger.info("Operation rejected: %s", e.message)
            return False, e.message

        if isinstance(outcome, tuple):
            after, headers = outcome
            self.headers = list(headers)
            self._sync_selection()
        else:
            after = outcome
        message = describe(before, after)
        self.history.commit(after, message)
        return True, message

    def _scoped(self, transform: Callable, describe: Callable[[pd.DataFrame, pd.DataFrame], str], *args) -> Result:
        problem = self._check_selection()
        if problem:
            return False, problem
        columns = list(self.view.selected_columns)
        return self._apply(lambda t: transform(t, columns, *args), describe)

    def _n_cols(self) -> str:
        return f"{len(self.view.selected_columns)} column(s)"

    # -----------------------------------------------------------------
    # Operations
    # -----------------------------------------------------------------
    def remove_duplicates(self) -> Result:
        return self._apply(
            lambda t: tf.remove_duplicates(t, self.headers),
            lambda b, a: f"Removed {len(b) - len(a)} duplicate rows",
        )

    def trim_spaces(self) -> Result:
        return self._apply(
            lambda t: tf.trim_spaces(t, self.headers),
            lambda b, a: "Trimmed spaces in all columns",
        )

    def change_case(self, mode: str) -> Result:
        names = ", ".join(f'"{c}"' for c in self.view.selected_columns)
        return self._scoped(tf.change_case, lambda b, a: f"Changed case to {mode} in {names}", mode)

    def remove_missing_rows(self) -> Result:
        names = ", ".join(f'"{c}"' for c in self.view.selected_columns)
        return self._scoped(
            tf.remove_missing_rows,
            lambda b, a: f"Removed {len(b) - len(a)} rows with missing values in {names}",
        )

    def fill_missing(self, fill_value: str) -> Result:
        names = ", ".join(f'"{c}"' for c in self.view.selected_columns)
        return self._scoped(
            tf.fill_missing_values,
            lambda b, a: f'Filled missing values in {names} with "{fill_value}"',
            fill_value,
        )

    def find_replace(self, find: str, replace: str = "") -> Result:
        return self._scoped(
            tf.find_replace,
            lambda b, a: f'Replaced "{find}" with "{replace}" in {self._n_cols()}',
            find, replace,
        )

    def remove_special_characters(self) -> Result:
        return self._scoped(
            tf.remove_special_characters,
            lambda b, a: f"Removed special characters from {self._n_cols()}",
        )

    def extract_numbers(self) -> Result:
        return self._scoped(tf.extract_numbers, lambda b, a: f"Extracted numbers from {self._n_cols()}")

    def extract_text(self) -> Result:
        return self._scoped(tf.extract_text, lambda b, a: f"Extracted text from {self._n_cols()}")

    def split_column(self, delimiter: str) -> Result:
        problem = self._check_selection(exact=1)
        if problem:
            return False, problem
        column = self.view.selected_columns[0]
        return self._apply(
            lambda t: tf.split_column(t, self.headers, column, delimiter),
            lambda b, a: f'Split column "{column}" by delimiter "{delimiter}"',
        )

    def merge_columns(self, separator: str = " ") -> Result:
        problem = self._check_selection(minimum=2)
        if problem:
            return False, problem
        columns = list(self.view.selected_columns)
        return self._apply(
            lambda t: tf.merge_columns(t, self.headers, columns, separator),
            lambda b, a: f'Merged {len(columns)} columns into "{"_".join(columns)}"',
        )

    def drop_columns(self) -> Result:
        problem = self._check_selection()
        if problem:
            return False, problem
        columns = list(self.view.selected_columns)
        return self._apply(
            lambda t: tf.drop_columns(t, self.headers, columns),
            lambda b, a: f"Dropped {len(columns)} column(s): {', '.join(columns)}",
        )

    def format_dates(self) -> Result:
        return self._scoped(
            tf.format_dates,
            lambda b, a: f"Formatted dates in {self._n_cols()} to YYYY-MM-DD",
        )

    def remove_outliers(self) -> Result:
        return self._scoped(tf.remove_outliers, lambda b, a: f"Removed outliers from {self._n_cols()}")

    def format_phone_numbers(self) -> Result:
        return self._scoped(tf.format_phone_numbers, lambda b, a: f"Formatted phone numbers in {self._n_cols()}")

    def validate_emails(self) -> Result:
        """Read-only: reports a count and logs it, nothing enters history."""
        if not self.has_data:
            return False, NO_DATA
        problem = self._check_selection()
        if problem:
            return False, problem
        invalid = tf.validate_emails(self.table, self.view.selected_columns)
        self.history.log(f"Validated {self._n_cols()} for email format")
        return True, f"Found {invalid} invalid email(s) in selected column(s)"

    def sort_by(self, column: str) -> Result:
        if column not in self.headers:
            return False, f"Column '{column}' not found"
        same = self.view.sort_column == column and self.view.sort_direction == "asc"
        direction = "desc" if same else "asc"
        ok, message = self._apply(
            lambda t: tf.sort_table(t, column, descending=direction == "desc"),
            lambda b, a: f'Sorted by "{column}" ({direction})',
        )
        if ok:
            self.view.sort_column = column
            self.view.sort_direction = direction
        return ok, message

    # -----------------------------------------------------------------
    # History
    # -----------------------------------------------------------------
    def _restore_snapshot_columns(self) -> None:
        """Every column of the current snapshot must stay in the header list."""
        entry = self.history.current_entry
        if entry is None:
            return
        missing = [col for col in entry.table.columns if col not in self.headers]
        if missing:
            self.headers.extend(missing)
            logger.info("Restored columns from history: %s", ", ".join(missing))

    def undo(self) -> Result:
        if self.history.undo():
            self._restore_snapshot_columns()
            return True, "Undo: Reverted last change"
        return False, "No more steps to undo."

    def redo(self) -> Result:
        if self.history.redo():
            self._restore_snapshot_columns()
            return True, "Redo: Reapplied change"
        return False, "Nothing to redo."

    def revert_to(self, entry_id: int) -> Result:
        try:
            entry = self.history.revert_to(entry_id)
        except DataCleanerError as e:
            return False, e.message
        self._restore_snapshot_columns()
        return True, f"Reverted to step #{entry.id}: {entry.label}"

    # -----------------------------------------------------------------
    # Export
    # -----------------------------------------------------------------
    def export(self, fmt: str) -> bytes:
        """Serialize the current table; fmt is one of csv, json, xlsx."""
        if fmt not in EXPORTERS:
            raise ValueError(f"Unknown export format '{fmt}'")
        if not self.has_data:
            raise ValueError(NO_DATA)
        payload = EXPORTERS[fmt](self.table, self.headers)
        self.history.log(f"Exported to {EXPORT_LABELS[fmt]}")
        return payload

    def export_key(self, fmt: str) -> Optional[Tuple]:
        """Changes whenever export(fmt) would produce different bytes."""
        entry = self.history.current_entry
        if entry is None:
            return None
        return fmt, self._loads, entry.id, tuple(self.headers)
