# Cleaning transforms
# Every function returns a new table and leaves its input untouched.
import functools
import logging
import math
import re
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..constants import (
    CASE_MODES, EMAIL_PATTERN, OUTLIER_IQR_MULTIPLIER, OUTLIER_LOWER_QUANTILE,
    OUTLIER_UPPER_QUANTILE, PHONE_DIGITS,
)
from ..exceptions import ValidationError
from .table_utils import (
    Cell, align_table, cell_text, coerce_float, empty_column, is_missing,
    map_column, normalize_cell, row_keys,
)

logger = logging.getLogger("data_cleaner.transforms")

_WHITESPACE_RUN = re.compile(r"\s+")
_SPECIAL_CHARS = re.compile(r"[^a-zA-Z0-9\s]")
_DIGIT_RUN = re.compile(r"[0-9]+")
_DIGIT = re.compile(r"[0-9]")
_NON_DIGIT = re.compile(r"[^0-9]")
_EMAIL = re.compile(EMAIL_PATTERN)


def _copy(table: pd.DataFrame) -> pd.DataFrame:
    return table.copy(deep=True)


def _present(table: pd.DataFrame, columns: Sequence[str]) -> List[str]:
    return [col for col in columns if col in table.columns]


def _map_strings(table: pd.DataFrame, columns: Sequence[str], func) -> pd.DataFrame:
    result = _copy(table)
    for col in _present(result, columns):
        result[col] = map_column(result, col, lambda v: func(v) if isinstance(v, str) else v)
    return result


# ---------------------------------------------------------------------
# Whole-table operations
# ---------------------------------------------------------------------
def remove_duplicates(table: pd.DataFrame, headers: Sequence[str]) -> pd.DataFrame:
    """Keep the first occurrence of every row, preserving order."""
    seen = set()
    keep = []
    for key in row_keys(table, headers):
        keep.append(key not in seen)
        seen.add(key)
    return table.loc[keep].reset_index(drop=True).copy(deep=True)


def trim_spaces(table: pd.DataFrame, headers: Sequence[str]) -> pd.DataFrame:
    return _map_strings(table, headers, lambda v: _WHITESPACE_RUN.sub(" ", v.strip()))


# ---------------------------------------------------------------------
# Column-scoped text operations
# ---------------------------------------------------------------------
def _proper_case(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in value.lower().split(" "))


def change_case(table: pd.DataFrame, columns: Sequence[str], mode: str) -> pd.DataFrame:
    if mode not in CASE_MODES:
        raise ValidationError(f"Unknown case mode '{mode}'", {"mode": mode})
    if mode == "upper":
        return _map_strings(table, columns, str.upper)
    if mode == "lower":
        return _map_strings(table, columns, str.lower)
    return _map_strings(table, columns, _proper_case)


def find_replace(table: pd.DataFrame, columns: Sequence[str], find: str, replace: str = "") -> pd.DataFrame:
    """Literal, global substring replacement in string cells."""
    if find is None or find.strip() == "":
        raise ValidationError("Please enter text to find")
    replace = replace or ""
    return _map_strings(table, columns, lambda v: v.replace(find, replace))


def remove_special_characters(table: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    return _map_strings(table, columns, lambda v: _SPECIAL_CHARS.sub("", v))


def extract_numbers(table: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    return _map_strings(table, columns, lambda v: "".join(_DIGIT_RUN.findall(v)))


def extract_text(table: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    return _map_strings(table, columns, lambda v: _DIGIT.sub("", v))


def _format_phone(value: str) -> str:
    digits = _NON_DIGIT.sub("", value)
    if len(digits) != PHONE_DIGITS:
        return value
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def format_phone_numbers(table: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    return _map_strings(table, columns, _format_phone)


# ---------------------------------------------------------------------
# Missing values
# ---------------------------------------------------------------------
def remove_missing_rows(table: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """Drop rows with a missing cell, one column after another."""
    result = _copy(table)
    for col in columns:
        if col in result.columns:
            keep = [not is_missing(v) for v in result[col].tolist()]
        else:
            keep = [False] * len(result)
        result = result.loc[keep].reset_index(drop=True)
    return result


def fill_missing_values(table: pd.DataFrame, columns: Sequence[str], fill_value: str) -> pd.DataFrame:
    if fill_value is None or str(fill_value).strip() == "":
        raise ValidationError("Please enter a value to fill")
    result = _copy(table)
    for col in columns:
        if col not in result.columns:
            result[col] = empty_column(result)
        result[col] = map_column(result, col, lambda v: fill_value if is_missing(v) else v)
    return result


# ---------------------------------------------------------------------
# Column structure
# ---------------------------------------------------------------------
def split_column(
    table: pd.DataFrame, headers: Sequence[str], column: str, delimiter: str
) -> Tuple[pd.DataFrame, List[str]]:
    """
    Split a column into column_1, column_2, ... placed right after it.

    Only string cells are split; each part is trimmed. The number of new
    columns is the largest part count over all rows.
    """
    if not delimiter:
        raise ValidationError("Please enter a delimiter")
    if column not in headers:
        raise ValidationError(f"Column '{column}' not found", {"column": column})

    result = align_table(table, headers)
    split_values = [
        value.split(delimiter) if isinstance(value, str) else None
        for value in result[column].tolist()
    ]
    max_parts = max((len(parts) for parts in split_values if parts is not None), default=0)

    for idx in range(max_parts):
        name = f"{column}_{idx + 1}"
        if name not in result.columns:
            result[name] = empty_column(result)
        current = result[name].tolist()
        result[name] = pd.Series(
            [
                parts[idx].strip() if parts is not None and idx < len(parts) else current[row]
                for row, parts in enumerate(split_values)
            ],
            index=result.index,
            dtype=object,
        )

    new_headers = list(headers)
    insert_at = new_headers.index(column) + 1
    for idx in range(1, max_parts + 1):
        name = f"{column}_{idx}"
        if name not in new_headers:
            new_headers.insert(insert_at + idx - 1, name)

    return align_table(result, new_headers), new_headers


def merge_columns(
    table: pd.DataFrame, headers: Sequence[str], columns: Sequence[str], separator: str = " "
) -> Tuple[pd.DataFrame, List[str]]:
    """Join the chosen columns into one new column appended at the end."""
    if len(columns) < 2:
        raise ValidationError("Please select at least TWO columns to merge!")
    separator = separator if separator is not None else ""
    new_name = "_".join(columns)

    result = align_table(table, list(headers) + [c for c in columns if c not in headers])
    parts = [result[col].tolist() for col in columns]
    result[new_name] = pd.Series(
        [separator.join(cell_text(cell) for cell in row) for row in zip(*parts)],
        index=result.index,
        dtype=object,
    )

    new_headers = list(headers)
    if new_name not in new_headers:
        new_headers.append(new_name)
    return align_table(result, new_headers), new_headers


def drop_columns(
    table: pd.DataFrame, headers: Sequence[str], columns: Sequence[str]
) -> Tuple[pd.DataFrame, List[str]]:
    if not columns:
        raise ValidationError("Please select at least one column first!")
    new_headers = [h for h in headers if h not in columns]
    result = table.drop(columns=_present(table, columns)).copy(deep=True)
    return align_table(result, new_headers), new_headers


# ---------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------
def _parse_date(value: Cell) -> Cell:
    if is_missing(value) or isinstance(value, bool):
        return value
    try:
        parsed = pd.to_datetime(value, errors="coerce")
    except (ValueError, TypeError, OverflowError, pd.errors.OutOfBoundsDatetime) as e:
        logger.debug("Could not parse %r as a date: %s", value, e)
        return value
    if parsed is None or pd.isna(parsed):
        return value
    return parsed.strftime("%Y-%m-%d")


def format_dates(table: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """Rewrite parseable dates as YYYY-MM-DD; anything else stays as it was."""
    result = _copy(table)
    for col in _present(result, columns):
        result[col] = map_column(result, col, _parse_date)
    return result


# ---------------------------------------------------------------------
# Numeric checks
# ---------------------------------------------------------------------
def outlier_bounds(values: Sequence[Cell]) -> Optional[Tuple[float, float]]:
    """IQR fences using index-picked quartiles of the sorted numeric values"""
    numeric = np.sort(np.array([n for n in (coerce_float(v) for v in values) if n is not None], dtype=float))
    if numeric.size == 0:
        return None
    q1 = numeric[int(math.floor(numeric.size * OUTLIER_LOWER_QUANTILE))]
    q3 = numeric[int(math.floor(numeric.size * OUTLIER_UPPER_QUANTILE))]
    iqr = q3 - q1
    return float(q1 - OUTLIER_IQR_MULTIPLIER * iqr), float(q3 + OUTLIER_IQR_MULTIPLIER * iqr)


def remove_outliers(table: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """Blank every parseable value outside the IQR fences of its column."""
    result = _copy(table)
    for col in _present(result, columns):
        bounds = outlier_bounds(result[col].tolist())
        if bounds is None:
            continue
        lower, upper = bounds

        def _blank(value, lower=lower, upper=upper):
            number = coerce_float(value)
            if number is not None and (number < lower or number > upper):
                return ""
            return value

        result[col] = map_column(result, col, _blank)
    return result


def validate_emails(table: pd.DataFrame, columns: Sequence[str]) -> int:
    """Count non-empty cells that do not look like local@domain.tld"""
    invalid = 0
    for col in _present(table, columns):
        for value in table[col].tolist():
            value = normalize_cell(value)
            if is_missing(value):
                continue
            if not _EMAIL.match(cell_text(value)):
                invalid += 1
    return invalid


# ---------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------
def _as_number(value: Cell) -> Optional[float]:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0.0
        try:
            return float(text)
        except ValueError:
            return None
    return None


def compare_cells(a: Cell, b: Cell) -> int:
    """Relational comparison; incomparable pairs count as equal."""
    a, b = normalize_cell(a), normalize_cell(b)
    if isinstance(a, str) and isinstance(b, str):
        return (a > b) - (a < b)
    left, right = _as_number(a), _as_number(b)
    if left is None or right is None or math.isnan(left) or math.isnan(right):
        return 0
    return (left > right) - (left < right)


def sort_table(table: pd.DataFrame, column: str, descending: bool = False) -> pd.DataFrame:
    """Stable sort on one column."""
    if column not in table.columns:
        raise ValidationError(f"Column '{column}' not found", {"column": column})
    values = table[column].tolist()
    sign = -1 if descending else 1
    order = sorted(
        range(len(values)),
        key=functools.cmp_to_key(lambda i, j: sign * compare_cells(values[i], values[j])),
    )
    return table.iloc[order].reset_index(drop=True).copy(deep=True)
