# Table model helpers
import json
import math
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..exceptions import TableError

Cell = Union[str, int, float, bool, None]

_FLOAT_PREFIX = re.compile(r"^[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")


# ---------------------------------------------------------------------
# Cell helpers
# ---------------------------------------------------------------------
def normalize_cell(value: Any) -> Cell:
    """Coerce a parsed value into one of str, int, float, bool or None."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, (pd.Timestamp, datetime)):
        if value.hour == 0 and value.minute == 0 and value.second == 0 and value.microsecond == 0:
            return value.strftime("%Y-%m-%d")
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def is_missing(value: Any) -> bool:
    """A cell is missing when it is null, NaN or the empty string."""
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value == ""


def cell_text(value: Any) -> str:
    """Render a cell the way it is shown to the user."""
    value = normalize_cell(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return str(value)


def coerce_float(value: Any) -> Optional[float]:
    """Parse the leading numeric part of a cell, or None when there is none."""
    value = normalize_cell(value)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _FLOAT_PREFIX.match(value.lstrip())
    if not match:
        return None
    text = match.group(0)
    if text.endswith("Infinity"):
        return -math.inf if text.startswith("-") else math.inf
    return float(text)


# ---------------------------------------------------------------------
# Table construction
# ---------------------------------------------------------------------
def make_table(rows: Iterable[Mapping[str, Any]], headers: Sequence[str]) -> pd.DataFrame:
    """Build an object-dtype table from row mappings in header order."""
    headers = list(headers)
    if len(set(headers)) != len(headers):
        raise TableError("Header list contains duplicate column names", {"headers": headers})

    header_set = set(headers)
    records = []
    for position, row in enumerate(rows):
        unknown = [key for key in row if key not in header_set]
        if unknown:
            raise TableError(
                f"Row {position} has columns missing from the header list: {', '.join(map(str, unknown))}",
                {"row": position, "columns": unknown},
            )
        records.append([normalize_cell(row.get(header)) for header in headers])

    return pd.DataFrame(records, columns=headers, dtype=object)


def frame_to_table(frame: pd.DataFrame) -> pd.DataFrame:
    """Convert a parsed DataFrame into a table with plain Python cells."""
    headers = [str(col) for col in frame.columns]
    if len(set(headers)) != len(headers):
        raise TableError("Header list contains duplicate column names", {"headers": headers})
    records = [
        [normalize_cell(value) for value in values]
        for values in frame.itertuples(index=False, name=None)
    ]
    return pd.DataFrame(records, columns=headers, dtype=object)


def align_table(table: pd.DataFrame, headers: Sequence[str]) -> pd.DataFrame:
    """Return a copy whose columns follow the header list; absent columns are empty."""
    aligned = table.copy(deep=True)
    for column in headers:
        if column not in aligned.columns:
            aligned[column] = empty_column(aligned)
    columns = list(headers) + [col for col in aligned.columns if col not in headers]
    return aligned[columns].reset_index(drop=True)


def empty_column(table: pd.DataFrame) -> pd.Series:
    return pd.Series([None] * len(table), index=table.index, dtype=object)


def map_column(table: pd.DataFrame, column: str, func: Callable[[Cell], Cell]) -> pd.Series:
    """Apply func to every cell of a column, keeping raw Python values."""
    return pd.Series([func(value) for value in table[column].tolist()], index=table.index, dtype=object)


def table_to_records(table: pd.DataFrame, headers: Sequence[str]) -> List[Dict[str, Cell]]:
    headers = list(headers)
    aligned = align_table(table, headers)
    return [
        dict(zip(headers, (normalize_cell(value) for value in values)))
        for values in aligned[headers].itertuples(index=False, name=None)
    ]


# ---------------------------------------------------------------------
# Row keys
# ---------------------------------------------------------------------
def row_key(values: Iterable[Any]) -> str:
    """Canonical serialization of a row's cells, taken in header order."""
    return json.dumps([normalize_cell(value) for value in values], ensure_ascii=False)


def row_keys(table: pd.DataFrame, headers: Sequence[str]) -> List[str]:
    aligned = align_table(table, headers)
    return [row_key(values) for values in aligned[list(headers)].itertuples(index=False, name=None)]
