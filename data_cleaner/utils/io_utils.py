# File loading and export
import io
import json
import logging
from typing import List, Sequence, Tuple

import pandas as pd

from ..constants import CSV_ENCODINGS, EXCEL_SHEET_NAME
from ..exceptions import LoadError
from .table_utils import align_table, cell_text, frame_to_table, table_to_records

logger = logging.getLogger("data_cleaner.io")


# ---------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------
def _read_csv(data: bytes) -> pd.DataFrame:
    last_error = None
    for enc in CSV_ENCODINGS:
        try:
            return pd.read_csv(io.BytesIO(data), encoding=enc, keep_default_na=False, na_values=[""])
        except UnicodeDecodeError as e:
            last_error = e
            logger.debug("Could not decode CSV as %s", enc)
            continue
    raise LoadError("Could not read file with any encoding.", {"error": str(last_error)})


def read_table(data: bytes, filename: str) -> Tuple[pd.DataFrame, List[str]]:
    """Parse uploaded bytes into a table and its header list."""
    if not data:
        raise LoadError("The uploaded file is empty.", {"filename": filename})

    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    try:
        if extension in ("csv", "txt"):
            frame = _read_csv(data)
        elif extension == "xlsx":
            frame = pd.read_excel(
                io.BytesIO(data), sheet_name=0, engine="openpyxl", keep_default_na=False, na_values=[""]
            )
        else:
            raise LoadError(f"Unsupported file type '.{extension}'", {"filename": filename})
    except LoadError:
        raise
    except pd.errors.EmptyDataError as e:
        raise LoadError("The uploaded file is empty.", {"filename": filename}) from e
    except Exception as e:
        raise LoadError(f"Could not read {filename}: {e}", {"filename": filename}) from e

    if frame.empty:
        raise LoadError("The uploaded file has no data rows.", {"filename": filename})

    table = frame_to_table(frame)
    headers = [str(col) for col in table.columns]
    logger.info("Loaded %s: %d rows, %d columns", filename, len(table), len(headers))
    return table, headers


# ---------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------
def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def to_csv_text(table: pd.DataFrame, headers: Sequence[str]) -> str:
    """Header row plus one line per row, every field double-quoted."""
    headers = list(headers)
    aligned = align_table(table, headers)
    lines = [",".join(_quote(h) for h in headers)]
    for values in aligned[headers].itertuples(index=False, name=None):
        lines.append(",".join(_quote(cell_text(v)) for v in values))
    return "\n".join(lines)


def to_csv_bytes(table: pd.DataFrame, headers: Sequence[str]) -> bytes:
    return to_csv_text(table, headers).encode("utf-8")


def to_json_bytes(table: pd.DataFrame, headers: Sequence[str]) -> bytes:
    records = table_to_records(table, headers)
    return json.dumps(records, indent=2, ensure_ascii=False).encode("utf-8")


def to_excel_bytes(table: pd.DataFrame, headers: Sequence[str], sheet_name: str = EXCEL_SHEET_NAME) -> bytes:
    headers = list(headers)
    records = table_to_records(table, headers)
    frame = pd.DataFrame(records, columns=headers, dtype=object)

    excel_buf = io.BytesIO()
    with pd.ExcelWriter(excel_buf, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False, sheet_name=sheet_name)
    excel_buf.seek(0)
    return excel_buf.getvalue()


EXPORTERS = {
    "csv": to_csv_bytes,
    "json": to_json_bytes,
    "xlsx": to_excel_bytes,
}
