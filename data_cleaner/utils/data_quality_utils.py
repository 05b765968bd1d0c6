# Data quality calculations
import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Sequence

import pandas as pd

from ..constants import CASE_MIN_STRING_VALUES, CASE_PROBLEM_WEIGHT, SPACES_PROBLEM_WEIGHT
from .table_utils import align_table, coerce_float, is_missing, normalize_cell, row_keys

logger = logging.getLogger("data_cleaner.quality")

CRITICAL = "critical"
HIGH = "high"
MEDIUM = "medium"


@dataclass(frozen=True)
class Issue:
    type: str
    title: str
    count: int
    description: str


@dataclass
class AnalysisReport:
    total_rows: int
    total_columns: int
    issues: List[Issue] = field(default_factory=list)
    quality_score: int = 100

    def to_dict(self) -> Dict:
        return {
            "totalRows": self.total_rows,
            "totalColumns": self.total_columns,
            "issues": [asdict(issue) for issue in self.issues],
            "qualityScore": self.quality_score,
        }

    def issues_by_type(self) -> Dict[str, int]:
        counts = {CRITICAL: 0, HIGH: 0, MEDIUM: 0}
        for issue in self.issues:
            counts[issue.type] += 1
        return counts


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def count_duplicates(table: pd.DataFrame, headers: Sequence[str]) -> int:
    """Rows whose canonical key collides with an earlier row"""
    keys = row_keys(table, headers)
    return len(keys) - len(set(keys))


def calculate_data_quality_score(problem_cells: float, row_count: int, column_count: int) -> int:
    total_cells = row_count * column_count
    if total_cells == 0:
        return 100
    score = _round_half_up(100 - (problem_cells / total_cells) * 100)
    return max(0, min(100, score))


def analyze_table(table: pd.DataFrame, headers: Sequence[str]) -> AnalysisReport:
    """
    Heuristic data-quality scan. Issues come out as duplicates first, then per
    column in header order: missing values, inconsistent case, extra spaces.
    """
    headers = list(headers)
    aligned = align_table(table, headers)
    row_count = len(aligned)
    column_count = len(headers)

    report = AnalysisReport(total_rows=row_count, total_columns=column_count)
    problem_cells = 0

    duplicates = count_duplicates(aligned, headers)
    if duplicates > 0:
        report.issues.append(Issue(
            type=CRITICAL,
            title="Duplicate Rows Found",
            count=duplicates,
            description=f"{duplicates} duplicate rows detected",
        ))
        problem_cells += duplicates * column_count

    for header in headers:
        values = [normalize_cell(v) for v in aligned[header].tolist()]

        null_count = sum(1 for v in values if is_missing(v))
        if null_count > 0:
            report.issues.append(Issue(
                type=HIGH,
                title=f'Missing Values in "{header}"',
                count=null_count,
                description=f"{null_count} missing values ({null_count / row_count * 100:.1f}%)",
            ))
            problem_cells += null_count

        string_values = [v for v in values if isinstance(v, str) and len(v) > 0]

        # Heuristic: any all-caps value plus any all-lowercase value means mixed case
        has_upper = any(v == v.upper() and v != v.lower() for v in string_values)
        has_lower = any(v == v.lower() and v != v.upper() for v in string_values)
        if has_upper and has_lower and len(string_values) > CASE_MIN_STRING_VALUES:
            inconsistent_count = len(string_values)
            report.issues.append(Issue(
                type=MEDIUM,
                title=f'Inconsistent Case in "{header}"',
                count=inconsistent_count,
                description="Mixed uppercase and lowercase values found",
            ))
            problem_cells += math.floor(inconsistent_count * CASE_PROBLEM_WEIGHT)

        spaces_count = sum(1 for v in string_values if v != v.strip() or "  " in v)
        if spaces_count > 0:
            report.issues.append(Issue(
                type=MEDIUM,
                title=f'Extra Spaces in "{header}"',
                count=spaces_count,
                description="Leading, trailing, or double spaces detected",
            ))
            problem_cells += math.floor(spaces_count * SPACES_PROBLEM_WEIGHT)

    report.quality_score = calculate_data_quality_score(problem_cells, row_count, column_count)
    logger.info(
        "Analyzed %d rows x %d columns: %d issues, score %d",
        row_count, column_count, len(report.issues), report.quality_score,
    )
    return report


def column_stats(table: pd.DataFrame, column: str) -> Dict:
    """Count/unique for any column, plus min/max/avg when values parse as numbers"""
    if column not in table.columns:
        return {"count": 0, "unique": 0}

    values = [normalize_cell(v) for v in table[column].tolist()]
    values = [v for v in values if not is_missing(v)]
    numeric = [n for n in (coerce_float(v) for v in values) if n is not None]

    # Keep 1 and "1" apart the way the table does
    stats = {
        "count": len(values),
        "unique": len({(type(v).__name__, v) for v in values}),
    }
    if numeric:
        stats["min"] = min(numeric)
        stats["max"] = max(numeric)
        stats["avg"] = round(sum(numeric) / len(numeric), 2)
    return stats
