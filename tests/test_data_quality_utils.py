"""
Tests for data_cleaner/utils/data_quality_utils.py
"""
from data_cleaner.utils.data_quality_utils import (
    CRITICAL, HIGH, MEDIUM, analyze_table, calculate_data_quality_score,
    column_stats, count_duplicates,
)
from data_cleaner.utils.table_utils import make_table


def _analyze(rows, headers):
    return analyze_table(make_table(rows, headers), headers)


class TestQualityScore:
    def test_no_cells_scores_100(self):
        assert calculate_data_quality_score(0, 0, 3) == 100
        assert calculate_data_quality_score(5, 4, 0) == 100

    def test_rounds_half_up(self):
        # 100 - 37.5 = 62.5
        assert calculate_data_quality_score(6, 4, 4) == 63

    def test_clamped_to_zero(self):
        assert calculate_data_quality_score(50, 2, 2) == 0


class TestAnalyzeTable:
    """Issue detection, ordering and scoring."""

    def test_clean_table(self):
        report = _analyze([{"a": "x", "b": 1}, {"a": "y", "b": 2}], ["a", "b"])
        assert report.issues == []
        assert report.quality_score == 100
        assert report.total_rows == 2
        assert report.total_columns == 2

    def test_empty_table_scores_100(self):
        report = analyze_table(make_table([], ["a"]), ["a"])
        assert report.total_rows == 0
        assert report.quality_score == 100

    def test_duplicates(self):
        rows = [{"a": 1, "b": "x"}, {"a": 1, "b": "x"}, {"a": 2, "b": "y"}]
        report = _analyze(rows, ["a", "b"])
        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.type == CRITICAL
        assert issue.title == "Duplicate Rows Found"
        assert issue.count == 1
        assert issue.description == "1 duplicate rows detected"
        # 2 problem cells out of 6
        assert report.quality_score == 67

    def test_number_and_string_rows_are_not_duplicates(self):
        table = make_table([{"a": 1}, {"a": "1"}], ["a"])
        assert count_duplicates(table, ["a"]) == 0

    def test_missing_values(self):
        report = _analyze([{"city": ""}, {"city": None}, {"city": "NYC"}], ["city"])
        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.type == HIGH
        assert issue.title == 'Missing Values in "city"'
        assert issue.count == 2
        assert issue.description == "2 missing values (66.7%)"
        assert report.quality_score == 33

    def test_inconsistent_case_needs_more_than_five_strings(self):
        values = ["ABC", "abc", "Abc", "x", "y", "z"]
        report = _analyze([{"c": v} for v in values], ["c"])
        assert [i.title for i in report.issues] == ['Inconsistent Case in "c"']
        assert report.issues[0].type == MEDIUM
        assert report.issues[0].count == 6
        assert report.quality_score == 83

        report = _analyze([{"c": v} for v in values[:5]], ["c"])
        assert report.issues == []

    def test_extra_spaces(self):
        report = _analyze([{"c": " a"}, {"c": "b  c"}, {"c": "d"}], ["c"])
        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.title == 'Extra Spaces in "c"'
        assert issue.count == 2
        assert issue.description == "Leading, trailing, or double spaces detected"
        assert report.quality_score == 67

    def test_issue_order(self):
        rows = [
            {"name": "", "city": " x"},
            {"name": "", "city": " x"},
            {"name": "Al", "city": "y"},
        ]
        report = _analyze(rows, ["name", "city"])
        assert [i.title for i in report.issues] == [
            "Duplicate Rows Found",
            'Missing Values in "name"',
            'Extra Spaces in "city"',
        ]
        assert report.issues_by_type() == {CRITICAL: 1, HIGH: 1, MEDIUM: 1}
        assert report.quality_score == 17

    def test_score_never_negative(self):
        report = _analyze([{"a": ""} for _ in range(10)], ["a"])
        assert report.quality_score == 0

    def test_to_dict(self):
        report = _analyze([{"a": None}], ["a"])
        data = report.to_dict()
        assert data["totalRows"] == 1
        assert data["totalColumns"] == 1
        assert data["qualityScore"] == 0
        assert data["issues"][0]["type"] == HIGH


class TestColumnStats:
    def test_numeric_column(self):
        table = make_table([{"v": "1"}, {"v": 2}, {"v": "x"}, {"v": None}, {"v": ""}], ["v"])
        stats = column_stats(table, "v")
        assert stats["count"] == 3
        assert stats["unique"] == 3
        assert stats["min"] == 1
        assert stats["max"] == 2
        assert stats["avg"] == 1.5

    def test_text_column(self):
        table = make_table([{"v": "a"}, {"v": "a"}], ["v"])
        assert column_stats(table, "v") == {"count": 2, "unique": 1}

    def test_unknown_column(self):
        table = make_table([{"v": 1}], ["v"])
        assert column_stats(table, "nope") == {"count": 0, "unique": 0}
