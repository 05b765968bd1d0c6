"""
Tests for data_cleaner/utils/history_utils.py
"""
import pytest

from data_cleaner.exceptions import HistoryError
from data_cleaner.utils.history_utils import NO_ENTRY, HistoryManager, LogEntry
from data_cleaner.utils.table_utils import make_table


def _t(value):
    return make_table([{"v": value}], ["v"])


def _current_value(history):
    return history.current["v"].tolist()[0]


@pytest.fixture
def history():
    h = HistoryManager()
    h.start(_t(0), "Uploaded dataset: t.csv (1 rows, 1 columns)")
    return h


class TestStart:
    def test_empty_manager(self):
        h = HistoryManager()
        assert h.index == NO_ENTRY
        assert h.current is None
        assert not h.can_undo
        assert not h.can_redo
        assert h.undo() is False
        assert h.redo() is False

    def test_start_has_one_entry(self, history):
        assert len(history) == 1
        assert history.index == 0
        assert not history.can_undo
        assert [e.message for e in history.log_entries] == ["Uploaded dataset: t.csv (1 rows, 1 columns)"]

    def test_start_replaces_previous_history(self, history):
        history.commit(_t(1), "one")
        history.start(_t(9), "again")
        assert len(history) == 1
        assert _current_value(history) == 9
        assert len(history.log_entries) == 1


class TestUndoRedo:
    def test_commit_undo_redo(self, history):
        history.commit(_t(1), "one")
        history.commit(_t(2), "two")
        assert _current_value(history) == 2

        assert history.undo() is True
        assert _current_value(history) == 1
        assert history.can_redo

        assert history.redo() is True
        assert _current_value(history) == 2
        assert not history.can_redo

    def test_undo_stops_at_load(self, history):
        history.commit(_t(1), "one")
        assert history.undo() is True
        assert history.undo() is False
        assert history.index == 0

    def test_commit_after_undo_discards_redo_tail(self, history):
        for i in (1, 2, 3):
            history.commit(_t(i), f"step {i}")
        history.undo()
        history.commit(_t(99), "new")
        assert len(history) == 4
        assert not history.can_redo
        assert history.redo() is False
        assert [e.label for e in history.entries][-2:] == ["step 2", "new"]

    def test_commits_undos_redos(self):
        for n in range(1, 4):
            for u in range(n + 1):
                for r in range(u + 1):
                    h = HistoryManager()
                    h.start(_t(0), "load")
                    for i in range(1, n + 1):
                        h.commit(_t(i), f"c{i}")
                    for _ in range(u):
                        h.undo()
                    for _ in range(r):
                        h.redo()
                    assert _current_value(h) == n - u + r

    def test_index_stays_in_range(self, history):
        moves = ["c", "u", "u", "u", "r", "c", "r", "u", "c", "c", "u", "r", "r"]
        for n, move in enumerate(moves):
            if move == "c":
                history.commit(_t(n), f"c{n}")
            elif move == "u":
                history.undo()
            else:
                history.redo()
            assert 0 <= history.index < len(history)

    def test_log_is_append_only(self, history):
        history.commit(_t(1), "one")
        history.undo()
        history.redo()
        history.undo()
        history.commit(_t(2), "two")
        assert [e.message for e in history.log_entries][1:] == [
            "one",
            "Undo: Reverted last change",
            "Redo: Reapplied change",
            "Undo: Reverted last change",
            "two",
        ]

    def test_failed_undo_is_not_logged(self, history):
        history.undo()
        assert len(history.log_entries) == 1


class TestSnapshots:
    def test_current_is_a_copy(self, history):
        table = history.current
        table.loc[0, "v"] = "changed"
        assert _current_value(history) == 0

    def test_committed_table_is_copied(self, history):
        table = _t(1)
        history.commit(table, "one")
        table.loc[0, "v"] = "changed"
        assert _current_value(history) == 1


class TestRevertTo:
    def test_revert_keeps_later_entries_redoable(self, history):
        first = history.entries[0]
        history.commit(_t(1), "one")
        history.commit(_t(2), "two")

        entry = history.revert_to(first.id)
        assert entry is first
        assert history.index == 0
        assert history.can_redo
        assert history.log_entries[-1].message.startswith(f"Reverted to step #{first.id}")

        history.redo()
        assert _current_value(history) == 1

    def test_unknown_entry(self, history):
        with pytest.raises(HistoryError):
            history.revert_to(12345)

    def test_cannot_revert_forward(self, history):
        history.commit(_t(1), "one")
        later = history.entries[-1]
        history.undo()
        with pytest.raises(HistoryError):
            history.revert_to(later.id)


class TestLog:
    def test_log_entry_format(self):
        assert str(LogEntry(timestamp="10:00:00", message="hi")) == "[10:00:00] hi"

    def test_export_log(self, history):
        history.commit(_t(1), "one")
        lines = history.export_log().split("\n")
        assert len(lines) == 2
        assert lines[1].endswith("] one")

    def test_reset(self, history):
        history.reset()
        assert len(history) == 0
        assert history.current is None
        assert history.log_entries == []
