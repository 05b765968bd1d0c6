# History and undo/redo
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

import pandas as pd

from ..exceptions import HistoryError

logger = logging.getLogger("data_cleaner.history")

NO_ENTRY = -1


# ---------------------------------------------------------------------
# Time utilities
# ---------------------------------------------------------------------
def _now_str() -> str:
    return datetime.now().strftime("%H:%M:%S")


@dataclass(frozen=True, eq=False)
class HistoryEntry:
    id: int
    label: str
    time: str
    table: pd.DataFrame


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    message: str

    def __str__(self) -> str:
        return f"[{self.timestamp}] {self.message}"


class HistoryManager:
    """
    Linear undo/redo over table snapshots.

    Committing after an undo discards the redo tail. The cleaning log is
    append-only: undo and redo add entries, they never remove any.
    """

    def __init__(self):
        self._entries: List[HistoryEntry] = []
        self._index: int = NO_ENTRY
        self._log: List[LogEntry] = []
        self._seq: int = 0

    # -----------------------------------------------------------------
    # State
    # -----------------------------------------------------------------
    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def log_entries(self) -> List[LogEntry]:
        return list(self._log)

    @property
    def current(self) -> Optional[pd.DataFrame]:
        """Copy of the table shown right now, or None before any load."""
        if self._index == NO_ENTRY:
            return None
        return self._entries[self._index].table.copy(deep=True)

    @property
    def current_entry(self) -> Optional[HistoryEntry]:
        if self._index == NO_ENTRY:
            return None
        return self._entries[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index != NO_ENTRY and self._index < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    # -----------------------------------------------------------------
    # Transitions
    # -----------------------------------------------------------------
    def _snapshot(self, table: pd.DataFrame, label: str) -> HistoryEntry:
        self._seq += 1
        return HistoryEntry(id=self._seq, label=label, time=_now_str(), table=table.copy(deep=True))

    def log(self, message: str) -> LogEntry:
        entry = LogEntry(timestamp=_now_str(), message=message)
        self._log.append(entry)
        return entry

    def start(self, table: pd.DataFrame, label: str) -> None:
        """Begin a new history with the freshly loaded table as its only entry."""
        self.reset()
        self._entries.append(self._snapshot(table, label))
        self._index = 0
        self.log(label)
        logger.info("History started: %s (%d rows)", label, len(table))

    def commit(self, table: pd.DataFrame, label: str) -> HistoryEntry:
        """Append a snapshot after the current entry, dropping any redo tail."""
        dropped = len(self._entries) - (self._index + 1)
        del self._entries[self._index + 1:]
        entry = self._snapshot(table, label)
        self._entries.append(entry)
        self._index = len(self._entries) - 1
        self.log(label)
        logger.info("Committed #%d %s (discarded %d redo entries)", entry.id, label, dropped)
        return entry

    def undo(self) -> bool:
        if self._index <= 0:
            return False
        self._index -= 1
        self.log("Undo: Reverted last change")
        logger.info("Undo -> entry %d of %d", self._index + 1, len(self._entries))
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self._index += 1
        self.log("Redo: Reapplied change")
        logger.info("Redo -> entry %d of %d", self._index + 1, len(self._entries))
        return True

    def revert_to(self, entry_id: int) -> HistoryEntry:
        """Move back to an earlier entry; later entries stay redoable."""
        ids = [entry.id for entry in self._entries]
        if entry_id not in ids:
            raise HistoryError("Selected action not found in history.", {"entry_id": entry_id})
        position = ids.index(entry_id)
        if position > self._index:
            raise HistoryError("Can only revert to an earlier step. Use redo instead.", {"entry_id": entry_id})
        steps = self._index - position
        self._index = position
        entry = self._entries[position]
        self.log(f"Reverted to step #{entry.id}: {entry.label} ({steps} steps)")
        logger.info("Reverted %d steps to #%d", steps, entry.id)
        return entry

    def reset(self) -> None:
        self._entries = []
        self._index = NO_ENTRY
        self._log = []
        self._seq = 0

    def export_log(self) -> str:
        return "\n".join(str(entry) for entry in self._log)
