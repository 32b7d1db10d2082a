"""Transactions and the undo-log structures used for versioning."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from .config import INVALID_LSN, INVALID_TS, INVALID_TXN_ID
from .defs import Value
from .txn_defs import IsolationLevel, LockDataId, TransactionState, WriteRecord


@dataclass(frozen=True)
class UndoLink:
    """Points to the previous version of a tuple inside some transaction's undo logs."""

    prev_txn: int = INVALID_TXN_ID
    prev_log_idx: int = 0

    def is_valid(self) -> bool:
        """Return True if the link points to a log."""
        return self.prev_txn != INVALID_TXN_ID


@dataclass
class UndoLog:
    """A previous version of a tuple."""

    is_deleted: bool = False
    modified_fields: list[bool] = field(default_factory=list)
    values: list[Value] = field(default_factory=list)
    record: bytes | None = None
    ts: int = INVALID_TS
    prev_version: UndoLink = field(default_factory=UndoLink)


@dataclass(frozen=True)
class VersionUndoLink:
    """The first link of a version chain, joining a heap tuple to its undo logs."""

    prev: UndoLink = field(default_factory=UndoLink)
    in_progress: bool = False

    @classmethod
    def from_optional_undo_link(cls, undo_link: UndoLink | None) -> VersionUndoLink | None:
        """Wrap an undo link, passing None through."""
        if undo_link is None:
            return None
        return cls(undo_link)


class Transaction:
    """State of one transaction: its writes, locks and undo logs."""

    def __init__(
        self,
        txn_id: int,
        isolation_level: IsolationLevel = IsolationLevel.SERIALIZABLE,
    ) -> None:
        self.txn_id = txn_id
        self.isolation_level = isolation_level
        self.state = TransactionState.DEFAULT
        self.txn_mode = False
        self.thread_id = threading.get_ident()
        self.prev_lsn = INVALID_LSN
        self.start_ts = INVALID_TS
        self.read_ts = 0
        self.commit_ts = INVALID_TS
        self.write_set: deque[WriteRecord] = deque()
        self.lock_set: set[LockDataId] = set()
        self.index_latch_page_set: deque[Any] = deque()
        self.index_deleted_page_set: deque[Any] = deque()
        self._undo_logs: list[UndoLog] = []
        self._latch = threading.Lock()

    def append_write_record(self, write_record: WriteRecord) -> None:
        self.write_set.append(write_record)

    def append_index_deleted_page(self, page: Any) -> None:
        self.index_deleted_page_set.append(page)

    def append_index_latch_page(self, page: Any) -> None:
        self.index_latch_page_set.append(page)

    def modify_undo_log(self, log_idx: int, new_log: UndoLog) -> None:
        """Replace an existing undo log in place."""
        with self._latch:
            self._undo_logs[log_idx] = new_log

    def append_undo_log(self, log: UndoLog) -> UndoLink:
        """Store an undo log and return the link that points to it."""
        with self._latch:
            self._undo_logs.append(log)
            return UndoLink(self.txn_id, len(self._undo_logs) - 1)

    def get_undo_log(self, log_id: int) -> UndoLog:
        with self._latch:
            return self._undo_logs[log_id]

    def undo_log_count(self) -> int:
        with self._latch:
            return len(self._undo_logs)

    def __repr__(self) -> str:
        return f"Transaction(txn_id={self.txn_id}, state={self.state.name})"