"""Transaction states, write records, lock identifiers and abort errors."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .defs import Rid

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


def _to_int64(value: int) -> int:
    value &= _INT64_MASK
    return value - (1 << 64) if value & _INT64_SIGN else value


class TransactionState(enum.IntEnum):
    DEFAULT = 0
    GROWING = 1
    SHRINKING = 2
    COMMITTED = 3
    ABORTED = 4


class IsolationLevel(enum.IntEnum):
    READ_UNCOMMITTED = 0
    REPEATABLE_READ = 1
    READ_COMMITTED = 2
    SERIALIZABLE = 3


class WType(enum.IntEnum):
    """Kind of write performed by a transaction."""

    INSERT_TUPLE = 0
    DELETE_TUPLE = 1
    UPDATE_TUPLE = 2


@dataclass
class WriteRecord:
    """A write made by a transaction, kept so that it can be rolled back.

    Inserts carry only the record identifier; deletes and updates also carry
    the record image as it was before the write.
    """

    wtype: WType
    tab_name: str
    rid: Rid
    record: bytes | None = None


class LockDataType(enum.IntEnum):
    """Granularity of a lock."""

    TABLE = 0
    RECORD = 1


@dataclass(frozen=True)
class LockDataId:
    """Identifies the object a lock is held on: a whole table or one record."""

    fd: int
    rid: Rid
    type: LockDataType

    @classmethod
    def table(cls, fd: int) -> LockDataId:
        """Identifier of a table-level lock."""
        return cls(fd, Rid(-1, -1), LockDataType.TABLE)

    @classmethod
    def record(cls, fd: int, rid: Rid) -> LockDataId:
        """Identifier of a record-level lock."""
        return cls(fd, rid, LockDataType.RECORD)

    def key(self) -> int:
        """Pack the identifier into one signed 64-bit integer."""
        if self.type is LockDataType.TABLE:
            return _to_int64(self.fd)
        return _to_int64(
            (int(self.type) << 63)
            | (self.fd << 31)
            | (self.rid.page_no << 16)
            | self.rid.slot_no
        )


class AbortReason(enum.IntEnum):
    LOCK_ON_SHRINKING = 0
    UPGRADE_CONFLICT = 1
    DEADLOCK_PREVENTION = 2


_ABORT_TEMPLATES = {
    AbortReason.LOCK_ON_SHRINKING: (
        "Transaction {} aborted because it cannot request locks on SHRINKING phase\n"
    ),
    AbortReason.UPGRADE_CONFLICT: (
        "Transaction {} aborted because another transaction is waiting for upgrading\n"
    ),
    AbortReason.DEADLOCK_PREVENTION: "Transaction {} aborted for deadlock prevention\n",
}


class TransactionAbortException(Exception):
    """Raised when a transaction has to be rolled back."""

    def __init__(self, txn_id: int, abort_reason: AbortReason) -> None:
        self.txn_id = txn_id
        self.abort_reason = abort_reason
        super().__init__(self.info())

    def info(self) -> str:
        """Human-readable explanation of why the transaction was aborted."""
        template = _ABORT_TEMPLATES.get(self.abort_reason)
        if template is None:
            return "Transaction aborted\n"
        return template.format(self.txn_id)