"""Core value types shared by the storage and query layers."""

from __future__ import annotations

import abc
import enum
import struct
from collections.abc import Iterator
from dataclasses import dataclass, field

from .errors import StringOverflowError


@dataclass(frozen=True)
class Rid:
    """Record identifier: page number and slot number."""

    page_no: int
    slot_no: int


class ColType(enum.IntEnum):
    TYPE_INT = 0
    TYPE_FLOAT = 1
    TYPE_STRING = 2


_COLTYPE_NAMES = {
    ColType.TYPE_INT: "INT",
    ColType.TYPE_FLOAT: "FLOAT",
    ColType.TYPE_STRING: "STRING",
}


def coltype2str(col_type: ColType) -> str:
    """Return the SQL name of a column type."""
    return _COLTYPE_NAMES[col_type]


class RecScan(abc.ABC):
    """Cursor over record identifiers."""

    @abc.abstractmethod
    def next(self) -> None:
        """Advance to the next record."""

    @abc.abstractmethod
    def is_end(self) -> bool:
        """Return True once the cursor is past the last record."""

    @abc.abstractmethod
    def rid(self) -> Rid:
        """Return the identifier of the current record."""

    def __iter__(self) -> Iterator[Rid]:
        while not self.is_end():
            yield self.rid()
            self.next()


@dataclass(frozen=True, order=True)
class TabCol:
    tab_name: str
    col_name: str


_INT = struct.Struct("<i")
_FLOAT = struct.Struct("<f")


@dataclass
class Value:
    """A typed literal, optionally serialised into a raw column buffer."""

    type: ColType | None = None
    int_val: int = 0
    float_val: float = 0.0
    str_val: str = ""
    raw: bytes | None = None

    def set_int(self, int_val: int) -> None:
        self.type = ColType.TYPE_INT
        self.int_val = int_val

    def set_float(self, float_val: float) -> None:
        self.type = ColType.TYPE_FLOAT
        self.float_val = float_val

    def set_str(self, str_val: str) -> None:
        self.type = ColType.TYPE_STRING
        self.str_val = str_val

    def init_raw(self, length: int) -> None:
        """Serialise the value into ``raw`` as a column of ``length`` bytes."""
        if self.raw is not None:
            raise ValueError("raw buffer already initialised")
        if self.type is ColType.TYPE_INT:
            if length != _INT.size:
                raise ValueError(f"int column must be {_INT.size} bytes, got {length}")
            self.raw = _INT.pack(self.int_val)
        elif self.type is ColType.TYPE_FLOAT:
            if length != _FLOAT.size:
                raise ValueError(f"float column must be {_FLOAT.size} bytes, got {length}")
            self.raw = _FLOAT.pack(self.float_val)
        elif self.type is ColType.TYPE_STRING:
            encoded = self.str_val.encode()
            if length < len(encoded):
                raise StringOverflowError()
            self.raw = encoded.ljust(length, b"\0")
        else:
            self.raw = bytes(length)


class CompOp(enum.IntEnum):
    OP_EQ = 0
    OP_NE = 1
    OP_LT = 2
    OP_GT = 3
    OP_LE = 4
    OP_GE = 5


@dataclass
class Condition:
    lhs_col: TabCol
    op: CompOp
    is_rhs_val: bool = False
    rhs_col: TabCol | None = None
    rhs_val: Value = field(default_factory=Value)


@dataclass
class SetClause:
    lhs: TabCol
    rhs: Value