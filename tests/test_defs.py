import struct

import pytest

from rmdbstore.defs import (
    ColType,
    CompOp,
    Condition,
    RecScan,
    Rid,
    SetClause,
    TabCol,
    Value,
    coltype2str,
)
from rmdbstore.errors import StringOverflowError


def test_rid_equality_and_hash():
    assert Rid(1, 2) == Rid(1, 2)
    assert Rid(1, 2) != Rid(2, 1)
    assert len({Rid(1, 2), Rid(1, 2), Rid(0, 0)}) == 2


def test_coltype2str():
    assert coltype2str(ColType.TYPE_INT) == "INT"
    assert coltype2str(ColType.TYPE_FLOAT) == "FLOAT"
    assert coltype2str(ColType.TYPE_STRING) == "STRING"


def test_tabcol_ordering():
    cols = [TabCol("b", "a"), TabCol("a", "z"), TabCol("a", "b")]
    assert sorted(cols) == [TabCol("a", "b"), TabCol("a", "z"), TabCol("b", "a")]


def test_value_setters_change_type():
    v = Value()
    v.set_int(5)
    assert (v.type, v.int_val) == (ColType.TYPE_INT, 5)
    v.set_str("hi")
    assert (v.type, v.str_val) == (ColType.TYPE_STRING, "hi")


def test_init_raw_int_round_trip():
    v = Value()
    v.set_int(-123456)
    v.init_raw(4)
    assert struct.unpack("<i", v.raw)[0] == -123456


def test_init_raw_float_round_trip():
    v = Value()
    v.set_float(1.5)
    v.init_raw(4)
    assert struct.unpack("<f", v.raw)[0] == 1.5


def test_init_raw_string_is_zero_padded():
    v = Value()
    v.set_str("abc")
    v.init_raw(6)
    assert v.raw == b"abc\0\0\0"
    assert len(v.raw) == 6


def test_init_raw_string_overflow():
    v = Value()
    v.set_str("abcdef")
    with pytest.raises(StringOverflowError):
        v.init_raw(3)


def test_init_raw_twice_rejected():
    v = Value()
    v.set_int(1)
    v.init_raw(4)
    with pytest.raises(ValueError):
        v.init_raw(4)


def test_init_raw_wrong_int_length():
    v = Value()
    v.set_int(1)
    with pytest.raises(ValueError):
        v.init_raw(8)


def test_condition_defaults_and_set_clause():
    cond = Condition(TabCol("t", "a"), CompOp.OP_LT)
    assert cond.is_rhs_val is False
    assert cond.rhs_col is None
    assert cond.rhs_val.raw is None
    clause = SetClause(TabCol("t", "a"), Value())
    assert clause.lhs.col_name == "a"


class _ListScan(RecScan):
    def __init__(self, rids):
        self._rids = list(rids)
        self._pos = 0

    def next(self):
        self._pos += 1

    def is_end(self):
        return self._pos >= len(self._rids)

    def rid(self):
        return self._rids[self._pos]


def test_recscan_iteration():
    rids = [Rid(1, 0), Rid(1, 3), Rid(2, 1)]
    assert list(_ListScan(rids)) == rids
    assert list(_ListScan([])) == []


def test_recscan_is_abstract():
    with pytest.raises(TypeError):
        RecScan()