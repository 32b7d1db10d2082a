"""Catalogue metadata: columns, indexes, tables and databases.

Metadata is stored as whitespace-separated text; every class renders itself
with ``str()`` and :class:`DbMeta` reads the whole catalogue back with
:meth:`DbMeta.loads`.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from .defs import ColType
from .errors import ColumnNotFoundError, IndexNotFoundError, TableNotFoundError


class _Tokens:
    """Sequential reader over the whitespace-separated words of a text."""

    def __init__(self, text: str) -> None:
        self._words: Iterator[str] = iter(text.split())

    def word(self) -> str:
        try:
            return next(self._words)
        except StopIteration:
            raise ValueError("unexpected end of metadata") from None

    def integer(self) -> int:
        token = self.word()
        try:
            return int(token)
        except ValueError:
            raise ValueError(f"expected an integer in metadata, got {token!r}") from None

    def boolean(self) -> bool:
        value = self.integer()
        if value not in (0, 1):
            raise ValueError(f"expected 0 or 1 in metadata, got {value}")
        return bool(value)


@dataclass
class ColMeta:
    """A column of a table."""

    tab_name: str
    name: str
    type: ColType
    len: int
    offset: int
    index: bool = False

    def __str__(self) -> str:
        return (
            f"{self.tab_name} {self.name} {int(self.type)} {self.len} "
            f"{self.offset} {int(self.index)}"
        )

    @classmethod
    def _read(cls, tokens: _Tokens) -> ColMeta:
        return cls(
            tab_name=tokens.word(),
            name=tokens.word(),
            type=ColType(tokens.integer()),
            len=tokens.integer(),
            offset=tokens.integer(),
            index=tokens.boolean(),
        )


@dataclass
class IndexMeta:
    """An index over one or more columns of a table."""

    tab_name: str
    col_tot_len: int
    col_num: int
    cols: list[ColMeta] = field(default_factory=list)

    def __str__(self) -> str:
        head = f"{self.tab_name} {self.col_tot_len} {self.col_num}"
        return "".join([head, *(f"\n{col}" for col in self.cols)])

    def _matches(self, col_names: Sequence[str]) -> bool:
        return self.col_num == len(col_names) and all(
            col.name == name for col, name in zip(self.cols, col_names)
        )

    @classmethod
    def _read(cls, tokens: _Tokens) -> IndexMeta:
        tab_name = tokens.word()
        col_tot_len = tokens.integer()
        col_num = tokens.integer()
        cols = [ColMeta._read(tokens) for _ in range(col_num)]
        return cls(tab_name, col_tot_len, col_num, cols)


@dataclass
class TabMeta:
    """A table: its columns and the indexes built on it."""

    name: str = ""
    cols: list[ColMeta] = field(default_factory=list)
    indexes: list[IndexMeta] = field(default_factory=list)

    def is_col(self, col_name: str) -> bool:
        """Return True if the table has a column named ``col_name``."""
        return any(col.name == col_name for col in self.cols)

    def is_index(self, col_names: Sequence[str]) -> bool:
        """Return True if an index on exactly ``col_names``, in order, exists."""
        return any(index._matches(col_names) for index in self.indexes)

    def get_index_meta(self, col_names: Sequence[str]) -> IndexMeta:
        """Return the index on exactly ``col_names``, in order."""
        for index in self.indexes:
            if index._matches(col_names):
                return index
        raise IndexNotFoundError(self.name, col_names)

    def get_col(self, col_name: str) -> ColMeta:
        """Return the column named ``col_name``."""
        for col in self.cols:
            if col.name == col_name:
                return col
        raise ColumnNotFoundError(col_name)

    def __str__(self) -> str:
        parts = [f"{self.name}\n{len(self.cols)}\n"]
        parts.extend(f"{col}\n" for col in self.cols)
        parts.append(f"{len(self.indexes)}\n")
        parts.extend(f"{index}\n" for index in self.indexes)
        return "".join(parts)

    @classmethod
    def _read(cls, tokens: _Tokens) -> TabMeta:
        name = tokens.word()
        cols = [ColMeta._read(tokens) for _ in range(tokens.integer())]
        indexes = [IndexMeta._read(tokens) for _ in range(tokens.integer())]
        return cls(name, cols, indexes)


@dataclass
class DbMeta:
    """A database: its name and its tables, kept in name order when written."""

    name: str = ""
    tabs: dict[str, TabMeta] = field(default_factory=dict)

    def is_table(self, tab_name: str) -> bool:
        return tab_name in self.tabs

    def set_table(self, tab_name: str, meta: TabMeta) -> None:
        self.tabs[tab_name] = meta

    def get_table(self, tab_name: str) -> TabMeta:
        """Return the table named ``tab_name``."""
        try:
            return self.tabs[tab_name]
        except KeyError:
            raise TableNotFoundError(tab_name) from None

    def dumps(self) -> str:
        """Render the catalogue in its on-disk text form."""
        parts = [f"{self.name}\n{len(self.tabs)}\n"]
        parts.extend(f"{self.tabs[key]}\n" for key in sorted(self.tabs))
        return "".join(parts)

    __str__ = dumps

    @classmethod
    def loads(cls, text: str) -> DbMeta:
        """Parse a catalogue written by :meth:`dumps`."""
        tokens = _Tokens(text)
        name = tokens.word()
        tabs: dict[str, TabMeta] = {}
        for _ in range(tokens.integer()):
            tab = TabMeta._read(tokens)
            tabs[tab.name] = tab
        return cls(name, tabs)