"""Catalogue metadata for databases, tables, columns and indexes."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from .common import ColType
from .errors import ColumnNotFoundError, IndexNotFoundError, InternalError, TableNotFoundError


def _next(tokens: Iterator[str]) -> str:
    try:
        return next(tokens)
    except StopIteration:
        raise InternalError("Truncated metadata") from None


def _next_int(tokens: Iterator[str]) -> int:
    token = _next(tokens)
    try:
        return int(token)
    except ValueError:
        raise InternalError(f"Malformed metadata value: {token}") from None


@dataclass
class ColMeta:
    """Description of one column of a table."""

    tab_name: str
    name: str
    type: ColType
    len: int
    offset: int
    index: bool = False

    def __str__(self) -> str:
        return f"{self.tab_name} {self.name} {int(self.type)} {self.len} {self.offset} {int(self.index)}"

    @classmethod
    def _parse(cls, tokens: Iterator[str]) -> ColMeta:
        tab_name = _next(tokens)
        name = _next(tokens)
        try:
            col_type = ColType(_next_int(tokens))
        except ValueError:
            raise InternalError("Unknown column type in metadata") from None
        length = _next_int(tokens)
        offset = _next_int(tokens)
        index = bool(_next_int(tokens))
        return cls(tab_name, name, col_type, length, offset, index)


@dataclass
class IndexMeta:
    """Description of an index over one or more columns of a table."""

    tab_name: str
    col_tot_len: int
    col_num: int
    cols: list[ColMeta] = field(default_factory=list)

    def __str__(self) -> str:
        head = f"{self.tab_name} {self.col_tot_len} {self.col_num}"
        return head + "".join(f"\n{col}" for col in self.cols)

    @classmethod
    def _parse(cls, tokens: Iterator[str]) -> IndexMeta:
        tab_name = _next(tokens)
        col_tot_len = _next_int(tokens)
        col_num = _next_int(tokens)
        cols = [ColMeta._parse(tokens) for _ in range(col_num)]
        return cls(tab_name, col_tot_len, col_num, cols)

    def _matches(self, col_names: Sequence[str]) -> bool:
        names = list(col_names)
        return self.col_num == len(names) and [col.name for col in self.cols[: self.col_num]] == names


@dataclass
class TabMeta:
    """Columns and indexes of one table."""

    name: str = ""
    cols: list[ColMeta] = field(default_factory=list)
    indexes: list[IndexMeta] = field(default_factory=list)

    def is_col(self, col_name: str) -> bool:
        return any(col.name == col_name for col in self.cols)

    def is_index(self, col_names: Sequence[str]) -> bool:
        return any(index._matches(col_names) for index in self.indexes)

    def get_index_meta(self, col_names: Sequence[str]) -> IndexMeta:
        """Return the index over exactly ``col_names``, in that order."""
        for index in self.indexes:
            if index._matches(col_names):
                return index
        raise IndexNotFoundError(self.name, col_names)

    def get_col(self, col_name: str) -> ColMeta:
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
    def _parse(cls, tokens: Iterator[str]) -> TabMeta:
        name = _next(tokens)
        cols = [ColMeta._parse(tokens) for _ in range(_next_int(tokens))]
        indexes = [IndexMeta._parse(tokens) for _ in range(_next_int(tokens))]
        return cls(name, cols, indexes)


@dataclass
class DbMeta:
    """The catalogue of a database: its name and its tables."""

    name: str = ""
    tabs: dict[str, TabMeta] = field(default_factory=dict)

    def is_table(self, tab_name: str) -> bool:
        return tab_name in self.tabs

    def set_tab_meta(self, tab_name: str, meta: TabMeta) -> None:
        self.tabs[tab_name] = meta

    def get_table(self, tab_name: str) -> TabMeta:
        try:
            return self.tabs[tab_name]
        except KeyError:
            raise TableNotFoundError(tab_name) from None

    def sorted_tables(self) -> list[TabMeta]:
        """Tables ordered by name."""
        return [self.tabs[name] for name in sorted(self.tabs)]

    def dumps(self) -> str:
        """Serialise the catalogue to its text form."""
        parts = [f"{self.name}\n{len(self.tabs)}\n"]
        parts.extend(f"{tab}\n" for tab in self.sorted_tables())
        return "".join(parts)

    @classmethod
    def loads(cls, text: str) -> DbMeta:
        """Parse a catalogue from the text produced by :meth:`dumps`."""
        tokens = iter(text.split())
        name = _next(tokens)
        db = cls(name)
        for _ in range(_next_int(tokens)):
            tab = TabMeta._parse(tokens)
            db.tabs[tab.name] = tab
        return db