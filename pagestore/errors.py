"""Exception hierarchy for the storage engine."""

from __future__ import annotations

from collections.abc import Iterable


class RMDBError(Exception):
    """Base class of every error raised by the engine."""

    def __init__(self, msg: str = "") -> None:
        self.msg = "Error: " + msg
        super().__init__(self.msg)

    def __str__(self) -> str:
        return self.msg


class InternalError(RMDBError):
    """An unexpected internal condition."""


class UnixError(RMDBError):
    """A failing operating-system call."""

    def __init__(self, err: OSError | None = None) -> None:
        if err is None:
            text = "Unknown system error"
        elif err.strerror:
            text = err.strerror
        else:
            text = str(err)
        self.os_error = err
        super().__init__(text)


class FileNotOpenError(RMDBError):
    def __init__(self, fd: int) -> None:
        self.fd = fd
        super().__init__(f"Invalid file descriptor: {fd}")


class FileNotClosedError(RMDBError):
    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"File is opened: {filename}")


class FileExistsError(RMDBError):  # noqa: A001
    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"File already exists: {filename}")


class FileNotFoundError(RMDBError):  # noqa: A001
    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"File not found: {filename}")


class RecordNotFoundError(RMDBError):
    def __init__(self, page_no: int, slot_no: int) -> None:
        self.page_no = page_no
        self.slot_no = slot_no
        super().__init__(f"Record not found: ({page_no},{slot_no})")


class InvalidRecordSizeError(RMDBError):
    def __init__(self, record_size: int) -> None:
        self.record_size = record_size
        super().__init__(f"Invalid record size: {record_size}")


class InvalidColLengthError(RMDBError):
    def __init__(self, col_len: int) -> None:
        self.col_len = col_len
        super().__init__(f"Invalid column length: {col_len}")


class IndexEntryNotFoundError(RMDBError):
    def __init__(self) -> None:
        super().__init__("Index entry not found")


class DatabaseNotFoundError(RMDBError):
    def __init__(self, db_name: str) -> None:
        self.db_name = db_name
        super().__init__(f"Database not found: {db_name}")


class DatabaseExistsError(RMDBError):
    def __init__(self, db_name: str) -> None:
        self.db_name = db_name
        super().__init__(f"Database already exists: {db_name}")


class TableNotFoundError(RMDBError):
    def __init__(self, tab_name: str) -> None:
        self.tab_name = tab_name
        super().__init__(f"Table not found: {tab_name}")


class TableExistsError(RMDBError):
    def __init__(self, tab_name: str) -> None:
        self.tab_name = tab_name
        super().__init__(f"Table already exists: {tab_name}")


class ColumnNotFoundError(RMDBError):
    def __init__(self, col_name: str) -> None:
        self.col_name = col_name
        super().__init__(f"Column not found: {col_name}")


class IndexNotFoundError(RMDBError):
    def __init__(self, tab_name: str, col_names: Iterable[str]) -> None:
        self.tab_name = tab_name
        self.col_names = list(col_names)
        super().__init__(f"Index not found: {tab_name}.({', '.join(self.col_names)})")


class IndexExistsError(RMDBError):
    def __init__(self, tab_name: str, col_names: Iterable[str]) -> None:
        self.tab_name = tab_name
        self.col_names = list(col_names)
        super().__init__(f"Index already exists: {tab_name}.({', '.join(self.col_names)})")


class InvalidValueCountError(RMDBError):
    def __init__(self) -> None:
        super().__init__("Invalid value count")


class StringOverflowError(RMDBError):
    def __init__(self) -> None:
        super().__init__("String is too long")


class TypeNotExistsError(RMDBError):
    def __init__(self) -> None:
        super().__init__("Type not exists")


class IncompatibleTypeError(RMDBError):
    def __init__(self, lhs: str, rhs: str) -> None:
        self.lhs = lhs
        self.rhs = rhs
        super().__init__(f"Incompatible type error: lhs {lhs}, rhs {rhs}")


class AmbiguousColumnError(RMDBError):
    def __init__(self, col_name: str) -> None:
        self.col_name = col_name
        super().__init__(f"Ambiguous column: {col_name}")


class PageNotExistError(RMDBError):
    def __init__(self, table_name: str, page_no: int) -> None:
        self.table_name = table_name
        self.page_no = page_no
        super().__init__(f"Page {page_no} in table {table_name}not exits")