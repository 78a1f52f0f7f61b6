"""Shared constants and value types."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

from .errors import InternalError, StringOverflowError, TypeNotExistsError

BUFFER_LENGTH = 8192

INVALID_FRAME_ID = -1
INVALID_PAGE_ID = -1
INVALID_TXN_ID = -1
INVALID_TIMESTAMP = -1
INVALID_LSN = -1
HEADER_PAGE_ID = 0
PAGE_SIZE = 4096
BUFFER_POOL_SIZE = 65536
LOG_BUFFER_SIZE = 1024 * PAGE_SIZE
BUCKET_SIZE = 50

LOG_FILE_NAME = "db.log"
REPLACER_TYPE = "LRU"
DB_META_NAME = "db.meta"

_INT = struct.Struct("<i")
_FLOAT = struct.Struct("<f")


@dataclass(frozen=True)
class Rid:
    """Location of a record: page number and slot number."""

    page_no: int
    slot_no: int


class ColType(IntEnum):
    INT = 0
    FLOAT = 1
    STRING = 2


_COLTYPE_NAMES = {ColType.INT: "INT", ColType.FLOAT: "FLOAT", ColType.STRING: "STRING"}


def coltype2str(col_type: ColType | int) -> str:
    """Return the SQL name of a column type."""
    return _COLTYPE_NAMES[ColType(col_type)]


@dataclass(frozen=True, order=True)
class TabCol:
    tab_name: str
    col_name: str


@dataclass
class Value:
    """A typed literal, with an optional fixed-width encoding in ``raw``."""

    type: ColType | None = None
    int_val: int = 0
    float_val: float = 0.0
    str_val: str = ""
    raw: bytes | None = field(default=None, repr=False)

    def set_int(self, value: int) -> None:
        self.type = ColType.INT
        self.int_val = value

    def set_float(self, value: float) -> None:
        self.type = ColType.FLOAT
        self.float_val = value

    def set_str(self, value: str) -> None:
        self.type = ColType.STRING
        self.str_val = value

    def init_raw(self, length: int) -> bytes:
        """Encode the value into ``length`` bytes and store it in ``raw``."""
        if self.raw is not None:
            raise InternalError("raw buffer already initialised")
        if self.type == ColType.INT:
            if length != _INT.size:
                raise InternalError(f"INT value needs {_INT.size} bytes, got {length}")
            self.raw = _INT.pack(self.int_val)
        elif self.type == ColType.FLOAT:
            if length != _FLOAT.size:
                raise InternalError(f"FLOAT value needs {_FLOAT.size} bytes, got {length}")
            self.raw = _FLOAT.pack(self.float_val)
        elif self.type == ColType.STRING:
            encoded = self.str_val.encode()
            if length < len(encoded):
                raise StringOverflowError()
            self.raw = encoded.ljust(length, b"\0")
        else:
            raise TypeNotExistsError()
        return self.raw


class CompOp(IntEnum):
    EQ = 0
    NE = 1
    LT = 2
    GT = 3
    LE = 4
    GE = 5


@dataclass
class Condition:
    lhs_col: TabCol
    op: CompOp
    is_rhs_val: bool = False
    rhs_col: TabCol | None = None
    rhs_val: Value | None = None


@dataclass
class SetClause:
    lhs: TabCol
    rhs: Value