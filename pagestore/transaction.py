"""Transactions, their write records and the identifiers of lockable data."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from .common import INVALID_LSN, INVALID_TIMESTAMP, Rid
from .errors import InternalError

_MASK64 = (1 << 64) - 1
_SIGN64 = 1 << 63


def _to_int64(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value & _SIGN64 else value


class TransactionState(Enum):
    DEFAULT = 0
    GROWING = 1
    SHRINKING = 2
    COMMITTED = 3
    ABORTED = 4


class IsolationLevel(Enum):
    READ_UNCOMMITTED = 0
    REPEATABLE_READ = 1
    READ_COMMITTED = 2
    SERIALIZABLE = 3


class WType(IntEnum):
    """Kind of write a transaction performed."""

    INSERT_TUPLE = 0
    DELETE_TUPLE = 1
    UPDATE_TUPLE = 2


@dataclass
class WriteRecord:
    """One write of a transaction, kept so that it can be rolled back.

    Inserts carry no record image; deletes and updates carry the old record.
    """

    wtype: WType
    tab_name: str
    rid: Rid
    record: bytes | None = None


class LockDataType(IntEnum):
    """Granularity of a lock: a whole table or a single record."""

    TABLE = 0
    RECORD = 1


_NO_RID = Rid(-1, -1)


@dataclass(frozen=True)
class LockDataId:
    """Identifies the table or record that a lock covers."""

    fd: int
    type: LockDataType
    rid: Rid = _NO_RID

    def __post_init__(self) -> None:
        if self.type == LockDataType.TABLE and self.rid != _NO_RID:
            raise InternalError("a table lock does not name a record")

    @staticmethod
    def table(fd: int) -> LockDataId:
        """Identifier of a table-level lock on the file ``fd``."""
        return LockDataId(fd, LockDataType.TABLE)

    @staticmethod
    def record(fd: int, rid: Rid) -> LockDataId:
        """Identifier of a record-level lock on ``rid`` in the file ``fd``."""
        return LockDataId(fd, LockDataType.RECORD, rid)

    def key(self) -> int:
        """Pack the identifier into a signed 64-bit integer."""
        if self.type == LockDataType.TABLE:
            return self.fd
        packed = (
            (int(self.type) << 63)
            | (self.fd << 31)
            | (self.rid.page_no << 16)
            | self.rid.slot_no
        )
        return _to_int64(packed)

    def __hash__(self) -> int:
        return hash(self.key())


class AbortReason(Enum):
    LOCK_ON_SHIRINKING = 0
    UPGRADE_CONFLICT = 1
    DEADLOCK_PREVENTION = 2


class TransactionAbortException(Exception):
    """Raised when a transaction has to be rolled back."""

    def __init__(self, txn_id: int, abort_reason: AbortReason) -> None:
        self.txn_id = txn_id
        self.abort_reason = abort_reason
        super().__init__(self.info())

    def info(self) -> str:
        """Human-readable explanation, ending in a newline."""
        if self.abort_reason == AbortReason.LOCK_ON_SHIRINKING:
            return (
                f"Transaction {self.txn_id} aborted because it cannot request locks "
                "on SHRINKING phase\n"
            )
        if self.abort_reason == AbortReason.UPGRADE_CONFLICT:
            return (
                f"Transaction {self.txn_id} aborted because another transaction "
                "is waiting for upgrading\n"
            )
        if self.abort_reason == AbortReason.DEADLOCK_PREVENTION:
            return f"Transaction {self.txn_id} aborted for deadlock prevention\n"
        return "Transaction aborted\n"

    def __str__(self) -> str:
        return self.info()


@dataclass
class Transaction:
    """State of one transaction: its phase, writes, locks and latched index pages."""

    txn_id: int
    isolation_level: IsolationLevel = IsolationLevel.SERIALIZABLE
    state: TransactionState = field(default=TransactionState.DEFAULT, init=False)
    txn_mode: bool = field(default=False, init=False)
    start_ts: int = field(default=INVALID_TIMESTAMP, init=False)
    prev_lsn: int = field(default=INVALID_LSN, init=False)
    thread_id: int = field(default_factory=threading.get_ident, init=False)
    write_set: deque[WriteRecord] = field(default_factory=deque, init=False, repr=False)
    lock_set: set[LockDataId] = field(default_factory=set, init=False, repr=False)
    index_latch_page_set: deque[Any] = field(default_factory=deque, init=False, repr=False)
    index_deleted_page_set: deque[Any] = field(default_factory=deque, init=False, repr=False)

    def append_write_record(self, write_record: WriteRecord) -> None:
        self.write_set.append(write_record)

    def append_index_deleted_page(self, page: Any) -> None:
        self.index_deleted_page_set.append(page)

    def append_index_latch_page(self, page: Any) -> None:
        self.index_latch_page_set.append(page)