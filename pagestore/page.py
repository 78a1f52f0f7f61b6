"""Page identifiers and in-memory page frames."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .common import INVALID_PAGE_ID, PAGE_SIZE

_LSN = struct.Struct("<i")


@dataclass(frozen=True)
class PageId:
    """Identifies a page by the descriptor of its open file and its page number."""

    fd: int
    page_no: int = INVALID_PAGE_ID

    def key(self) -> int:
        """Pack the identifier into a single integer."""
        return (self.fd << 16) | self.page_no

    def __str__(self) -> str:
        return f"{{fd: {self.fd} page_no: {self.page_no}}}"


class Page:
    """One frame of the buffer pool: a page's bytes plus bookkeeping."""

    OFFSET_PAGE_START = 0
    OFFSET_LSN = 0
    OFFSET_PAGE_HDR = 4

    __slots__ = ("id", "data", "is_dirty", "pin_count")

    def __init__(self, page_id: PageId | None = None) -> None:
        self.id: PageId | None = page_id
        self.data = bytearray(PAGE_SIZE)
        self.is_dirty = False
        self.pin_count = 0

    @property
    def page_lsn(self) -> int:
        """Log sequence number stored at the start of the page."""
        return _LSN.unpack_from(self.data, self.OFFSET_LSN)[0]

    @page_lsn.setter
    def page_lsn(self, lsn: int) -> None:
        _LSN.pack_into(self.data, self.OFFSET_LSN, lsn)

    def reset_memory(self) -> None:
        """Fill the page's bytes with zeros."""
        self.data[:] = bytes(PAGE_SIZE)

    def __repr__(self) -> str:
        return f"Page(id={self.id}, dirty={self.is_dirty}, pins={self.pin_count})"