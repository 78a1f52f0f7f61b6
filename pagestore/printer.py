"""Execution context and tabular rendering of query results."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .common import BUFFER_LENGTH

RECORD_COUNT_LENGTH = 40


@dataclass
class Context:
    """State shared by the operators of one statement, including its output buffer."""

    lock_mgr: Any = None
    log_mgr: Any = None
    txn: Any = None
    ellipsis: bool = False
    offset: int = field(default=0, init=False)
    _chunks: list[str] = field(default_factory=list, init=False, repr=False)

    def output(self) -> str:
        """Text written to the buffer so far."""
        return "".join(self._chunks)

    def _fits(self, text: str) -> bool:
        return (
            not self.ellipsis
            and self.offset + RECORD_COUNT_LENGTH + len(text.encode()) < BUFFER_LENGTH
        )

    def _append(self, text: str) -> None:
        self._chunks.append(text)
        self.offset += len(text.encode())

    def _emit(self, text: str) -> None:
        if self._fits(text):
            self._append(text)
        else:
            self.ellipsis = True


class RecordPrinter:
    """Renders rows as a fixed-width table into a context's buffer."""

    COL_WIDTH = 16

    def __init__(self, num_cols: int) -> None:
        if num_cols <= 0:
            raise ValueError("a table needs at least one column")
        self.num_cols = num_cols

    def print_separator(self, context: Context) -> None:
        for _ in range(self.num_cols):
            context._emit("+" + "-" * (self.COL_WIDTH + 2))
        context._emit("+\n")

    def print_record(self, rec_str: Iterable[str], context: Context) -> None:
        cols = [str(col) for col in rec_str]
        if len(cols) != self.num_cols:
            raise ValueError(f"expected {self.num_cols} columns, got {len(cols)}")
        width = self.COL_WIDTH
        for col in cols:
            if len(col) > width:
                col = col[: width - 3] + "..."
            context._emit(f"| {col:>{width}} ")
        if context._fits("|\n"):
            context._append("|\n")

    @staticmethod
    def print_record_count(num_rec: int, context: Context) -> None:
        text = "... ...\n" if context.ellipsis else ""
        text += f"Total record(s): {num_rec}\n"
        context._append(text)