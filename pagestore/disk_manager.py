"""Page-level file access on disk."""

from __future__ import annotations

import os
import shutil
import threading

from . import errors
from .common import LOG_FILE_NAME, PAGE_SIZE

_BINARY = getattr(os, "O_BINARY", 0)


class DiskManager:
    """Reads and writes pages of files, and tracks which files are open."""

    MAX_FD = 8192

    def __init__(self) -> None:
        self._path2fd: dict[str, int] = {}
        self._fd2path: dict[int, str] = {}
        self._fd2pageno: dict[int, int] = {}
        self._page_lock = threading.Lock()
        self._io_lock = threading.Lock()
        self.log_fd = -1

    # pages

    def write_page(self, fd: int, page_no: int, data: bytes) -> None:
        """Write ``data`` at the start of page ``page_no`` of file ``fd``."""
        with self._io_lock:
            try:
                os.lseek(fd, page_no * PAGE_SIZE, os.SEEK_SET)
            except OSError as exc:
                raise errors.InternalError("DiskManager.write_page: lseek failed") from exc
            try:
                written = os.write(fd, data)
            except OSError as exc:
                raise errors.InternalError("DiskManager.write_page failed") from exc
        if written != len(data):
            raise errors.InternalError("DiskManager.write_page failed")

    def read_page(self, fd: int, page_no: int, num_bytes: int) -> bytes:
        """Read ``num_bytes`` from the start of page ``page_no`` of file ``fd``."""
        with self._io_lock:
            try:
                os.lseek(fd, page_no * PAGE_SIZE, os.SEEK_SET)
            except OSError as exc:
                raise errors.InternalError("DiskManager.read_page: lseek failed") from exc
            try:
                data = os.read(fd, num_bytes)
            except OSError as exc:
                raise errors.InternalError("DiskManager.read_page failed") from exc
        if len(data) != num_bytes:
            raise errors.InternalError("DiskManager.read_page failed")
        return data

    def allocate_page(self, fd: int) -> int:
        """Hand out the next page number of file ``fd``."""
        if not 0 <= fd < self.MAX_FD:
            raise errors.InternalError(f"file descriptor out of range: {fd}")
        with self._page_lock:
            page_no = self._fd2pageno.get(fd, 0)
            self._fd2pageno[fd] = page_no + 1
        return page_no

    def deallocate_page(self, page_no: int) -> None:
        """Page numbers are never reused."""

    def set_fd2pageno(self, fd: int, start_page_no: int) -> None:
        with self._page_lock:
            self._fd2pageno[fd] = start_page_no

    def get_fd2pageno(self, fd: int) -> int:
        with self._page_lock:
            return self._fd2pageno.get(fd, 0)

    # directories

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def create_dir(self, path: str) -> None:
        try:
            os.mkdir(path)
        except OSError as exc:
            raise errors.UnixError(exc) from exc

    def destroy_dir(self, path: str) -> None:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise errors.UnixError(exc) from exc

    # files

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def create_file(self, path: str) -> None:
        if self.is_file(path):
            raise errors.FileExistsError(path)
        try:
            fd = os.open(path, os.O_CREAT | os.O_RDWR | _BINARY, 0o777)
        except OSError as exc:
            raise errors.UnixError(exc) from exc
        os.close(fd)

    def destroy_file(self, path: str) -> None:
        if not self.is_file(path):
            raise errors.FileNotFoundError(path)
        if path in self._path2fd:
            raise errors.FileNotClosedError(path)
        try:
            os.unlink(path)
        except OSError as exc:
            raise errors.UnixError(exc) from exc

    def open_file(self, path: str) -> int:
        """Open an existing file for reading and writing and return its descriptor."""
        if not self.is_file(path):
            raise errors.FileNotFoundError(path)
        if path in self._path2fd:
            raise errors.FileNotClosedError(path)
        try:
            fd = os.open(path, os.O_RDWR | _BINARY)
        except OSError as exc:
            raise errors.UnixError(exc) from exc
        self._path2fd[path] = fd
        self._fd2path[fd] = path
        return fd

    def close_file(self, fd: int) -> None:
        if fd not in self._fd2path:
            raise errors.FileNotOpenError(fd)
        try:
            os.close(fd)
        except OSError as exc:
            raise errors.UnixError(exc) from exc
        path = self._fd2path.pop(fd)
        del self._path2fd[path]
        if fd == self.log_fd:
            self.log_fd = -1

    def get_file_size(self, path: str) -> int:
        """Size of the file in bytes, or -1 if it cannot be examined."""
        try:
            return os.stat(path).st_size
        except OSError:
            return -1

    def get_file_name(self, fd: int) -> str:
        try:
            return self._fd2path[fd]
        except KeyError:
            raise errors.FileNotOpenError(fd) from None

    def get_file_fd(self, path: str) -> int:
        """Descriptor of ``path``, opening the file if it is not open yet."""
        fd = self._path2fd.get(path)
        return self.open_file(path) if fd is None else fd

    # log

    def read_log(self, size: int, offset: int) -> bytes | None:
        """Read up to ``size`` bytes of the log from ``offset``.

        Returns None when ``offset`` lies past the end of the log.
        """
        if self.log_fd == -1:
            self.log_fd = self.open_file(LOG_FILE_NAME)
        file_size = self.get_file_size(LOG_FILE_NAME)
        if offset > file_size:
            return None
        size = min(size, file_size - offset)
        if size == 0:
            return b""
        with self._io_lock:
            os.lseek(self.log_fd, offset, os.SEEK_SET)
            data = os.read(self.log_fd, size)
        if len(data) != size:
            raise errors.InternalError("DiskManager.read_log: short read")
        return data

    def write_log(self, data: bytes) -> None:
        """Append ``data`` to the log."""
        if self.log_fd == -1:
            self.log_fd = self.open_file(LOG_FILE_NAME)
        with self._io_lock:
            try:
                os.lseek(self.log_fd, 0, os.SEEK_END)
                written = os.write(self.log_fd, data)
            except OSError as exc:
                raise errors.UnixError(exc) from exc
        if written != len(data):
            raise errors.UnixError()