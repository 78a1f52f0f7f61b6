"""A buffer pool caching file pages in memory frames."""

from __future__ import annotations

import threading
from collections import OrderedDict, deque

from .common import PAGE_SIZE
from .disk_manager import DiskManager
from .page import Page, PageId


class _LRUReplacer:
    """Chooses the least recently unpinned frame for eviction."""

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._frames: OrderedDict[int, None] = OrderedDict()

    def victim(self) -> int | None:
        if not self._frames:
            return None
        frame_id, _ = self._frames.popitem(last=False)
        return frame_id

    def pin(self, frame_id: int) -> None:
        self._frames.pop(frame_id, None)

    def unpin(self, frame_id: int) -> None:
        if frame_id in self._frames or len(self._frames) >= self._capacity:
            return
        self._frames[frame_id] = None

    def __len__(self) -> int:
        return len(self._frames)


class BufferPoolManager:
    """Keeps up to ``pool_size`` pages in memory, writing dirty ones back on eviction."""

    def __init__(self, pool_size: int, disk_manager: DiskManager) -> None:
        self.pool_size = pool_size
        self.disk_manager = disk_manager
        self._pages = [Page() for _ in range(pool_size)]
        self._page_table: dict[PageId, int] = {}
        self._free_list: deque[int] = deque(range(pool_size))
        self._replacer = _LRUReplacer(pool_size)
        self._latch = threading.Lock()

    @staticmethod
    def mark_dirty(page: Page) -> None:
        page.is_dirty = True

    def _find_victim(self) -> int | None:
        if self._free_list:
            return self._free_list.popleft()
        return self._replacer.victim()

    def _write_back(self, page: Page) -> None:
        assert page.id is not None
        self.disk_manager.write_page(page.id.fd, page.id.page_no, bytes(page.data))

    def _update_page(self, page: Page, new_page_id: PageId, frame_id: int) -> None:
        if page.is_dirty:
            self._write_back(page)
            page.is_dirty = False
        if page.id is not None:
            self._page_table.pop(page.id, None)
        page.reset_memory()
        page.id = new_page_id
        self._page_table[new_page_id] = frame_id

    def fetch_page(self, page_id: PageId) -> Page | None:
        """Pin and return the page, reading it from disk if needed; None if no frame is free."""
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is not None:
                page = self._pages[frame_id]
                self._replacer.pin(frame_id)
                page.pin_count += 1
                return page

            frame_id = self._find_victim()
            if frame_id is None:
                return None
            page = self._pages[frame_id]
            self._update_page(page, page_id, frame_id)
            try:
                page.data[:] = self.disk_manager.read_page(page_id.fd, page_id.page_no, PAGE_SIZE)
            except Exception:
                del self._page_table[page_id]
                page.id = None
                self._free_list.append(frame_id)
                raise
            self._replacer.pin(frame_id)
            page.pin_count = 1
            return page

    def unpin_page(self, page_id: PageId, is_dirty: bool) -> bool:
        """Drop one pin of a cached page; False if it is absent or not pinned."""
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is None:
                return False
            page = self._pages[frame_id]
            if page.pin_count <= 0:
                return False
            page.pin_count -= 1
            if page.pin_count == 0:
                self._replacer.unpin(frame_id)
            if is_dirty:
                page.is_dirty = True
            return True

    def flush_page(self, page_id: PageId) -> bool:
        """Write a cached page to disk whether or not it is dirty; False if it is absent."""
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is None:
                return False
            page = self._pages[frame_id]
            self.disk_manager.write_page(page_id.fd, page_id.page_no, bytes(page.data))
            page.is_dirty = False
            return True

    def new_page(self, fd: int) -> Page | None:
        """Allocate a fresh page in file ``fd`` and return it pinned; None if no frame is free."""
        with self._latch:
            frame_id = self._find_victim()
            if frame_id is None:
                return None
            page_id = PageId(fd, self.disk_manager.allocate_page(fd))
            page = self._pages[frame_id]
            self._update_page(page, page_id, frame_id)
            self._replacer.pin(frame_id)
            page.pin_count = 1
            return page

    def delete_page(self, page_id: PageId) -> bool:
        """Remove a page from the pool; False only if it is cached and still pinned."""
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is None:
                return True
            page = self._pages[frame_id]
            if page.pin_count != 0:
                return False
            if page.is_dirty:
                self._write_back(page)
                page.is_dirty = False
            del self._page_table[page_id]
            page.reset_memory()
            page.id = None
            self._replacer.pin(frame_id)
            self._free_list.append(frame_id)
            return True

    def flush_all_pages(self, fd: int) -> None:
        """Write every cached page of file ``fd`` to disk."""
        with self._latch:
            for page_id, frame_id in self._page_table.items():
                if page_id.fd == fd:
                    page = self._pages[frame_id]
                    self.disk_manager.write_page(fd, page_id.page_no, bytes(page.data))
                    page.is_dirty = False