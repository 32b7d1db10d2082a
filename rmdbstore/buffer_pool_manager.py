"""A fixed-size pool of page frames cached in memory."""

from __future__ import annotations

import threading
from collections import deque

from .config import INVALID_PAGE_ID, PAGE_SIZE
from .disk_manager import DiskManager
from .page import Page, PageId
from .replacer import LRUReplacer, Replacer


class BufferPoolManager:
    """Caches disk pages in frames and writes dirty frames back before reuse."""

    def __init__(self, pool_size: int, disk_manager: DiskManager) -> None:
        self.pool_size = pool_size
        self.disk_manager = disk_manager
        self.pages = [Page() for _ in range(pool_size)]
        self.page_table: dict[PageId, int] = {}
        self.free_list: deque[int] = deque(range(pool_size))
        self.replacer: Replacer = LRUReplacer(pool_size)
        self._latch = threading.Lock()

    @staticmethod
    def mark_dirty(page: Page) -> None:
        """Flag a page as modified."""
        page.is_dirty = True

    # --------------------------------------------------------------- helpers

    def _find_victim_frame(self) -> int | None:
        if self.free_list:
            return self.free_list.popleft()
        return self.replacer.victim()

    def _write_back(self, page: Page) -> None:
        self.disk_manager.write_page(page.id.fd, page.id.page_no, page.data)
        page.is_dirty = False

    def _update_page(self, page: Page, new_page_id: PageId, frame_id: int) -> None:
        """Detach the frame from its old page and attach it to ``new_page_id``."""
        old_page_id = page.id
        if old_page_id.page_no != INVALID_PAGE_ID:
            if page.is_dirty:
                self._write_back(page)
            self.page_table.pop(old_page_id, None)

        page.id = new_page_id
        if new_page_id.page_no != INVALID_PAGE_ID:
            self.page_table[new_page_id] = frame_id
        else:
            page.pin_count = 0
            page.is_dirty = False
        page.reset_memory()

    # ------------------------------------------------------------ operations

    def fetch_page(self, page_id: PageId) -> Page | None:
        """Return the pinned frame holding ``page_id``, reading it from disk if needed.

        Returns None when every frame is pinned.
        """
        with self._latch:
            frame_id = self.page_table.get(page_id)
            if frame_id is not None:
                page = self.pages[frame_id]
                page.pin_count += 1
                self.replacer.pin(frame_id)
                return page

            frame_id = self._find_victim_frame()
            if frame_id is None:
                return None
            page = self.pages[frame_id]
            self._update_page(page, page_id, frame_id)
            page.data[:] = self.disk_manager.read_page(page_id.fd, page_id.page_no, PAGE_SIZE)
            page.pin_count = 1
            page.is_dirty = False
            self.replacer.pin(frame_id)
            return page

    def unpin_page(self, page_id: PageId, is_dirty: bool) -> bool:
        """Drop one pin of a cached page; False if it is absent or not pinned."""
        with self._latch:
            frame_id = self.page_table.get(page_id)
            if frame_id is None:
                return False
            page = self.pages[frame_id]
            if page.pin_count <= 0:
                return False
            page.pin_count -= 1
            if is_dirty:
                page.is_dirty = True
            if page.pin_count == 0:
                self.replacer.unpin(frame_id)
            return True

    def flush_page(self, page_id: PageId) -> bool:
        """Write a cached page to disk whether or not it is dirty; False if absent."""
        with self._latch:
            frame_id = self.page_table.get(page_id)
            if frame_id is None:
                return False
            self._write_back(self.pages[frame_id])
            return True

    def new_page(self, fd: int) -> Page | None:
        """Allocate a new page in file ``fd`` and return its pinned, zeroed frame.

        The new page's identifier is the frame's ``id``. Returns None when every
        frame is pinned.
        """
        with self._latch:
            frame_id = self._find_victim_frame()
            if frame_id is None:
                return None
            page_no = self.disk_manager.allocate_page(fd)
            if page_no == INVALID_PAGE_ID:
                return None
            page = self.pages[frame_id]
            self._update_page(page, PageId(fd, page_no), frame_id)
            page.pin_count = 1
            page.is_dirty = False
            self.replacer.pin(frame_id)
            return page

    def delete_page(self, page_id: PageId) -> bool:
        """Evict a page from the pool; False only if it is cached and still pinned."""
        with self._latch:
            frame_id = self.page_table.get(page_id)
            if frame_id is None:
                return True
            page = self.pages[frame_id]
            if page.pin_count > 0:
                return False
            if page.is_dirty:
                self._write_back(page)
            del self.page_table[page_id]
            page.id = PageId(page.id.fd, INVALID_PAGE_ID)
            page.pin_count = 0
            page.is_dirty = False
            page.reset_memory()
            self.replacer.pin(frame_id)
            self.free_list.append(frame_id)
            return True

    def flush_all_pages(self, fd: int) -> None:
        """Write every dirty cached page of file ``fd`` to disk."""
        with self._latch:
            for page_id, frame_id in self.page_table.items():
                if page_id.fd != fd:
                    continue
                page = self.pages[frame_id]
                if page.is_dirty:
                    self._write_back(page)