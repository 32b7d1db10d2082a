"""Page replacement policies for the buffer pool."""

from __future__ import annotations

import abc
import threading
from collections import OrderedDict


class Replacer(abc.ABC):
    """Tracks which frames may be evicted."""

    @abc.abstractmethod
    def victim(self) -> int | None:
        """Remove and return the frame chosen for eviction, or None if there is none."""

    @abc.abstractmethod
    def pin(self, frame_id: int) -> None:
        """Mark a frame as not evictable."""

    @abc.abstractmethod
    def unpin(self, frame_id: int) -> None:
        """Mark a frame as evictable."""

    @abc.abstractmethod
    def __len__(self) -> int:
        """Number of evictable frames."""


class LRUReplacer(Replacer):
    """Evicts the least recently unpinned frame."""

    def __init__(self, num_pages: int) -> None:
        self.max_size = num_pages
        self._lock = threading.Lock()
        # Oldest entry first; newly unpinned frames go to the end.
        self._frames: OrderedDict[int, None] = OrderedDict()

    def victim(self) -> int | None:
        with self._lock:
            if not self._frames:
                return None
            frame_id, _ = self._frames.popitem(last=False)
            return frame_id

    def pin(self, frame_id: int) -> None:
        with self._lock:
            self._frames.pop(frame_id, None)

    def unpin(self, frame_id: int) -> None:
        with self._lock:
            if frame_id not in self._frames:
                self._frames[frame_id] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._frames)