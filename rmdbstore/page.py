"""Page identifiers and in-memory page frames."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .config import INVALID_PAGE_ID, PAGE_SIZE

_LSN = struct.Struct("<i")


@dataclass(frozen=True)
class PageId:
    """Identifies a page by the descriptor of its file and its page number."""

    fd: int
    page_no: int = INVALID_PAGE_ID

    def packed(self) -> int:
        """Return the file descriptor and page number packed into one integer."""
        return (self.fd << 16) | self.page_no

    def __str__(self) -> str:
        return f"{{fd: {self.fd} page_no: {self.page_no}}}"


class Page:
    """A frame of the buffer pool holding the contents of one disk page."""

    OFFSET_PAGE_START = 0
    OFFSET_LSN = 0
    OFFSET_PAGE_HDR = 4

    def __init__(self) -> None:
        self.id = PageId(fd=-1)
        self.data = bytearray(PAGE_SIZE)
        self.is_dirty = False
        self.pin_count = 0

    def reset_memory(self) -> None:
        """Fill the page contents with zero bytes, in place."""
        self.data[:] = bytes(PAGE_SIZE)

    @property
    def page_lsn(self) -> int:
        """The log sequence number stored at the start of the page."""
        return _LSN.unpack_from(self.data, self.OFFSET_LSN)[0]

    @page_lsn.setter
    def page_lsn(self, lsn: int) -> None:
        _LSN.pack_into(self.data, self.OFFSET_LSN, lsn)

    def __repr__(self) -> str:
        return f"Page(id={self.id}, pin_count={self.pin_count}, is_dirty={self.is_dirty})"