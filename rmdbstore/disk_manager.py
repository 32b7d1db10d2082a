"""Low-level access to the files that hold pages and the log."""

from __future__ import annotations

import os
import shutil
import stat
import threading

from .config import LOG_FILE_NAME, PAGE_SIZE
from .errors import (
    DbFileExistsError,
    DbFileNotFoundError,
    FileNotClosedError,
    FileNotOpenError,
    InternalError,
    RMDBError,
    UnixError,
)


class DiskManager:
    """Creates, opens and closes files and reads and writes whole pages in them."""

    MAX_FD = 8192

    def __init__(self) -> None:
        self._path2fd: dict[str, int] = {}
        self._fd2path: dict[int, str] = {}
        self._fd2pageno: dict[int, int] = {}
        self._pageno_lock = threading.Lock()
        self.log_fd = -1

    # ------------------------------------------------------------------ pages

    def write_page(self, fd: int, page_no: int, data: bytes | bytearray | memoryview) -> None:
        """Write ``data`` at the start of page ``page_no`` of the file ``fd``."""
        try:
            os.lseek(fd, page_no * PAGE_SIZE, os.SEEK_SET)
            written = os.write(fd, data)
        except OSError as exc:
            raise UnixError(exc) from exc
        if written != len(data):
            raise InternalError("DiskManager::write_page Error")

    def read_page(self, fd: int, page_no: int, num_bytes: int) -> bytes:
        """Read ``num_bytes`` from the start of page ``page_no`` of the file ``fd``."""
        try:
            os.lseek(fd, page_no * PAGE_SIZE, os.SEEK_SET)
            data = os.read(fd, num_bytes)
        except OSError as exc:
            raise UnixError(exc) from exc
        if len(data) != num_bytes:
            raise InternalError("DiskManager::read_page Error")
        return data

    def allocate_page(self, fd: int) -> int:
        """Return the next free page number of the file ``fd``."""
        if not 0 <= fd < self.MAX_FD:
            raise ValueError(f"file descriptor out of range: {fd}")
        with self._pageno_lock:
            page_no = self._fd2pageno.get(fd, 0)
            self._fd2pageno[fd] = page_no + 1
            return page_no

    def deallocate_page(self, page_no: int) -> None:
        """Release a page number; page numbers are never reused."""

    def set_fd2pageno(self, fd: int, start_page_no: int) -> None:
        """Make the file ``fd`` allocate page numbers from ``start_page_no`` on."""
        with self._pageno_lock:
            self._fd2pageno[fd] = start_page_no

    def get_fd2pageno(self, fd: int) -> int:
        """Return the number of pages already allocated in the file ``fd``."""
        with self._pageno_lock:
            return self._fd2pageno.get(fd, 0)

    # ------------------------------------------------------------ directories

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def create_dir(self, path: str) -> None:
        try:
            os.mkdir(path)
        except OSError as exc:
            raise UnixError(exc) from exc

    def destroy_dir(self, path: str) -> None:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise UnixError(exc) from exc

    # ------------------------------------------------------------------ files

    def is_file(self, path: str) -> bool:
        try:
            return stat.S_ISREG(os.stat(path).st_mode)
        except OSError:
            return False

    def create_file(self, path: str) -> None:
        """Create an empty file; it must not exist yet."""
        if self.is_file(path):
            raise DbFileExistsError(path)
        try:
            fd = os.open(path, os.O_CREAT | os.O_WRONLY, 0o644)
            os.close(fd)
        except OSError as exc:
            raise UnixError(exc) from exc

    def destroy_file(self, path: str) -> None:
        """Delete a file that is not open."""
        if path in self._path2fd:
            raise FileNotClosedError(path)
        if not self.is_file(path):
            raise DbFileNotFoundError(path)
        try:
            os.unlink(path)
        except OSError as exc:
            raise UnixError(exc) from exc

    def open_file(self, path: str) -> int:
        """Open a file for reading and writing; an open file returns its current descriptor."""
        if path in self._path2fd:
            return self._path2fd[path]
        if not self.is_file(path):
            raise DbFileNotFoundError(path)
        flags = os.O_RDWR | getattr(os, "O_BINARY", 0)
        try:
            fd = os.open(path, flags)
        except OSError as exc:
            raise UnixError(exc) from exc
        if fd >= self.MAX_FD:
            os.close(fd)
            raise RMDBError("Exceeded maximum number of file descriptors supported by DiskManager.")
        self._path2fd[path] = fd
        self._fd2path[fd] = path
        return fd

    def close_file(self, fd: int) -> None:
        """Close a file opened by this manager."""
        path = self._fd2path.get(fd)
        if path is None:
            raise FileNotOpenError(fd)
        try:
            os.close(fd)
        except OSError as exc:
            raise UnixError(exc) from exc
        self._path2fd.pop(path, None)
        del self._fd2path[fd]

    def get_file_size(self, file_name: str) -> int:
        """Return the size of a file in bytes, or -1 if it cannot be examined."""
        try:
            return os.stat(file_name).st_size
        except OSError:
            return -1

    def get_file_name(self, fd: int) -> str:
        path = self._fd2path.get(fd)
        if path is None:
            raise FileNotOpenError(fd)
        return path

    def get_file_fd(self, file_name: str) -> int:
        """Return the descriptor of a file, opening it if necessary."""
        fd = self._path2fd.get(file_name)
        if fd is None:
            return self.open_file(file_name)
        return fd

    # -------------------------------------------------------------------- log

    def _ensure_log_open(self) -> int:
        if self.log_fd == -1:
            self.log_fd = self.open_file(LOG_FILE_NAME)
        return self.log_fd

    def read_log(self, size: int, offset: int) -> bytes | None:
        """Read up to ``size`` bytes of the log from ``offset``.

        Returns None when ``offset`` lies beyond the end of the log.
        """
        fd = self._ensure_log_open()
        file_size = self.get_file_size(LOG_FILE_NAME)
        if offset > file_size:
            return None
        size = min(size, file_size - offset)
        if size == 0:
            return b""
        try:
            os.lseek(fd, offset, os.SEEK_SET)
            data = os.read(fd, size)
        except OSError as exc:
            raise UnixError(exc) from exc
        if len(data) != size:
            raise InternalError("DiskManager::read_log Error")
        return data

    def write_log(self, log_data: bytes | bytearray | memoryview) -> None:
        """Append ``log_data`` to the end of the log file."""
        fd = self._ensure_log_open()
        try:
            os.lseek(fd, 0, os.SEEK_END)
            written = os.write(fd, log_data)
        except OSError as exc:
            raise UnixError(exc) from exc
        if written != len(log_data):
            raise UnixError("short write to log file")