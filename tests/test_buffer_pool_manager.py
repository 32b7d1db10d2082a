import random
import threading

import pytest

from rmdbstore.buffer_pool_manager import BufferPoolManager
from rmdbstore.config import PAGE_SIZE
from rmdbstore.disk_manager import DiskManager
from rmdbstore.page import Page, PageId


@pytest.fixture
def disk():
    return DiskManager()


def _open(disk, tmp_path, name):
    path = str(tmp_path / name)
    disk.create_file(path)
    return disk.open_file(path)


@pytest.fixture
def fd(disk, tmp_path):
    fd = _open(disk, tmp_path, "basic")
    yield fd
    disk.close_file(fd)


def _cstr(data):
    return bytes(data).split(b"\0", 1)[0]


def _rand_buf(rng):
    return bytes(rng.getrandbits(8) for _ in range(PAGE_SIZE))


def _cache_matches(bpm, mock, fd, page_no):
    page = bpm.fetch_page(PageId(fd, page_no))
    same = page is not None and bytes(page.data) == mock[fd][page_no]
    unpinned = bpm.unpin_page(PageId(fd, page_no), False)
    return same and unpinned


def _disk_matches(disk, mock, fd, page_no):
    return disk.read_page(fd, page_no, PAGE_SIZE) == mock[fd][page_no]


def test_sample(disk, fd):
    pool_size = 10
    bpm = BufferPoolManager(pool_size, disk)

    page0 = bpm.new_page(fd)
    assert page0 is not None
    assert page0.id.page_no == 0

    page0.data[:5] = b"Hello"
    assert _cstr(page0.data) == b"Hello"

    for _ in range(1, pool_size):
        assert bpm.new_page(fd) is not None

    for _ in range(pool_size, pool_size * 2):
        assert bpm.new_page(fd) is None

    for i in range(5):
        assert bpm.unpin_page(PageId(fd, i), True) is True
    for _ in range(4):
        assert bpm.new_page(fd) is not None

    page0 = bpm.fetch_page(PageId(fd, 0))
    assert page0 is not None
    assert _cstr(page0.data) == b"Hello"
    assert bpm.unpin_page(PageId(fd, 0), True) is True

    assert bpm.new_page(fd) is not None
    assert bpm.fetch_page(PageId(fd, 0)) is None

    bpm.flush_all_pages(fd)


def test_new_pages_are_numbered_in_order_and_zeroed(disk, fd):
    bpm = BufferPoolManager(3, disk)
    pages = [bpm.new_page(fd) for _ in range(3)]
    assert [p.id.page_no for p in pages] == [0, 1, 2]
    assert all(p.pin_count == 1 for p in pages)
    assert all(bytes(p.data) == bytes(PAGE_SIZE) for p in pages)


def test_failed_new_page_does_not_consume_page_number(disk, fd):
    bpm = BufferPoolManager(1, disk)
    first = bpm.new_page(fd)
    assert bpm.new_page(fd) is None
    assert bpm.unpin_page(first.id, False)
    second = bpm.new_page(fd)
    assert second.id.page_no == 1


def test_unpin_rules(disk, fd):
    bpm = BufferPoolManager(2, disk)
    page = bpm.new_page(fd)
    assert bpm.unpin_page(PageId(fd, 99), False) is False
    assert bpm.unpin_page(page.id, False) is True
    assert bpm.unpin_page(page.id, False) is False
    assert page.pin_count == 0


def test_fetch_cached_page_increments_pin_count(disk, fd):
    bpm = BufferPoolManager(2, disk)
    page = bpm.new_page(fd)
    again = bpm.fetch_page(page.id)
    assert again is page
    assert page.pin_count == 2


def test_unpin_dirty_flag_is_sticky(disk, fd):
    bpm = BufferPoolManager(2, disk)
    page = bpm.new_page(fd)
    bpm.fetch_page(page.id)
    assert bpm.unpin_page(page.id, True)
    assert bpm.unpin_page(page.id, False)
    assert page.is_dirty is True


def test_flush_page_writes_even_when_clean(disk, fd):
    bpm = BufferPoolManager(2, disk)
    page = bpm.new_page(fd)
    page.data[:4] = b"abcd"
    assert page.is_dirty is False
    assert bpm.flush_page(page.id) is True
    assert disk.read_page(fd, 0, PAGE_SIZE)[:4] == b"abcd"
    assert bpm.flush_page(PageId(fd, 7)) is False


def test_mark_dirty():
    page = Page()
    BufferPoolManager.mark_dirty(page)
    assert page.is_dirty is True


def test_delete_page(disk, fd):
    bpm = BufferPoolManager(1, disk)
    page = bpm.new_page(fd)
    assert bpm.delete_page(page.id) is False
    page.data[:3] = b"xyz"
    assert bpm.unpin_page(page.id, True)
    assert bpm.delete_page(PageId(fd, 0)) is True
    assert disk.read_page(fd, 0, PAGE_SIZE)[:3] == b"xyz"
    assert bpm.delete_page(PageId(fd, 0)) is True
    # The freed frame can be reused at once.
    other = bpm.new_page(fd)
    assert other.id == PageId(fd, 1)
    assert bytes(other.data) == bytes(PAGE_SIZE)


def test_eviction_writes_back_dirty_pages(disk, fd):
    bpm = BufferPoolManager(4, disk)
    rng = random.Random(7)
    contents = {}
    for _ in range(16):
        page = bpm.new_page(fd)
        buf = _rand_buf(rng)
        page.data[:] = buf
        contents[page.id.page_no] = buf
        assert bpm.unpin_page(page.id, True)
    for page_no, buf in contents.items():
        page = bpm.fetch_page(PageId(fd, page_no))
        assert bytes(page.data) == buf
        assert bpm.unpin_page(page.id, False)


def _concurrency_worker(bpm, fd, problems):
    page_ids = []
    for _ in range(10):
        page = bpm.new_page(fd)
        if page is None:
            problems.append("new_page failed")
            continue
        text = str(page.id.page_no).encode()
        page.data[: len(text)] = text
        page_ids.append(page.id)
    for pid in page_ids:
        if not bpm.unpin_page(pid, True):
            problems.append(("unpin", pid))
    for pid in page_ids:
        page = bpm.fetch_page(pid)
        if page is None:
            problems.append(("fetch", pid))
            continue
        if _cstr(page.data) != str(pid.page_no).encode():
            problems.append(("content", pid))
        if not bpm.unpin_page(pid, True):
            problems.append(("unpin2", pid))
    for pid in page_ids:
        if not bpm.delete_page(pid):
            problems.append(("delete", pid))
    bpm.flush_all_pages(fd)


def test_concurrency(disk, fd):
    num_threads = 5
    num_runs = 5
    problems = []

    for _ in range(num_runs):
        bpm = BufferPoolManager(50, disk)
        threads = [
            threading.Thread(target=_concurrency_worker, args=(bpm, fd, problems))
            for _ in range(num_threads)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

    assert problems == []
    assert disk.get_fd2pageno(fd) == num_threads * num_runs * 10


def test_storage_simple(disk, tmp_path):
    max_files = 4
    max_pages = 16
    rng = random.Random(12345)
    bpm = BufferPoolManager(max_files * max_pages, disk)

    mock = {}
    names = {}
    for i in range(max_files):
        path = str(tmp_path / f"{i}.txt")
        disk.create_file(path)
        fd = disk.open_file(path)
        disk.set_fd2pageno(fd, 0)
        mock[fd] = [bytes(PAGE_SIZE)] * max_pages
        names[fd] = path

    num_pages = 0
    numbering = []
    cache_ok = []
    for fd in mock:
        for i in range(max_pages):
            buf = _rand_buf(rng)
            page = bpm.new_page(fd)
            numbering.append(page.id.page_no == i)
            page.data[:] = buf
            cache_ok.append(bpm.unpin_page(page.id, True))
            mock[fd][i] = buf
            num_pages += 1
            cache_ok.append(_cache_matches(bpm, mock, fd, i))
    assert all(numbering)
    assert all(cache_ok)
    assert num_pages == max_files * max_pages

    for fd in mock:
        bpm.flush_all_pages(fd)
    assert all(
        _disk_matches(disk, mock, fd, page_no)
        for fd in mock
        for page_no in range(max_pages)
    )

    fds = list(mock)
    failures = []
    for _ in range(300):
        fd = rng.choice(fds)
        page_no = rng.randrange(max_pages)
        page = bpm.fetch_page(PageId(fd, page_no))
        if bytes(page.data) != mock[fd][page_no]:
            failures.append(("fetch", fd, page_no))
        buf = _rand_buf(rng)
        page.data[:] = buf
        mock[fd][page_no] = buf
        if not bpm.unpin_page(page.id, True):
            failures.append(("unpin", fd, page_no))
        if rng.randrange(10) == 0:
            if not bpm.flush_page(page.id):
                failures.append(("flush", fd, page_no))
            if not _disk_matches(disk, mock, fd, page_no):
                failures.append(("disk", fd, page_no))
        if rng.randrange(100) == 0:
            bpm.flush_all_pages(fd)
        if not _cache_matches(bpm, mock, fd, page_no):
            failures.append(("cache", fd, page_no))
    assert failures == []

    for fd in mock:
        bpm.flush_all_pages(fd)
    assert all(
        _disk_matches(disk, mock, fd, page_no)
        for fd in mock
        for page_no in range(max_pages)
    )

    for fd, path in names.items():
        disk.close_file(fd)
        disk.destroy_file(path)
    assert not any(disk.is_file(path) for path in names.values())