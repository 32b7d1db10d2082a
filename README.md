# rmdbstore

The storage core of a small relational database engine, written in pure Python.
It has these modules:

- **`rmdbstore.disk_manager`**: `DiskManager` creates, opens, closes and removes
  files and directories. It reads and writes fixed-size pages, hands out page
  numbers for each file and appends to and reads from the log file (`db.log`).
- **`rmdbstore.replacer`**: `Replacer` is the abstract interface. `LRUReplacer`
  tracks unpinned buffer frames and picks the least recently unpinned one to
  evict.
- **`rmdbstore.page`**: `PageId` is a file descriptor plus a page number.
  `Page` is one in-memory frame of 4096 bytes, with `is_dirty`, `pin_count` and
  a `page_lsn` property.
- **`rmdbstore.buffer_pool_manager`**: `BufferPoolManager` caches pages in a
  fixed number of frames. It pins and unpins pages, writes dirty pages back and
  evicts frames through the LRU replacer.
- **`rmdbstore.sm_meta`**: catalog metadata (`ColMeta`, `IndexMeta`, `TabMeta`,
  `DbMeta`) in a plain-text format.
- **`rmdbstore.sm_manager`**: `SmManager` creates and drops database directories
  and writes the catalog file. `ColDef` describes a column in a table
  definition.
- **`rmdbstore.defs`**: the shared value types `Rid`, `ColType`, `TabCol`,
  `Value`, `CompOp`, `Condition`, `SetClause` and the `RecScan` cursor
  interface.
- **`rmdbstore.txn_defs`** and **`rmdbstore.transaction`**: transaction states,
  isolation levels, write records, lock identifiers (`LockDataId`), the
  `TransactionAbortException`, undo logs and the `Transaction` object.
- **`rmdbstore.errors`**: the engine's exception hierarchy, rooted at
  `RMDBError`. It also has `DbException`, a `RuntimeError` tagged with an
  `ExceptionType`.
- **`rmdbstore.config`**: engine-wide constants such as `PAGE_SIZE`,
  `INVALID_PAGE_ID` and `BUFFER_POOL_SIZE`.

## Installation

```
pip install .
```

To install and run the test suite:

```
pip install ".[test]"
pytest
```

## Usage

### The LRU replacer

```python
from rmdbstore.replacer import LRUReplacer

replacer = LRUReplacer(7)
for frame in (1, 2, 3, 4, 5, 6, 1):
    replacer.unpin(frame)
assert len(replacer) == 6          # a frame that is unpinned twice is counted once

assert replacer.victim() == 1      # the least recently unpinned frame goes first
replacer.pin(4)                    # a pinned frame can no longer be evicted
```

`victim()` returns `None` when no frame can be evicted.

### Files and pages on disk

```python
from rmdbstore.disk_manager import DiskManager

disk = DiskManager()
disk.create_file("table.dat")
fd = disk.open_file("table.dat")

page_no = disk.allocate_page(fd)
disk.write_page(fd, page_no, b"\x01" * 4096)
data = disk.read_page(fd, page_no, 4096)

disk.close_file(fd)
disk.destroy_file("table.dat")
```

These operations raise errors as follows:

- Creating a file that already exists raises `DbFileExistsError`.
- Opening or removing a file that does not exist raises `DbFileNotFoundError`.
- Removing a file that is still open raises `FileNotClosedError`.
- Closing, or asking the name of, a descriptor that this manager did not open raises `FileNotOpenError`.
- A short read or write raises `InternalError`.
- A failed system call raises `UnixError`.

`read_log(size, offset)` returns `None` when `offset` lies past the end of the log.

### The buffer pool

```python
from rmdbstore.buffer_pool_manager import BufferPoolManager
from rmdbstore.disk_manager import DiskManager
from rmdbstore.page import PageId

disk = DiskManager()
disk.create_file("table.dat")
fd = disk.open_file("table.dat")

pool = BufferPoolManager(10, disk)
page = pool.new_page(fd)                    # pinned and zeroed; its id is page.id
page.data[:5] = b"Hello"
pool.unpin_page(page.id, True)              # mark dirty; the frame may now be evicted

page = pool.fetch_page(PageId(fd, 0))       # read back, from the cache or from disk
pool.unpin_page(PageId(fd, 0), False)
pool.flush_all_pages(fd)                    # write every dirty page of the file
```

The pool methods report failure through their return values:

- `fetch_page` and `new_page` return `None` when every frame is pinned.
- `unpin_page` returns `False` for a page that is not cached or is not pinned.
- `flush_page` returns `False` for a page that is not cached. Otherwise it writes the page whether or not it is dirty.
- `delete_page` returns `False` while the page is still pinned.

### Catalog metadata

```python
from rmdbstore.defs import ColType
from rmdbstore.sm_meta import ColMeta, DbMeta, TabMeta

db = DbMeta("shop")
db.set_table("item", TabMeta("item", [ColMeta("item", "id", ColType.TYPE_INT, 4, 0)]))
text = db.dumps()
assert DbMeta.loads(text).get_table("item").get_col("id").len == 4
```

`DbMeta.dumps()` writes the catalog as whitespace-separated text, with tables
in name order. `DbMeta.loads(text)` reads it back and raises `ValueError` on
malformed text. Looking up a missing table, column or index raises
`TableNotFoundError`, `ColumnNotFoundError` or `IndexNotFoundError`.

`SmManager.create_db(name)` makes a directory holding an empty `db.meta` and
`db.log`. It raises `DatabaseExistsError` if the directory already exists.
`drop_db(name)` removes the directory and raises `DatabaseNotFoundError` if it
is missing. `flush_meta()` writes the catalog of `SmManager.db` to `db.meta`
in the current directory.

## What the package does not do

This is the storage layer only. The package has none of the following:

- a SQL parser, query planner or executor, and no network server or command-line program;
- record files or indexes, and no way to open or close a database, create or drop tables, or build indexes through `SmManager`;
- a lock manager, transaction manager, log manager or crash recovery.

`Transaction`, `WriteRecord`, `LockDataId` and the undo-log types are data
structures, and nothing in the package acts on them.