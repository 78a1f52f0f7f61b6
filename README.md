# pagestore

This is the storage layer of a small relational engine. It stores fixed-size pages in files on disk and caches them in an in-memory buffer pool with LRU eviction. Table schemas are kept as catalogue metadata in a plain-text format. Transactions keep records of their writes and of the data they lock.

The package has no dependencies outside the standard library.

## Modules

- `pagestore.disk_manager.DiskManager` manages files and the pages in them.
  - It creates, opens, closes and removes files (`create_file`, `open_file`, `close_file`, `destroy_file`), and creates and removes directories (`create_dir`, `destroy_dir`).
  - `read_page` and `write_page` address data by page number. Each page is `PAGE_SIZE` (4096) bytes.
  - `allocate_page` gives out page numbers for each file in increasing order, starting from 0. `set_fd2pageno` and `get_fd2pageno` set and read that counter.
  - `write_log` appends to the log file `db.log` in the current directory. `read_log(size, offset)` reads from it and returns `None` when `offset` is past the end of the file.
- `pagestore.page` has two classes:
  - `PageId` holds a file descriptor and a page number. `key()` packs both into one integer.
  - `Page` is a buffer frame. It holds a `bytearray` of page data, an `is_dirty` flag, a `pin_count` and a `page_lsn` property that is stored in the first four bytes of the page.
- `pagestore.buffer_pool.BufferPoolManager` is a fixed pool of frames with LRU eviction.
  - `new_page(fd)` and `fetch_page(page_id)` pin a page and return it. They return `None` when every frame is pinned.
  - `unpin_page`, `flush_page`, `delete_page` and `flush_all_pages(fd)` manage cached pages.
  - A dirty page is written back to disk before its frame is reused.
- `pagestore.common` holds the shared constants and the types `Rid`, `ColType`, `coltype2str`, `TabCol`, `Value`, `CompOp`, `Condition` and `SetClause`.
  - `Value.init_raw(length)` encodes a value into fixed-width bytes:
    - INT and FLOAT become little-endian 4-byte values.
    - STRING is zero-padded to `length`.
    - A string longer than `length` raises `StringOverflowError`.
- `pagestore.meta` holds the schema types `ColMeta`, `IndexMeta`, `TabMeta` and `DbMeta`.
  - `DbMeta.dumps()` writes the whitespace-separated catalogue format, with tables ordered by name.
  - `DbMeta.loads(text)` reads that format back.
  - Lookups of missing items raise `TableNotFoundError`, `ColumnNotFoundError` or `IndexNotFoundError`.
- `pagestore.system` provides `ColDef` and `SmManager`.
  - `SmManager.create_db` creates a database directory that holds a `db.meta` catalogue and a `db.log` file.
  - `drop_db` removes the directory.
  - `flush_meta` writes the current catalogue to `db.meta` in the working directory.
  - `show_tables` and `desc_table` render tables into a `Context`. `show_tables` also appends the table list to `output.txt`.
- `pagestore.printer` provides `Context` and `RecordPrinter`.
  - They render results as a text table with 16-character columns; longer values are cut short and end in `...`.
  - The output buffer is limited to 8192 bytes. When it fills, further output is dropped and `print_record_count` adds a `... ...` line.
  - `Context.output()` returns the text written so far.
- `pagestore.transaction` provides `Transaction`, `WriteRecord`, `LockDataId` (with `table`, `record` and `key()`) and the enums `TransactionState`, `IsolationLevel`, `WType`, `LockDataType` and `AbortReason`. It also provides `TransactionAbortException`, whose `info()` explains why a transaction was aborted.
- `pagestore.errors` defines `RMDBError` and the errors derived from it. Every message starts with `Error: `.

## Example

```python
from pagestore.disk_manager import DiskManager
from pagestore.buffer_pool import BufferPoolManager
from pagestore.page import PageId

disk = DiskManager()
disk.create_file("data.bin")
fd = disk.open_file("data.bin")

pool = BufferPoolManager(10, disk)
page = pool.new_page(fd)
page.data[:5] = b"Hello"
pool.unpin_page(page.id, True)
pool.flush_all_pages(fd)

page = pool.fetch_page(PageId(fd, 0))
assert bytes(page.data[:5]) == b"Hello"
pool.unpin_page(page.id, False)

disk.close_file(fd)
```

Rendering a catalogue:

```python
from pagestore.common import ColType
from pagestore.meta import ColMeta, DbMeta, TabMeta
from pagestore.printer import Context, RecordPrinter

db = DbMeta("shop")
db.set_tab_meta("items", TabMeta("items", [ColMeta("items", "id", ColType.INT, 4, 0)]))
assert DbMeta.loads(db.dumps()) == db

ctx = Context()
printer = RecordPrinter(1)
printer.print_separator(ctx)
printer.print_record(["items"], ctx)
printer.print_separator(ctx)
print(ctx.output())
```

## What it does not do

This package covers pages, buffering, the catalogue and transaction bookkeeping. It does not include the following:

- It does not store table rows as records, and it has no indexes.
- It does not parse or execute SQL, and it has no server or command-line program.
- It has no lock manager and no transaction manager. `Transaction` and `LockDataId` only record state; nothing begins, commits or aborts a transaction.
- `SmManager` can create and drop databases and list and describe tables. It cannot open a database or create, drop or index tables.

## Running the tests

```
pip install -e ".[test]"
pytest
```