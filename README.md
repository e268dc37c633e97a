# nebuladb

A small document-oriented storage engine. Documents are id/data byte
pairs packed into checksummed blocks that are written to a `blocks.bin`
file per collection. The package also defines the binary format of
write-ahead log entries.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Storage

`nebuladb.storage.engine.Storage` opens a data directory and hands out
`Collection` objects (`nebuladb.storage.collection`). Each collection
keeps its documents in a `BlockManager` (`nebuladb.storage.manager`),
which buffers them in an active block and writes the block to disk when
it reaches `StorageConfig.flush_threshold` bytes or when the collection
is closed.

```python
from nebuladb.storage.engine import Storage

with Storage.open("./data") as storage:
    users = storage.open_collection("users")

    users.insert(b"alice", b'{"name": "Alice"}')
    users.close()                       # writes the active block to blocks.bin

    users.insert(b"bob", b'{"name": "Bob"}')
    print(users.get(b"bob"))            # b'{"name": "Bob"}'
    print(users.delete(b"bob"))         # True: a tombstone entry is written
    print(users.get(b"bob"))            # None

    print(users.scan())                 # ids picked out of the active block and blocks.bin
```

`Storage` also offers `close_collection(name)`, `drop_collection(name)`
(which removes the collection's directory) and `close()`.

Deletion never removes data: `Collection.delete` stores a tombstone
entry with the id `_<id>_`, and `get` and `scan` hide documents that
have one.

### Blocks

`nebuladb.storage.block` holds the on-disk format:

- `BlockHeader` – magic `NBLD`, version, compression byte, document
  count, sizes and creation time (34 bytes, little endian).
- `DocumentEntry` – `[id length (2)][id][data length (4)][data]`.
- `BlockFooter` – a 32-bit checksum and the magic again (8 bytes).
- `Block` – `create`, `add_document`, `to_bytes`, `from_bytes` and
  `compute_checksum` (a wrapping sum over header fields and data).

Malformed input raises `nebuladb.core.NebulaError`.

### Configuration

- `nebuladb.core.Config` – `data_dir` (`/tmp/nebuladb`) and `max_size`
  (1 GiB).
- `nebuladb.storage.config.StorageConfig` – `base`, `block_size`
  (4 MiB), `compression` (`CompressionType.ZSTD`) and `flush_threshold`
  (1000).
- `nebuladb.storage.compression.compress` / `decompress` accept every
  `CompressionType` but store data unchanged.
- `nebuladb.components` holds `ArchiveConfig`, `GraphConfig`,
  `IndexConfig` and `QueryConfig`, plain settings objects with range
  checks.

### Other helpers

- `nebuladb.storage.files.FileManager` creates, lists, opens and deletes
  collection directories and files under a data directory.
- `nebuladb.storage.database.DatabaseStore` holds a database directory
  with its `StorageConfig` and `WalConfig` and reports `uptime_secs()`
  and `collection_count()`.

## Write-ahead log entries

`nebuladb.wal.entry` encodes and decodes log entries:

```python
from nebuladb.wal.entry import EntryType, WalEntry

entry = WalEntry.create(EntryType.INSERT, 1, 0, b"alice", b'{"name": "Alice"}')
raw = entry.to_bytes()
decoded, used = WalEntry.from_bytes(raw)
assert decoded.data == entry.data and used == len(raw)
```

`WalEntry.checkpoint`, `begin_tx`, `commit_tx` and `abort_tx` build
marker entries. `nebuladb.wal.config.WalConfig` holds `dir_path`,
`max_file_size`, `sync_on_write` and `checkpoint_interval`.

## What the package does not do

- It does not write log files, track transactions or recover from a
  log: only the entry format and its settings are provided, and the
  storage engine does not log its writes.
- Lookups of stored blocks read each block as if it had the size of an
  empty block, so `Collection.get` reliably finds documents only while
  they are still in the active block (and once `blocks.bin` exists).
- There is no query language, index, graph traversal or archiving; the
  corresponding configuration classes are settings only.
- There is no command-line tool and no network server.