# anbykv

The in-memory parts and record formats of an LSM-tree key-value storage
engine. It is pure Python and has no dependencies.

## What is inside

- `anbykv.status` holds the error hierarchy. `StatusError` is the base
  class. Below it are `NotFoundError`, `CorruptionError`,
  `NotSupportedError`, `InvalidArgumentError` and `StorageIOError`. There is
  also a `Code` enumeration. An error's `str()` is prefixed by its kind, for
  example `"Corruption: VersionEdit: unknown tag"`.
- `anbykv.rng.Random` is a small deterministic Park–Miller generator. Its
  methods are `next`, `uniform`, `one_in` and `skewed`.
- `anbykv.skiplist.SkipList` is an ordered set that uses a three-way
  comparison function supplied by the caller. It supports `insert`, `in` and
  iteration, and raises `ValueError` when a duplicate is inserted. A
  `SkipListIterator` over it can `seek`, `seek_to_first`, `seek_to_last`,
  `next` and `prev`.
- `anbykv.memtable.MemTable` is a sorted in-memory table of versioned
  entries. `add(sequence, value_type, key, value)` records either a value or
  a deletion marker. Iterating yields `(internal_key, value)` pairs. The
  helpers `bytewise_compare`, `pack_internal_key` and `extract_user_key`
  work with the internal key form, which is the user key followed by an
  8-byte tag.
- `anbykv.snapshot.SnapshotList` keeps the live read snapshots in order from
  oldest to newest. Its methods are `new`, `delete`, `oldest` and `newest`.
- `anbykv.write_batch.WriteBatch` is a batch of puts and deletes held in its
  serialised form. It supports `contents` and `from_contents`, and `iterate`
  passes each operation to a `Handler`. `insert_into` applies the batch to a
  `MemTable`.
- `anbykv.options` defines the `Options`, `ReadOptions` and `WriteOptions`
  dataclasses and `CompressionType`. `sanitize_options` returns a copy with
  `max_open_files`, `write_buffer_size`, `max_file_size` and `block_size`
  clipped to workable ranges.
- `anbykv.logger.PosixLogger` writes `%`-formatted lines to a text stream.
  Each line starts with a local timestamp and the thread id. The logger is
  also a context manager that closes the stream on exit.
- `anbykv.version_edit` provides `VersionEdit` records with `encode`,
  `decode` and `debug_string`. It also has `FileMetaData`, and `find_file`,
  which runs a binary search over sorted table files.

## Example

```python
from anbykv.memtable import MemTable, ValueType, bytewise_compare
from anbykv.write_batch import WriteBatch
from anbykv.status import NotFoundError

mem = MemTable(bytewise_compare)

batch = WriteBatch()
batch.put(b"user-key-1", b"the-value")
batch.delete(b"old-key")
batch.insert_into(mem)

print(mem.get(b"user-key-1", 10))   # b'the-value'

mem.add(100, ValueType.DELETION, b"user-key-1", b"")
try:
    mem.get(b"user-key-1", 100)
except NotFoundError:
    print("deleted")
```

A lookup in a memtable gives one of three results:

- it returns the value when the newest entry visible at the given sequence
  number is a value;
- it raises `NotFoundError` when that entry is a deletion;
- it returns `None` when the memtable has no entry for the key.

## What it does not do

This package is not a working database. It has no database handle to open,
no write-ahead log, and no sorted table files on disk. It also has no
compaction, no block cache and no server or command-line program.
`CompressionType` and the other options only describe settings; nothing in
the package compresses data or acts on those fields. Everything is kept in
memory. Persistence is limited to producing bytes, through
`WriteBatch.contents` and `VersionEdit.encode`, and parsing them again.

## Running the tests

```
pip install -e .[test]
pytest
```