"""Building blocks of an LSM-tree key-value storage engine: errors, skip list, memtable, snapshots, write batches, options, logging and version edits."""

__version__ = "0.1.0"