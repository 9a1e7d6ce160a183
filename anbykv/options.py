"""Settings that control a database, its reads and its writes."""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Callable, Optional

from .memtable import bytewise_compare

# Files kept open by the database that are not table files.
_NUM_NON_TABLE_CACHE_FILES = 10


class CompressionType(enum.IntEnum):
    """Block compression method; the values are part of the on-disk format."""

    NONE = 0x0
    SNAPPY = 0x1
    ZSTD = 0x2


@dataclasses.dataclass
class Options:
    """Settings that affect the behaviour and performance of a database."""

    comparator: Callable[[bytes, bytes], int] = bytewise_compare
    create_if_missing: bool = False
    error_if_exists: bool = False
    paranoid_checks: bool = False
    info_log: Optional[Any] = None
    write_buffer_size: int = 4 * 1024 * 1024
    max_open_files: int = 1000
    block_cache: Optional[Any] = None
    block_size: int = 4 * 1024
    block_restart_interval: int = 16
    max_file_size: int = 2 * 1024 * 1024
    compression: CompressionType = CompressionType.SNAPPY
    zstd_compression_level: int = 1
    reuse_logs: bool = False
    filter_policy: Optional[Any] = None


@dataclasses.dataclass
class ReadOptions:
    """Settings for a single read."""

    verify_checksums: bool = False
    fill_cache: bool = True
    snapshot: Optional[Any] = None


@dataclasses.dataclass
class WriteOptions:
    """Settings for a single write."""

    sync: bool = False


def _clip(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def sanitize_options(options: Options) -> Options:
    """Return a copy of ``options`` with sizes clipped to workable ranges."""
    return dataclasses.replace(
        options,
        max_open_files=_clip(
            options.max_open_files, 64 + _NUM_NON_TABLE_CACHE_FILES, 50000
        ),
        write_buffer_size=_clip(options.write_buffer_size, 64 << 10, 1 << 30),
        max_file_size=_clip(options.max_file_size, 1 << 20, 1 << 30),
        block_size=_clip(options.block_size, 1 << 10, 4 << 20),
    )