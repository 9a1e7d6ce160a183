"""Descriptions of changes between versions of the on-disk file set."""

from __future__ import annotations

import bisect
import dataclasses
import enum
import functools
import struct
from typing import Callable, List, Optional, Sequence, Set, Tuple

from .status import CorruptionError

NUM_LEVELS = 7

_TAG = struct.Struct("<Q")


class _Tag(enum.IntEnum):
    # These numbers are written to disk and must not change.
    COMPARATOR = 1
    LOG_NUMBER = 2
    NEXT_FILE_NUMBER = 3
    LAST_SEQUENCE = 4
    COMPACT_POINTER = 5
    DELETED_FILE = 6
    NEW_FILE = 7
    # 8 was used for large value refs
    PREV_LOG_NUMBER = 9


@dataclasses.dataclass
class FileMetaData:
    """What a version knows about one table file."""

    number: int = 0
    file_size: int = 0
    smallest: bytes = b""
    largest: bytes = b""
    refs: int = 0
    allowed_seeks: int = 1 << 30


def _put_varint(dst: bytearray, value: int) -> None:
    if value < 0:
        raise ValueError(f"cannot encode negative number: {value}")
    while value >= 0x80:
        dst.append((value & 0x7F) | 0x80)
        value >>= 7
    dst.append(value)


def _put_length_prefixed(dst: bytearray, data: bytes) -> None:
    _put_varint(dst, len(data))
    dst += data


class _Reader:
    """Cursor over encoded bytes; every read returns None on failure."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def exhausted(self) -> bool:
        return self.pos >= len(self.data)

    def _varint(self, bits: int) -> Optional[int]:
        result = 0
        pos = self.pos
        for shift in range(0, bits, 7):
            if pos >= len(self.data):
                return None
            byte = self.data[pos]
            pos += 1
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                self.pos = pos
                return result & ((1 << bits) - 1)
        return None

    def varint32(self) -> Optional[int]:
        return self._varint(32)

    def varint64(self) -> Optional[int]:
        return self._varint(64)

    def length_prefixed(self) -> Optional[bytes]:
        start = self.pos
        length = self.varint32()
        if length is None:
            return None
        end = self.pos + length
        if end > len(self.data):
            self.pos = start
            return None
        self.pos = end
        return self.data[end - length:end]

    def internal_key(self) -> Optional[bytes]:
        key = self.length_prefixed()
        if not key:
            return None
        return key

    def level(self) -> Optional[int]:
        value = self.varint32()
        if value is None or value >= NUM_LEVELS:
            return None
        return value


def _escape(data: bytes) -> str:
    return "".join(
        chr(b) if 0x20 <= b < 0x7F else f"\\x{b:02x}" for b in data
    )


def _describe_key(key: bytes) -> str:
    if len(key) < _TAG.size:
        return "(bad)" + _escape(key)
    tag = _TAG.unpack_from(key, len(key) - _TAG.size)[0]
    kind = tag & 0xFF
    if kind > 1:
        return "(bad)" + _escape(key)
    return f"'{_escape(key[:-_TAG.size])}' @ {tag >> 8} : {kind}"


@dataclasses.dataclass
class VersionEdit:
    """A set of changes to apply to a version; fields left as None are unset."""

    comparator: Optional[str] = None
    log_number: Optional[int] = None
    prev_log_number: Optional[int] = None
    next_file_number: Optional[int] = None
    last_sequence: Optional[int] = None
    compact_pointers: List[Tuple[int, bytes]] = dataclasses.field(default_factory=list)
    deleted_files: Set[Tuple[int, int]] = dataclasses.field(default_factory=set)
    new_files: List[Tuple[int, FileMetaData]] = dataclasses.field(default_factory=list)

    def clear(self) -> None:
        """Reset every field to unset or empty."""
        self.comparator = None
        self.log_number = None
        self.prev_log_number = None
        self.next_file_number = None
        self.last_sequence = None
        self.compact_pointers = []
        self.deleted_files = set()
        self.new_files = []

    def set_compact_pointer(self, level: int, key: bytes) -> None:
        """Record where the next compaction at ``level`` should start."""
        self.compact_pointers.append((level, bytes(key)))

    def add_file(
        self, level: int, number: int, file_size: int, smallest: bytes, largest: bytes
    ) -> None:
        """Add table file ``number`` at ``level`` covering [smallest, largest]."""
        meta = FileMetaData(
            number=number,
            file_size=file_size,
            smallest=bytes(smallest),
            largest=bytes(largest),
        )
        self.new_files.append((level, meta))

    def remove_file(self, level: int, number: int) -> None:
        """Delete table file ``number`` from ``level``."""
        self.deleted_files.add((level, number))

    def encode(self) -> bytes:
        """Serialise the edit."""
        dst = bytearray()
        if self.comparator is not None:
            _put_varint(dst, _Tag.COMPARATOR)
            _put_length_prefixed(dst, self.comparator.encode("utf-8", "surrogateescape"))
        for tag, value in (
            (_Tag.LOG_NUMBER, self.log_number),
            (_Tag.PREV_LOG_NUMBER, self.prev_log_number),
            (_Tag.NEXT_FILE_NUMBER, self.next_file_number),
            (_Tag.LAST_SEQUENCE, self.last_sequence),
        ):
            if value is not None:
                _put_varint(dst, tag)
                _put_varint(dst, value)
        for level, key in self.compact_pointers:
            _put_varint(dst, _Tag.COMPACT_POINTER)
            _put_varint(dst, level)
            _put_length_prefixed(dst, key)
        for level, number in sorted(self.deleted_files):
            _put_varint(dst, _Tag.DELETED_FILE)
            _put_varint(dst, level)
            _put_varint(dst, number)
        for level, meta in self.new_files:
            _put_varint(dst, _Tag.NEW_FILE)
            _put_varint(dst, level)
            _put_varint(dst, meta.number)
            _put_varint(dst, meta.file_size)
            _put_length_prefixed(dst, meta.smallest)
            _put_length_prefixed(dst, meta.largest)
        return bytes(dst)

    @classmethod
    def decode(cls, data: bytes) -> "VersionEdit":
        """Parse a serialised edit; raises CorruptionError on malformed input."""
        edit = cls()
        reader = _Reader(bytes(data))
        msg: Optional[str] = None
        while msg is None:
            tag = reader.varint32()
            if tag is None:
                break
            if tag == _Tag.COMPARATOR:
                name = reader.length_prefixed()
                if name is None:
                    msg = "comparator name"
                else:
                    edit.comparator = name.decode("utf-8", "surrogateescape")
            elif tag in (
                _Tag.LOG_NUMBER,
                _Tag.PREV_LOG_NUMBER,
                _Tag.NEXT_FILE_NUMBER,
                _Tag.LAST_SEQUENCE,
            ):
                field, label = {
                    _Tag.LOG_NUMBER: ("log_number", "log number"),
                    _Tag.PREV_LOG_NUMBER: ("prev_log_number", "previous log number"),
                    _Tag.NEXT_FILE_NUMBER: ("next_file_number", "next file number"),
                    _Tag.LAST_SEQUENCE: ("last_sequence", "last sequence number"),
                }[_Tag(tag)]
                value = reader.varint64()
                if value is None:
                    msg = label
                else:
                    setattr(edit, field, value)
            elif tag == _Tag.COMPACT_POINTER:
                level = reader.level()
                key = reader.internal_key() if level is not None else None
                if level is None or key is None:
                    msg = "compaction pointer"
                else:
                    edit.compact_pointers.append((level, key))
            elif tag == _Tag.DELETED_FILE:
                level = reader.level()
                number = reader.varint64() if level is not None else None
                if level is None or number is None:
                    msg = "deleted file"
                else:
                    edit.deleted_files.add((level, number))
            elif tag == _Tag.NEW_FILE:
                meta = cls._read_new_file(reader)
                if meta is None:
                    msg = "new-file entry"
                else:
                    edit.new_files.append(meta)
            else:
                msg = "unknown tag"
        if msg is None and not reader.exhausted():
            msg = "invalid tag"
        if msg is not None:
            raise CorruptionError("VersionEdit", msg)
        return edit

    @staticmethod
    def _read_new_file(reader: _Reader) -> Optional[Tuple[int, FileMetaData]]:
        level = reader.level()
        if level is None:
            return None
        number = reader.varint64()
        if number is None:
            return None
        file_size = reader.varint64()
        if file_size is None:
            return None
        smallest = reader.internal_key()
        if smallest is None:
            return None
        largest = reader.internal_key()
        if largest is None:
            return None
        return level, FileMetaData(
            number=number, file_size=file_size, smallest=smallest, largest=largest
        )

    def debug_string(self) -> str:
        """Human-readable multi-line description of the edit."""
        parts = ["VersionEdit {"]
        if self.comparator is not None:
            parts.append(f"\n  Comparator: {self.comparator}")
        if self.log_number is not None:
            parts.append(f"\n  LogNumber: {self.log_number}")
        if self.prev_log_number is not None:
            parts.append(f"\n  PrevLogNumber: {self.prev_log_number}")
        if self.next_file_number is not None:
            parts.append(f"\n  NextFile: {self.next_file_number}")
        if self.last_sequence is not None:
            parts.append(f"\n  LastSeq: {self.last_sequence}")
        for level, key in self.compact_pointers:
            parts.append(f"\n  CompactPointer: {level} {_describe_key(key)}")
        for level, number in sorted(self.deleted_files):
            parts.append(f"\n  RemoveFile: {level} {number}")
        for level, meta in self.new_files:
            parts.append(
                f"\n  AddFile: {level} {meta.number} {meta.file_size} "
                f"{_describe_key(meta.smallest)} .. {_describe_key(meta.largest)}"
            )
        parts.append("\n}\n")
        return "".join(parts)


def find_file(
    compare: Callable[[bytes, bytes], int],
    files: Sequence[FileMetaData],
    key: bytes,
) -> int:
    """Smallest index whose file's largest key is >= ``key``, or len(files).

    ``files`` must be sorted and non-overlapping under ``compare``.
    """
    wrap = functools.cmp_to_key(compare)
    return bisect.bisect_left(files, wrap(bytes(key)), key=lambda f: wrap(f.largest))