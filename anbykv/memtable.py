"""In-memory sorted table of versioned key/value entries."""

from __future__ import annotations

import enum
import struct
from typing import Callable, Iterator, Optional, Tuple

from .skiplist import SkipList, SkipListIterator
from .status import NotFoundError

MAX_SEQUENCE_NUMBER = (1 << 56) - 1

_TAG = struct.Struct("<Q")
_TAG_SIZE = _TAG.size

Entry = Tuple[bytes, bytes]
UserCompare = Callable[[bytes, bytes], int]


class ValueType(enum.IntEnum):
    """Kind of an entry; the values are part of the on-disk format."""

    DELETION = 0
    VALUE = 1


# Lookups seek with the highest type so that an entry with the same
# sequence number sorts at or after the target.
_VALUE_TYPE_FOR_SEEK = ValueType.VALUE


def bytewise_compare(a: bytes, b: bytes) -> int:
    """Three-way lexicographic comparison of two byte strings."""
    a = bytes(a)
    b = bytes(b)
    return (a > b) - (a < b)


def pack_internal_key(user_key: bytes, sequence: int, value_type: int) -> bytes:
    """Append the 8-byte little-endian tag ``(sequence << 8) | type`` to a key."""
    if not 0 <= sequence <= MAX_SEQUENCE_NUMBER:
        raise ValueError(f"sequence number out of range: {sequence}")
    kind = ValueType(value_type)
    return bytes(user_key) + _TAG.pack((sequence << 8) | kind)


def extract_user_key(internal_key: bytes) -> bytes:
    """Return the user key part of an internal key."""
    if len(internal_key) < _TAG_SIZE:
        raise ValueError("internal key is shorter than its 8-byte tag")
    return bytes(internal_key[:-_TAG_SIZE])


def _tag_of(internal_key: bytes) -> int:
    return _TAG.unpack_from(internal_key, len(internal_key) - _TAG_SIZE)[0]


def _varint_length(value: int) -> int:
    length = 1
    while value >= 0x80:
        value >>= 7
        length += 1
    return length


class MemTable:
    """Sorted in-memory store keyed by (user key, sequence number).

    Entries for the same user key are ordered newest first.
    """

    def __init__(self, user_compare: UserCompare = bytewise_compare) -> None:
        self._user_compare = user_compare
        self._table: SkipList[Entry] = SkipList(self._compare_entries)
        self._memory = 0

    def _compare_internal(self, a: bytes, b: bytes) -> int:
        result = self._user_compare(a[:-_TAG_SIZE], b[:-_TAG_SIZE])
        if result:
            return result
        a_tag = _tag_of(a)
        b_tag = _tag_of(b)
        if a_tag > b_tag:
            return -1
        if a_tag < b_tag:
            return 1
        return 0

    def _compare_entries(self, a: Entry, b: Entry) -> int:
        return self._compare_internal(a[0], b[0])

    def add(self, sequence: int, value_type: int, key: bytes, value: bytes) -> None:
        """Record ``key`` at ``sequence`` as a value or as a deletion."""
        internal_key = pack_internal_key(key, sequence, value_type)
        value = bytes(value)
        self._table.insert((internal_key, value))
        self._memory += (
            _varint_length(len(internal_key))
            + len(internal_key)
            + _varint_length(len(value))
            + len(value)
        )

    def get(self, key: bytes, sequence: int) -> Optional[bytes]:
        """Return the newest value of ``key`` visible at ``sequence``.

        Returns None when the table holds no entry for the key, and raises
        NotFoundError when the newest visible entry is a deletion.
        """
        target = pack_internal_key(key, sequence, _VALUE_TYPE_FOR_SEEK)
        cursor = SkipListIterator(self._table)
        cursor.seek((target, b""))
        if not cursor.valid():
            return None
        internal_key, value = cursor.key()
        if self._user_compare(internal_key[:-_TAG_SIZE], bytes(key)) != 0:
            return None
        kind = _tag_of(internal_key) & 0xFF
        if kind == ValueType.VALUE:
            return value
        if kind == ValueType.DELETION:
            raise NotFoundError()
        return None

    def approximate_memory_usage(self) -> int:
        """Estimated number of bytes held by the entries."""
        return self._memory

    def __iter__(self) -> Iterator[Entry]:
        """Yield ``(internal_key, value)`` pairs in table order."""
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)