"""A batch of updates applied to the database atomically.

Layout: an 8-byte little-endian sequence number, a 4-byte little-endian
count, then one record per update: a type byte followed by a
length-prefixed key and, for puts, a length-prefixed value.
"""

from __future__ import annotations

import abc
import struct
from typing import Optional, Tuple

from .memtable import MemTable, ValueType
from .status import CorruptionError

_HEADER = 12
_SEQUENCE = struct.Struct("<Q")
_COUNT = struct.Struct("<I")


def _put_varint32(dst: bytearray, value: int) -> None:
    while value >= 0x80:
        dst.append((value & 0x7F) | 0x80)
        value >>= 7
    dst.append(value)


def _put_length_prefixed(dst: bytearray, data: bytes) -> None:
    _put_varint32(dst, len(data))
    dst += data


def _get_varint32(data: bytes, pos: int) -> Optional[Tuple[int, int]]:
    result = 0
    for shift in range(0, 35, 7):
        if pos >= len(data):
            return None
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & 0xFFFFFFFF, pos
    return None


def _get_length_prefixed(data: bytes, pos: int) -> Optional[Tuple[bytes, int]]:
    decoded = _get_varint32(data, pos)
    if decoded is None:
        return None
    length, pos = decoded
    end = pos + length
    if end > len(data):
        return None
    return data[pos:end], end


class Handler(abc.ABC):
    """Receives the updates of a batch in order."""

    @abc.abstractmethod
    def put(self, key: bytes, value: bytes) -> None:
        """Called for each stored key/value pair."""

    @abc.abstractmethod
    def delete(self, key: bytes) -> None:
        """Called for each deleted key."""


class _MemTableInserter(Handler):
    def __init__(self, sequence: int, memtable: MemTable) -> None:
        self.sequence = sequence
        self.memtable = memtable

    def put(self, key: bytes, value: bytes) -> None:
        self.memtable.add(self.sequence, ValueType.VALUE, key, value)
        self.sequence += 1

    def delete(self, key: bytes) -> None:
        self.memtable.add(self.sequence, ValueType.DELETION, key, b"")
        self.sequence += 1


class WriteBatch:
    """An ordered, serialisable list of put and delete operations."""

    def __init__(self) -> None:
        self._rep = bytearray(_HEADER)

    def _set_count(self, count: int) -> None:
        _COUNT.pack_into(self._rep, 8, count & 0xFFFFFFFF)

    def put(self, key: bytes, value: bytes) -> None:
        """Store the mapping ``key -> value``."""
        self._set_count(self.count() + 1)
        self._rep.append(ValueType.VALUE)
        _put_length_prefixed(self._rep, bytes(key))
        _put_length_prefixed(self._rep, bytes(value))

    def delete(self, key: bytes) -> None:
        """Erase the mapping for ``key``, if any."""
        self._set_count(self.count() + 1)
        self._rep.append(ValueType.DELETION)
        _put_length_prefixed(self._rep, bytes(key))

    def clear(self) -> None:
        """Drop all buffered updates."""
        self._rep = bytearray(_HEADER)

    def approximate_size(self) -> int:
        """Size in bytes of the serialised batch."""
        return len(self._rep)

    def append(self, source: "WriteBatch") -> None:
        """Copy the operations of ``source`` onto the end of this batch."""
        self._set_count(self.count() + source.count())
        self._rep += source._rep[_HEADER:]

    def iterate(self, handler: Handler) -> None:
        """Feed every operation to ``handler``; raises CorruptionError on bad data."""
        rep = bytes(self._rep)
        if len(rep) < _HEADER:
            raise CorruptionError("malformed WriteBatch (too small)")
        pos = _HEADER
        found = 0
        while pos < len(rep):
            found += 1
            tag = rep[pos]
            pos += 1
            if tag == ValueType.VALUE:
                key_part = _get_length_prefixed(rep, pos)
                value_part = (
                    _get_length_prefixed(rep, key_part[1]) if key_part else None
                )
                if key_part is None or value_part is None:
                    raise CorruptionError("bad WriteBatch Put")
                pos = value_part[1]
                handler.put(key_part[0], value_part[0])
            elif tag == ValueType.DELETION:
                key_part = _get_length_prefixed(rep, pos)
                if key_part is None:
                    raise CorruptionError("bad WriteBatch Delete")
                pos = key_part[1]
                handler.delete(key_part[0])
            else:
                raise CorruptionError("unknown WriteBatch tag")
        if found != self.count():
            raise CorruptionError("WriteBatch has wrong count")

    def count(self) -> int:
        """Number of operations recorded in the header."""
        return _COUNT.unpack_from(self._rep, 8)[0]

    def sequence(self) -> int:
        """Sequence number assigned to the first operation."""
        return _SEQUENCE.unpack_from(self._rep, 0)[0]

    def contents(self) -> bytes:
        """The serialised batch."""
        return bytes(self._rep)

    @classmethod
    def from_contents(cls, contents: bytes) -> "WriteBatch":
        """Build a batch from its serialised form."""
        data = bytes(contents)
        if len(data) < _HEADER:
            raise CorruptionError("malformed WriteBatch (too small)")
        batch = cls()
        batch._rep = bytearray(data)
        return batch

    def insert_into(self, memtable: MemTable) -> None:
        """Apply the operations to ``memtable`` with consecutive sequence numbers."""
        self.iterate(_MemTableInserter(self.sequence(), memtable))