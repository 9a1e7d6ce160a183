"""An ordered skip list with a caller-supplied three-way comparison."""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar

from .rng import Random

K = TypeVar("K")

_MAX_HEIGHT = 12
_BRANCHING = 4


class _Node:
    __slots__ = ("key", "next")

    def __init__(self, key: Any, height: int) -> None:
        self.key = key
        self.next: List[Optional[_Node]] = [None] * height


class SkipList(Generic[K]):
    """A sorted set of keys; duplicates are rejected.

    ``compare(a, b)`` must return a negative number, zero or a positive
    number as ``a`` is less than, equal to or greater than ``b``.
    """

    def __init__(self, compare: Callable[[K, K], int]) -> None:
        self._compare = compare
        self._head = _Node(None, _MAX_HEIGHT)
        self._max_height = 1
        self._rnd = Random(0xDEADBEEF)
        self._size = 0

    def _random_height(self) -> int:
        height = 1
        while height < _MAX_HEIGHT and self._rnd.one_in(_BRANCHING):
            height += 1
        return height

    def _key_is_after_node(self, key: K, node: Optional[_Node]) -> bool:
        return node is not None and self._compare(node.key, key) < 0

    def _find_greater_or_equal(
        self, key: K, prev: Optional[List[_Node]] = None
    ) -> Optional[_Node]:
        node = self._head
        level = self._max_height - 1
        while True:
            nxt = node.next[level]
            if self._key_is_after_node(key, nxt):
                node = nxt
            else:
                if prev is not None:
                    prev[level] = node
                if level == 0:
                    return nxt
                level -= 1

    def _find_less_than(self, key: K) -> _Node:
        node = self._head
        level = self._max_height - 1
        while True:
            nxt = node.next[level]
            if nxt is None or self._compare(nxt.key, key) >= 0:
                if level == 0:
                    return node
                level -= 1
            else:
                node = nxt

    def _find_last(self) -> _Node:
        node = self._head
        level = self._max_height - 1
        while True:
            nxt = node.next[level]
            if nxt is None:
                if level == 0:
                    return node
                level -= 1
            else:
                node = nxt

    def insert(self, key: K) -> None:
        """Insert ``key``; raises ValueError if an equal key is present."""
        prev: List[_Node] = [self._head] * _MAX_HEIGHT
        found = self._find_greater_or_equal(key, prev)
        if found is not None and self._compare(key, found.key) == 0:
            raise ValueError("key already present in skip list")

        height = self._random_height()
        if height > self._max_height:
            for level in range(self._max_height, height):
                prev[level] = self._head
            self._max_height = height

        node = _Node(key, height)
        for level in range(height):
            node.next[level] = prev[level].next[level]
            prev[level].next[level] = node
        self._size += 1

    def __contains__(self, key: object) -> bool:
        node = self._find_greater_or_equal(key)  # type: ignore[arg-type]
        return node is not None and self._compare(key, node.key) == 0  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[K]:
        node = self._head.next[0]
        while node is not None:
            yield node.key
            node = node.next[0]

    def __len__(self) -> int:
        return self._size


class SkipListIterator(Generic[K]):
    """A cursor over a SkipList that can move in both directions.

    A new iterator is not positioned; call one of the seek methods first.
    """

    def __init__(self, skiplist: SkipList[K]) -> None:
        self._list = skiplist
        self._node: Optional[_Node] = None

    def valid(self) -> bool:
        """True if the iterator is positioned at an entry."""
        return self._node is not None

    def _require_valid(self) -> _Node:
        if self._node is None:
            raise LookupError("iterator is not positioned at an entry")
        return self._node

    def key(self) -> K:
        """Key at the current position."""
        return self._require_valid().key

    def next(self) -> None:
        """Move to the following entry."""
        self._node = self._require_valid().next[0]

    def prev(self) -> None:
        """Move to the preceding entry."""
        node = self._list._find_less_than(self._require_valid().key)
        self._node = None if node is self._list._head else node

    def seek(self, target: K) -> None:
        """Move to the first entry with a key >= target."""
        self._node = self._list._find_greater_or_equal(target)

    def seek_to_first(self) -> None:
        """Move to the first entry, if any."""
        self._node = self._list._head.next[0]

    def seek_to_last(self) -> None:
        """Move to the last entry, if any."""
        node = self._list._find_last()
        self._node = None if node is self._list._head else node