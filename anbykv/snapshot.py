"""Ordered list of live read snapshots."""

from __future__ import annotations

from typing import Iterator, List, Optional


class Snapshot:
    """An immutable handle to the database state at one sequence number."""

    __slots__ = ("_sequence_number", "_owner")

    def __init__(self, sequence_number: int, owner: Optional["SnapshotList"] = None) -> None:
        self._sequence_number = sequence_number
        self._owner = owner

    @property
    def sequence_number(self) -> int:
        """The sequence number this snapshot reads at."""
        return self._sequence_number

    def __repr__(self) -> str:
        return f"Snapshot(sequence_number={self._sequence_number})"


class SnapshotList:
    """Snapshots kept in creation order, oldest first."""

    def __init__(self) -> None:
        self._snapshots: List[Snapshot] = []

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(list(self._snapshots))

    def oldest(self) -> Snapshot:
        """The earliest snapshot still held."""
        if not self._snapshots:
            raise LookupError("snapshot list is empty")
        return self._snapshots[0]

    def newest(self) -> Snapshot:
        """The latest snapshot still held."""
        if not self._snapshots:
            raise LookupError("snapshot list is empty")
        return self._snapshots[-1]

    def new(self, sequence_number: int) -> Snapshot:
        """Create a snapshot at ``sequence_number`` and append it to the list."""
        if self._snapshots and self._snapshots[-1].sequence_number > sequence_number:
            raise ValueError("snapshot sequence numbers must not decrease")
        snapshot = Snapshot(sequence_number, self)
        self._snapshots.append(snapshot)
        return snapshot

    def delete(self, snapshot: Snapshot) -> None:
        """Remove a snapshot previously created by this list."""
        if snapshot._owner is not self:
            raise ValueError("snapshot does not belong to this list")
        position = next(i for i, held in enumerate(self._snapshots) if held is snapshot)
        del self._snapshots[position]
        snapshot._owner = None