"""Fixed-capacity packet window."""

from __future__ import annotations

from typing import Iterator, List, Optional, cast

from .structures import Packet


class PacketWindow:
    """FIFO ring buffer holding the most recent ``capacity`` packets.

    Slots are preallocated; ``append`` overwrites the oldest packet once the
    buffer is full. Iteration yields packets oldest first.
    """

    def __init__(self, capacity: int = 50) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._slots: List[Optional[Packet]] = [None] * capacity
        self._head = 0
        self._count = 0

    def append(self, packet: Packet) -> Optional[Packet]:
        """Add ``packet`` and return the evicted packet, if any."""

        tail = (self._head + self._count) % self.capacity
        evicted: Optional[Packet] = None
        if self._count == self.capacity:
            evicted = self._slots[self._head]
            self._slots[self._head] = packet
            self._head = (self._head + 1) % self.capacity
        else:
            self._slots[tail] = packet
            self._count += 1
        return evicted

    def clear(self) -> None:
        self._slots = [None] * self.capacity
        self._head = 0
        self._count = 0

    @property
    def is_full(self) -> bool:
        return self._count == self.capacity

    def newest(self) -> Optional[Packet]:
        if self._count == 0:
            return None
        return self._slots[(self._head + self._count - 1) % self.capacity]

    def snapshot(self) -> List[Packet]:
        return list(self)

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Packet]:
        for offset in range(self._count):
            # slots within the first _count positions from _head are always filled
            yield cast(Packet, self._slots[(self._head + offset) % self.capacity])
