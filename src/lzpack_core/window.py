"""Bounded history window shared by the LZ77 encoder and decoder."""
from __future__ import annotations

from lzpack_core.protocol import WINDOW_SIZE


class HistoryWindow:
    """Fixed-capacity ring buffer of the most recent bytes.

    Pushing at capacity evicts the oldest byte. Lookback is by distance from
    the newest byte: ``get(1)`` is the byte pushed last.
    """

    __slots__ = ("capacity", "buffer", "newest", "num_items")

    def __init__(self, capacity: int = WINDOW_SIZE):
        if capacity < 1:
            raise ValueError(f"Window capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.buffer = bytearray(capacity)
        self.newest = 0  # next write index
        self.num_items = 0

    def __len__(self) -> int:
        return self.num_items

    def push(self, byte: int) -> None:
        self.buffer[self.newest] = byte
        self.newest = (self.newest + 1) % self.capacity
        if self.num_items < self.capacity:
            self.num_items += 1

    def extend(self, data: bytes) -> None:
        for b in data:
            self.push(b)

    def get(self, distance: int) -> int:
        if distance < 1 or distance > self.num_items:
            raise IndexError(
                f"Window lookback {distance} out of range (window holds {self.num_items} bytes)"
            )
        return self.buffer[(self.newest - distance) % self.capacity]

    def tail(self, count: int | None = None) -> bytes:
        """Return the newest ``count`` bytes, oldest first."""
        if count is None or count > self.num_items:
            count = self.num_items
        if count <= 0:
            return b""
        start = (self.newest - count) % self.capacity
        end = start + count
        if end <= self.capacity:
            return bytes(self.buffer[start:end])
        # Wrapped
        return bytes(self.buffer[start:]) + bytes(self.buffer[: end - self.capacity])
