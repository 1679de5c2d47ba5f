"""Fixed-capacity byte ring buffer with power-of-two capacity."""

from __future__ import annotations


def is_power_of_two(value: int) -> bool:
    """Return True for positive powers of two."""
    return value > 0 and (value & (value - 1)) == 0


class RingBuffer:
    """A byte FIFO whose capacity is a power of two."""

    def __init__(self, capacity: int):
        if not is_power_of_two(capacity):
            raise ValueError("ring capacity must be a power of two")
        self.capacity = capacity
        self._data = bytearray(capacity)
        self._w_index = 0
        self._r_index = 0

    def _index(self, index: int) -> int:
        return index & (self.capacity - 1)

    def __len__(self) -> int:
        return self._w_index - self._r_index

    def space(self) -> int:
        """Number of bytes that can still be pushed."""
        return self.capacity - len(self)

    def full(self) -> bool:
        return len(self) == self.capacity

    def empty(self) -> bool:
        return self._r_index == self._w_index

    def push(self, value: int) -> None:
        """Append one byte; raises OverflowError when full."""
        if self.full():
            raise OverflowError("ring buffer is full")
        self._data[self._index(self._w_index)] = value
        self._w_index += 1

    def pop(self) -> int:
        """Remove and return the oldest byte; raises IndexError when empty."""
        if self.empty():
            raise IndexError("pop from empty ring buffer")
        value = self._data[self._index(self._r_index)]
        self._r_index += 1
        return value

    def advance(self, count: int) -> None:
        """Discard ``count`` of the oldest bytes."""
        if count < 0 or count > len(self):
            raise ValueError("cannot advance past the buffered data")
        self._r_index += count

    def clear(self) -> None:
        self.advance(len(self))

    def peek(self, index: int) -> int:
        """Return the byte ``index`` positions from the oldest, without removing it."""
        if index < 0 or index >= len(self):
            raise IndexError("ring buffer index out of range")
        return self._data[self._index(self._r_index + index)]