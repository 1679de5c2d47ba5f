"""Wrapper that adds look-ahead reads and buffered writes to a basic com class."""

from __future__ import annotations

from typing import Optional

from .com import AutoDetectResult, ComClass
from .errors import ErrorCode, TssError
from .ring import RingBuffer, is_power_of_two
from .timing import time_diff, time_get

_CLEAR_CHUNK = 40


class ManagedCom(ComClass):
    """Wraps a minimal :class:`ComClass` with a peek ring buffer and a write buffer.

    ``read_size`` is the look-ahead capacity and must be a power of two.
    Writes between :meth:`begin_write` and :meth:`end_write` are gathered in a
    buffer of ``write_size`` bytes and sent to the child in as few calls as
    the buffer allows.
    """

    def __init__(self, child: ComClass, read_size: int, write_size: int):
        if not is_power_of_two(read_size):
            raise TssError(ErrorCode.INVALID_SIZE)
        if write_size <= 0:
            raise ValueError("write buffer size must be positive")
        self.child = child
        self.read_size = read_size
        self.write_size = write_size
        self._ring = RingBuffer(read_size)
        self._write_buffer = bytearray()

    # ------------------------------------------------------------ direct wrapping

    def open(self):
        return self.child.open()

    def close(self):
        self._write_buffer.clear()
        self._ring.clear()
        return self.child.close()

    def set_timeout(self, timeout_ms: int) -> None:
        self.child.set_timeout(timeout_ms)

    def get_timeout(self) -> int:
        return self.child.get_timeout()

    def clear_immediate(self) -> None:
        self._ring.clear()
        self.child.clear_immediate()

    def clear_timeout(self, timeout_ms: int) -> None:
        self._ring.clear()
        self.child.clear_timeout(timeout_ms)

    # ------------------------------------------------------------ writing

    def begin_write(self) -> None:
        self._write_buffer.clear()

    def end_write(self):
        return self.child.write(bytes(self._write_buffer))

    def write(self, data: bytes) -> bool:
        """Buffer ``data``, flushing to the child whenever the buffer fills.

        Returns True when the write buffer is left full.
        """
        data = bytes(data)
        pos = 0
        while pos < len(data):
            room = self.write_size - len(self._write_buffer)
            chunk = data[pos:pos + room]
            self._write_buffer += chunk
            pos += len(chunk)
            if pos < len(data):
                self.end_write()
                self.begin_write()
        return len(self._write_buffer) >= self.write_size

    # ------------------------------------------------------------ reading

    def read(self, num_bytes: int) -> bytes:
        out = bytearray()
        while self._ring and len(out) < num_bytes:
            out.append(self._ring.pop())
        remaining = num_bytes - len(out)
        if remaining > 0:
            out += self.child.read(remaining)
        return bytes(out)

    def read_until(self, value: int, size: int) -> bytes:
        out = bytearray()
        while self._ring and len(out) < size:
            byte = self._ring.pop()
            out.append(byte)
            if byte == value:
                return bytes(out)
        remaining = size - len(out)
        if remaining > 0:
            out += self.child.read_until(value, remaining)
        return bytes(out)

    def _fill(self) -> None:
        space = self._ring.space()
        if space == 0:
            return
        timeout = self.child.get_timeout()
        self.child.set_timeout(0)
        try:
            for byte in self.child.read(space)[:space]:
                self._ring.push(byte)
        finally:
            self.child.set_timeout(timeout)

    def length(self) -> int:
        """Pull in whatever the child has available and return the buffered count."""
        self._fill()
        return len(self._ring)

    def peek_capacity(self) -> int:
        return self._ring.capacity

    def peek(self, start: int, num_bytes: int) -> bytes:
        """Return up to ``num_bytes`` from offset ``start`` without consuming them.

        Waits up to the child's timeout for enough data to arrive.
        """
        required = start + num_bytes
        if required > self._ring.capacity:
            raise TssError(ErrorCode.INSUFFICIENT_BUFFER)
        timeout = self.child.get_timeout()
        began = time_get()
        available = self.length()
        while available < required and time_diff(began) < timeout:
            available = self.length()
        end = min(required, available)
        return bytes(self._ring.peek(index) for index in range(start, end))

    def peek_until(self, start: int, value: int, size: int) -> bytes:
        """Peek from ``start`` until ``value`` (inclusive), ``size`` bytes, or timeout."""
        out = bytearray()
        done = False
        capacity = self._ring.capacity
        timeout = self.child.get_timeout()
        began = time_get()
        while (not done and len(out) < size and len(out) + start < capacity
               and time_diff(began) < timeout):
            available = self.length()
            while len(out) < size and len(out) + start < available:
                byte = self._ring.peek(len(out) + start)
                out.append(byte)
                if byte == value:
                    done = True
                    break

        # Stopped because the buffer cannot look further ahead, not for lack of room.
        if not done and len(out) < size and len(out) + start == capacity:
            raise TssError(ErrorCode.INSUFFICIENT_BUFFER)
        return bytes(out)

    # ------------------------------------------------------------ discovery

    def reenumerate(self, callback, detect_data):
        """Rediscover the device through the child, rewrapping what it finds."""

        def wrap(found: ComClass, _data) -> AutoDetectResult:
            if found is not self:
                self.child = found
                self._ring = RingBuffer(self.read_size)
                self._write_buffer.clear()
            return callback(self, detect_data)

        return self.child.reenumerate(wrap, detect_data)

    def auto_detect(self, callback, detect_data):
        return self.child.auto_detect(callback, detect_data)


def base_read_until(com: ComClass, value: int, size: int) -> bytes:
    """Read byte by byte until ``value`` (inclusive), ``size`` bytes, or the timeout."""
    timeout = com.get_timeout()
    began = time_get()
    out = bytearray()
    com.set_timeout(0)
    try:
        while len(out) < size and time_diff(began) < timeout:
            chunk = com.read(1)
            if chunk:
                out += chunk[:1]
                if chunk[0] == value:
                    break
    finally:
        com.set_timeout(timeout)
    return bytes(out)


def base_clear(com: ComClass) -> None:
    """Discard all input that is available immediately."""
    timeout = com.get_timeout()
    com.set_timeout(0)
    try:
        while com.read(_CLEAR_CHUNK):
            pass
    finally:
        com.set_timeout(timeout)


def base_clear_timeout(com: ComClass, timeout_ms: int) -> None:
    """Discard input until none arrives for ``timeout_ms``, bounded by the read timeout."""
    cached_timeout = com.get_timeout()
    com.set_timeout(0)
    try:
        began = time_get()
        interval_start = began
        while True:
            if com.read(_CLEAR_CHUNK):
                interval_start = time_get()
            if not (time_diff(interval_start) < timeout_ms
                    and time_diff(began) < cached_timeout):
                break
    finally:
        com.set_timeout(cached_timeout)