"""Communication interface used to talk to a sensor."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum

from .errors import ErrorCode, TssError
from .timing import time_diff, time_get

_CLEAR_CHUNK = 40


class AutoDetectResult(IntEnum):
    """Values returned by device detection callbacks and detection calls."""

    CONTINUE = 0
    STOP = 1
    SUCCESS = 2
    DONE = 3


class ComClass(ABC):
    """Byte stream to a sensor.

    Subclasses must provide open, close, read, write and the timeout
    accessors; the remaining operations have working defaults built on them.
    A timeout of 0 means reads return immediately rather than block.
    """

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @abstractmethod
    def open(self):
        """Open the device; opening an open device succeeds."""

    @abstractmethod
    def close(self):
        """Close the device; closing a closed device succeeds."""

    @abstractmethod
    def read(self, num_bytes: int) -> bytes:
        """Read up to ``num_bytes``, waiting at most the timeout."""

    @abstractmethod
    def write(self, data: bytes):
        """Send ``data`` to the device."""

    @abstractmethod
    def set_timeout(self, timeout_ms: int) -> None:
        """Set the read timeout in milliseconds."""

    @abstractmethod
    def get_timeout(self) -> int:
        """Return the read timeout in milliseconds."""

    def read_until(self, value: int, size: int) -> bytes:
        """Read until ``value`` is seen (inclusive), ``size`` bytes, or timeout."""
        timeout = self.get_timeout()
        start = time_get()
        out = bytearray()
        self.set_timeout(0)
        try:
            while len(out) < size and time_diff(start) < timeout:
                chunk = self.read(1)
                if chunk:
                    out += chunk
                    if chunk[0] == value:
                        break
        finally:
            self.set_timeout(timeout)
        return bytes(out)

    def peek_capacity(self) -> int:
        """How many bytes can be looked ahead; 0 without a look-ahead buffer."""
        return 0

    def length(self) -> int:
        """Number of bytes currently buffered for peeking."""
        return 0

    def peek(self, start: int, num_bytes: int) -> bytes:
        """Return buffered bytes without consuming them."""
        if start + num_bytes > self.peek_capacity():
            raise TssError(ErrorCode.INSUFFICIENT_BUFFER)
        return b""

    def peek_until(self, start: int, value: int, size: int) -> bytes:
        """Peek until ``value`` is seen, ``size`` bytes, or the buffer ends."""
        if size > 0 and start >= self.peek_capacity():
            raise TssError(ErrorCode.INSUFFICIENT_BUFFER)
        return b""

    def clear_immediate(self) -> None:
        """Discard everything that is available right now."""
        timeout = self.get_timeout()
        self.set_timeout(0)
        try:
            while self.read(_CLEAR_CHUNK):
                pass
        finally:
            self.set_timeout(timeout)

    def clear_timeout(self, timeout_ms: int) -> None:
        """Discard input until none arrives for ``timeout_ms``, bounded by the read timeout."""
        cached_timeout = self.get_timeout()
        self.set_timeout(0)
        try:
            start = time_get()
            interval_start = start
            while True:
                if self.read(_CLEAR_CHUNK):
                    interval_start = time_get()
                if not (time_diff(interval_start) < timeout_ms
                        and time_diff(start) < cached_timeout):
                    break
        finally:
            self.set_timeout(cached_timeout)

    def begin_write(self) -> None:
        """Start a buffered write; unbuffered classes send on each write."""

    def end_write(self) -> None:
        """Finish a buffered write; unbuffered classes have nothing to flush."""

    def reenumerate(self, callback, detect_data):
        """Rediscover the device after it reconnects."""
        raise TssError(ErrorCode.UNIMPLEMENTED_DETECTION)

    def auto_detect(self, callback, detect_data):
        """Search for devices, passing each to ``callback``."""
        raise TssError(ErrorCode.UNIMPLEMENTED_DETECTION)