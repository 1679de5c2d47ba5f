"""Binary response header layout and decoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

HEADER_MAX_SIZE = 13


class HeaderBit(IntFlag):
    """Bits of the header configuration bitfield, in wire order."""

    STATUS = 1 << 0
    TIMESTAMP = 1 << 1
    ECHO = 1 << 2
    CHECKSUM = 1 << 3
    SERIAL = 1 << 4
    LENGTH = 1 << 5


_FIELD_SIZES = (
    (HeaderBit.STATUS, 1),
    (HeaderBit.TIMESTAMP, 4),
    (HeaderBit.ECHO, 1),
    (HeaderBit.CHECKSUM, 1),
    (HeaderBit.SERIAL, 4),
    (HeaderBit.LENGTH, 2),
)


@dataclass(frozen=True)
class HeaderInfo:
    """A header configuration and the number of bytes it occupies."""

    bitfield: int
    size: int


@dataclass
class Header:
    """Decoded header fields; fields absent from the configuration stay 0."""

    status: int = 0
    timestamp: int = 0
    echo: int = 0
    checksum: int = 0
    serial: int = 0
    length: int = 0


def header_size_from_bitfield(bitfield: int) -> int:
    """Return the size in bytes of a header with the given bits enabled."""
    return sum(size for bit, size in _FIELD_SIZES if bitfield & bit)


def header_pos_from_bitfield(bitfield: int, bit: int) -> int:
    """Return the byte offset of the field ``bit`` within the header."""
    if bit <= 0:
        raise ValueError("bit must name a header field")
    pos = 0
    while (bit & 1) == 0:
        bit >>= 1
        pos += header_size_from_bitfield(bitfield & bit)
    return pos


def header_info_from_bitfield(bitfield: int) -> HeaderInfo:
    """Build a :class:`HeaderInfo` for the bitfield."""
    return HeaderInfo(bitfield=bitfield, size=header_size_from_bitfield(bitfield))


def header_from_bytes(info: HeaderInfo, data: bytes) -> Header:
    """Decode the little-endian header bytes described by ``info``."""
    if len(data) < info.size:
        raise ValueError(f"header needs {info.size} bytes, got {len(data)}")
    header = Header()
    pos = 0

    def take(count: int, signed: bool = False) -> int:
        nonlocal pos
        value = int.from_bytes(data[pos:pos + count], "little", signed=signed)
        pos += count
        return value

    if info.bitfield & HeaderBit.STATUS:
        header.status = take(1, signed=True)
    if info.bitfield & HeaderBit.TIMESTAMP:
        header.timestamp = take(4)
    if info.bitfield & HeaderBit.ECHO:
        header.echo = take(1)
    if info.bitfield & HeaderBit.CHECKSUM:
        header.checksum = take(1)
    if info.bitfield & HeaderBit.SERIAL:
        header.serial = take(4)
    if info.bitfield & HeaderBit.LENGTH:
        header.length = take(2)
    return header