"""Binary command protocol: framing, parameter encoding and response reading.

Parameter values travel as raw wire bytes. Numeric parameters are given and
returned as little-endian ``bytes`` of exactly ``count * size`` bytes. String
parameters are given as ``str`` or ``bytes`` without a terminator and are
returned as ``str``.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .com import ComClass
from .commands import Command, Param
from .constants import BINARY_HEADER_START_BYTE, BINARY_START_BYTE, MAX_CMD_LEN
from .errors import ErrorCode, TssError
from .header import Header, HeaderInfo, header_from_bytes

_CHUNK = 40

ParamValue = Union[bytes, bytearray, memoryview, str]


def _add(checksum: int, data: bytes) -> int:
    return (checksum + sum(data)) & 0xFF


def _active(params: Optional[Iterable[Param]]):
    """Yield parameters up to the first empty one."""
    for param in params or ():
        if param.count == 0:
            return
        yield param


def _encode_string(value: ParamValue) -> bytes:
    raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
    if b"\x00" in raw:
        raise ValueError("string parameter must not contain a NUL byte")
    return raw + b"\x00"


def encode_params(params: Optional[Sequence[Param]], values: Optional[Sequence[ParamValue]]) -> bytes:
    """Encode one value per parameter into the bytes sent on the wire."""
    active = list(_active(params))
    values = list(values or ())
    if len(values) < len(active):
        raise ValueError(f"expected {len(active)} parameter values, got {len(values)}")
    out = bytearray()
    for param, value in zip(active, values):
        if param.is_string():
            out += _encode_string(value)
            continue
        if isinstance(value, str):
            raise TypeError("numeric parameter must be given as bytes")
        raw = bytes(value)
        expected = param.count * param.size
        if len(raw) != expected:
            raise ValueError(f"parameter needs {expected} bytes, got {len(raw)}")
        out += raw
    return bytes(out)


def write_command(com: ComClass, header: bool, command: Command,
                  data: Optional[Sequence[ParamValue]] = None) -> None:
    """Send ``command`` with its input parameters."""
    start_byte = BINARY_HEADER_START_BYTE if header else BINARY_START_BYTE
    payload = encode_params(command.in_format, data) if command.in_format is not None else b""
    checksum = _add(command.num, payload)
    com.begin_write()
    com.write(bytes((start_byte, command.num)) + payload + bytes((checksum,)))
    com.end_write()


def read_params(com: ComClass, params: Optional[Sequence[Param]],
                checksum: int = 0) -> Tuple[List[ParamValue], int]:
    """Read the parameters; return their values and the updated checksum."""
    values: List[ParamValue] = []
    for param in _active(params):
        if param.is_string():
            raw = com.read_until(0, MAX_CMD_LEN)
            if not raw:
                raise TssError(ErrorCode.READ)
            if raw[-1] != 0:
                raise TssError(ErrorCode.BUFFER_OVERFLOW)
            values.append(raw[:-1].decode("utf-8", errors="replace"))
        else:
            expected = param.count * param.size
            raw = com.read(expected)
            if len(raw) != expected:
                raise TssError(ErrorCode.READ)
            values.append(bytes(raw))
        checksum = _add(checksum, raw)
    return values, checksum


def read_params_checksum_only(com: ComClass, params: Optional[Sequence[Param]],
                              checksum: int = 0) -> int:
    """Consume the parameters without keeping them; return the updated checksum."""
    for param in _active(params):
        if param.is_string():
            while True:
                raw = com.read_until(0, _CHUNK)
                if not raw:
                    raise TssError(ErrorCode.READ)
                checksum = _add(checksum, raw)
                if raw[-1] == 0:
                    break
        else:
            remaining = param.count * param.size
            while remaining > 0:
                raw = com.read(min(remaining, _CHUNK))
                if not raw:
                    raise TssError(ErrorCode.READ)
                checksum = _add(checksum, raw)
                remaining -= len(raw)
    return checksum


def read_bytes_checksum_only(com: ComClass, num_bytes: int,
                             checksum: Optional[int] = None) -> Optional[int]:
    """Consume ``num_bytes``; fold them into ``checksum`` unless it is None."""
    while num_bytes > 0:
        read_len = min(num_bytes, _CHUNK)
        raw = com.read(read_len)
        if len(raw) != read_len:
            raise TssError(ErrorCode.READ)
        if checksum is not None:
            checksum = _add(checksum, raw)
        num_bytes -= read_len
    return checksum


def read_command(com: ComClass, command: Command) -> Tuple[List[ParamValue], int]:
    """Read the response of ``command``; return its values and checksum."""
    if command.out_format is None:
        return [], 0
    return read_params(com, command.out_format, 0)


def read_command_checksum_only(com: ComClass, command: Command) -> int:
    """Consume the response of ``command`` and return its checksum."""
    if command.out_format is None:
        return 0
    return read_params_checksum_only(com, command.out_format, 0)


def read_header(com: ComClass, header_info: HeaderInfo) -> Header:
    """Read and decode a response header."""
    if header_info.size == 0:
        return Header()
    raw = com.read(header_info.size)
    if len(raw) != header_info.size:
        raise TssError(ErrorCode.READ)
    return header_from_bytes(header_info, raw)


def peek_header(com: ComClass, header_info: HeaderInfo) -> Header:
    """Decode the response header at the front of the input without consuming it."""
    if header_info.size == 0:
        return Header()
    raw = com.peek(0, header_info.size)
    if len(raw) != header_info.size:
        raise TssError(ErrorCode.READ_LEN)
    return header_from_bytes(header_info, raw)


def peek_command_checksum(com: ComClass, start: int, length: int) -> int:
    """Return the checksum of ``length`` buffered bytes beginning at ``start``."""
    checksum = 0
    for offset in range(0, length, _CHUNK):
        read_len = min(_CHUNK, length - offset)
        raw = com.peek(start + offset, read_len)
        if len(raw) != read_len:
            raise TssError(ErrorCode.READ_LEN)
        checksum = _add(checksum, raw)
    return checksum


def peek_validate_command(com: ComClass, header_size: int, header_len_field: int,
                          header_checksum_field: int, min_data_len: int,
                          max_data_len: int) -> None:
    """Check that the buffered response body matches its header's length and checksum."""
    # Bounds guard against corrupted length fields stalling on timeouts and
    # runs of zeroes validating as an empty packet.
    if header_len_field > max_data_len or header_len_field < min_data_len:
        raise TssError(ErrorCode.UNEXPECTED_PACKET_LENGTH)
    checksum = peek_command_checksum(com, header_size, header_len_field)
    if checksum != header_checksum_field:
        raise TssError(ErrorCode.CHECKSUM_MISMATCH)