"""Key based settings protocol: reading and writing settings by name.

Setting values use the same representation as command parameters: numeric
parameters are little-endian ``bytes`` of ``count * size`` bytes, and string
parameters are ``str`` (or ``bytes``) without a terminator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .com import ComClass
from .commands import Setting, SettingResponse, get_setting
from .constants import (
    BINARY_READ_SETTINGS_HEADER_START_BYTE,
    BINARY_READ_SETTINGS_START_BYTE,
    BINARY_SETTINGS_ID_SIZE,
    BINARY_WRITE_SETTINGS_HEADER_START_BYTE,
    BINARY_WRITE_SETTINGS_START_BYTE,
    MAX_CMD_LEN,
    MAX_SETTINGS_KEY_LEN,
    SETTING_KEY_ERR_STRING,
    SETTING_SEPARATOR,
)
from .errors import ErrorCode, TssError
from .protocol import ParamValue, encode_params, read_params, read_params_checksum_only

SETTING_RESPONSE_SIZE = 3
_MAX_WRITE_KEYS = 0xFF
_SEPARATOR_BYTE = ord(SETTING_SEPARATOR)


class SettingsCallbackState(IntEnum):
    """What a settings callback did with the value of the key it was given."""

    ERROR = -1
    IGNORED = 0
    PROCESSED = 1


@dataclass
class GetSettingsCallbackInfo:
    """Passed to a settings callback for each key of a response.

    A callback that reads the value itself must store the updated running
    checksum back into ``checksum``, for example::

        values, info.checksum = read_params(info.com, info.setting.out_format, info.checksum)
    """

    com: ComClass
    setting: Setting
    key: str
    checksum: int


SettingsCallback = Callable[[GetSettingsCallbackInfo], SettingsCallbackState]


def _add(checksum: int, data: bytes) -> int:
    return (checksum + sum(data)) & 0xFF


def _key_bytes(key) -> bytes:
    raw = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    if b"\x00" in raw:
        raise ValueError("setting key must not contain a NUL byte")
    return raw


def build_get_settings_string(keys: Iterable[str]) -> str:
    """Join keys into a settings read string separated by ';'."""
    return SETTING_SEPARATOR.join(keys)


def build_get_settings_string_binary(keys: Iterable[str]) -> bytes:
    """Build the binary read string: keys, a NUL terminator and a checksum byte."""
    body = _key_bytes(build_get_settings_string(keys))
    return body + b"\x00" + bytes((_add(0, body),))


def get_settings_write(com: ComClass, header: bool, key_string: str) -> None:
    """Send a request to read the settings named in ``key_string``."""
    start_byte = (BINARY_READ_SETTINGS_HEADER_START_BYTE if header
                  else BINARY_READ_SETTINGS_START_BYTE)
    body = _key_bytes(key_string)
    # Room is needed for the NUL terminator and the checksum.
    if len(body) > MAX_CMD_LEN - 2:
        raise TssError(ErrorCode.INVALID_SIZE)
    com.begin_write()
    com.write(bytes((start_byte,)) + body + b"\x00" + bytes((_add(0, body),)))
    com.end_write()


def get_settings_read_cb(com: ComClass, callback: SettingsCallback) -> None:
    """Parse a settings read response, calling ``callback`` for each key.

    Values of keys the callback reports as ignored are consumed here. The
    response checksum is validated once all keys are processed.
    """
    checksum = 0
    while True:
        raw = com.read_until(0, MAX_SETTINGS_KEY_LEN)
        if not raw or raw[-1] != 0:
            raise TssError(ErrorCode.READ)
        key_raw = bytes(raw[:-1])
        key = key_raw.decode("utf-8", errors="replace")

        setting = get_setting(key)
        if setting is None:
            if key == SETTING_KEY_ERR_STRING:
                raise TssError(ErrorCode.SETTING_KEY_INVALID, f"invalid key in response")
            raise TssError(ErrorCode.SETTING_KEY_UNREGISTERED, f"unregistered key: {key}")
        if setting.out_format is None:
            raise TssError(ErrorCode.INVALID_READ_KEY)

        checksum = _add(checksum, key_raw)
        info = GetSettingsCallbackInfo(com=com, setting=setting, key=key, checksum=checksum)
        state = SettingsCallbackState(callback(info))
        if state == SettingsCallbackState.ERROR:
            raise TssError(ErrorCode.GET_SETTING_CALLBACK)
        checksum = info.checksum
        if state == SettingsCallbackState.IGNORED:
            checksum = read_params_checksum_only(com, setting.out_format, checksum)

        marker = com.read(1)
        if len(marker) != 1:
            raise TssError(ErrorCode.READ)
        checksum = _add(checksum, marker)
        if marker[0] == 0:
            break
        if marker[0] != _SEPARATOR_BYTE:
            raise TssError(ErrorCode.UNEXPECTED_CHARACTER)

    received = com.read(1)
    if len(received) != 1:
        raise TssError(ErrorCode.READ)
    if received[0] != checksum:
        raise TssError(
            ErrorCode.CHECKSUM_MISMATCH,
            f"checksum mismatch: 0x{received[0]:02x} != 0x{checksum:02x}",
        )


def get_settings_read(com: ComClass) -> List[Tuple[str, List[ParamValue]]]:
    """Read a settings response; return (key, values) for each key in order."""
    results: List[Tuple[str, List[ParamValue]]] = []

    def collect(info: GetSettingsCallbackInfo) -> SettingsCallbackState:
        values, info.checksum = read_params(info.com, info.setting.out_format, info.checksum)
        results.append((info.key, values))
        return SettingsCallbackState.PROCESSED

    get_settings_read_cb(com, collect)
    return results


def set_settings_write(com: ComClass, header: bool, keys: Sequence[str],
                       data: Optional[Sequence[Sequence[ParamValue]]] = None) -> None:
    """Send a request writing each key with its parameter values.

    ``data`` holds one sequence of values per key; keys that take no
    parameters may be given an empty sequence, and ``data`` may be omitted
    when none take any.
    """
    keys = list(keys)
    if len(keys) > _MAX_WRITE_KEYS:
        raise ValueError(f"at most {_MAX_WRITE_KEYS} keys can be written at once")
    values_per_key = [()] * len(keys) if data is None else list(data)
    if len(values_per_key) != len(keys):
        raise ValueError(f"expected values for {len(keys)} keys, got {len(values_per_key)}")

    start_byte = (BINARY_WRITE_SETTINGS_HEADER_START_BYTE if header
                  else BINARY_WRITE_SETTINGS_START_BYTE)
    body = bytearray()
    checksum = 0
    for index, (key, values) in enumerate(zip(keys, values_per_key)):
        setting = get_setting(key)
        if setting is None:
            raise TssError(ErrorCode.SETTING_KEY_INVALID, f"invalid key: {key}")
        if setting.in_format is None:
            raise TssError(ErrorCode.INVALID_WRITE_KEY, f"key is not writable: {key}")
        key_raw = _key_bytes(key)
        payload = encode_params(setting.in_format, values)
        body += key_raw + b"\x00" + payload
        checksum = _add(checksum, key_raw + payload)
        if index < len(keys) - 1:
            body.append(_SEPARATOR_BYTE)
            checksum = _add(checksum, bytes((_SEPARATOR_BYTE,)))

    com.begin_write()
    com.write(bytes((start_byte,)) + bytes(body) + b"\x00" + bytes((checksum,)))
    com.end_write()


def set_settings_read(com: ComClass) -> SettingResponse:
    """Read the reply to a settings write."""
    raw = com.read(SETTING_RESPONSE_SIZE)
    if len(raw) != SETTING_RESPONSE_SIZE:
        raise TssError(ErrorCode.READ)
    if (raw[0] + raw[1]) % 256 != raw[2]:
        raise TssError(ErrorCode.CHECKSUM_MISMATCH)
    error = raw[0] - 256 if raw[0] >= 128 else raw[0]
    return SettingResponse(error=error, num_success=raw[1])


def read_settings_header(com: ComClass) -> int:
    """Read the framing id that precedes a settings response."""
    raw = com.read(BINARY_SETTINGS_ID_SIZE)
    if len(raw) != BINARY_SETTINGS_ID_SIZE:
        raise TssError(ErrorCode.READ)
    return int.from_bytes(raw, "little")


def peek_settings_header(com: ComClass) -> int:
    """Return the framing id of a settings response without consuming it."""
    raw = com.peek(0, BINARY_SETTINGS_ID_SIZE)
    if len(raw) != BINARY_SETTINGS_ID_SIZE:
        raise TssError(ErrorCode.READ_LEN)
    return int.from_bytes(raw, "little")