# tsscore

`tsscore` is the low-level layer for talking to a motion sensor over its
binary protocol. It provides:

- the command table and the settings table that describe every wire format,
- framing, encoding and reading of commands and their responses,
- the key-based settings protocol (read and write settings by name),
- response header decoding,
- `ManagedCom`, a wrapper that adds look-ahead (peek) buffering and buffered
  writes on top of a minimal transport.

It has no runtime dependencies.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

| Module | What it holds |
| --- | --- |
| `tsscore.errors` | `ErrorCode` and the `TssError` exception raised on protocol failures |
| `tsscore.constants` | Start bytes, settings framing ids, size limits, debug levels and logging mode values |
| `tsscore.header` | `HeaderBit`, `HeaderInfo`, `Header`, `header_info_from_bitfield`, `header_size_from_bitfield`, `header_pos_from_bitfield`, `header_from_bytes` |
| `tsscore.commands` | `Param`, `Command`, `Setting`, `SettingResponse`, the `COMMANDS` and `SETTINGS` tables, `get_command`, `get_setting`, `setting_key_cmp`, `param_list_size` |
| `tsscore.protocol` | `encode_params`, `write_command`, `read_command`, `read_command_checksum_only`, `read_params`, `read_params_checksum_only`, `read_bytes_checksum_only`, `read_header`, `peek_header`, `peek_command_checksum`, `peek_validate_command` |
| `tsscore.settings` | `build_get_settings_string`, `build_get_settings_string_binary`, `get_settings_write`, `get_settings_read`, `get_settings_read_cb`, `set_settings_write`, `set_settings_read`, `read_settings_header`, `peek_settings_header`, `SettingsCallbackState`, `GetSettingsCallbackInfo` |
| `tsscore.com` | `ComClass`, the abstract transport, and `AutoDetectResult` |
| `tsscore.managed_com` | `ManagedCom` and the helpers `base_read_until`, `base_clear`, `base_clear_timeout` |
| `tsscore.ring` | `RingBuffer`, a power-of-two byte FIFO, and `is_power_of_two` |
| `tsscore.timing` | `time_get`, `time_diff` and `set_time_functions` to replace the clock used for timeouts |
| `tsscore.eepts` | `EeptsOutput` and `eepts_from_values` for pedestrian-tracking step results |

## Transports

A transport subclasses `ComClass` and implements `open`, `close`,
`read(num_bytes)`, `write(data)`, `set_timeout(timeout_ms)` and
`get_timeout()`. A timeout of 0 must make `read` return at once. `ComClass`
supplies working `read_until`, `clear_immediate` and `clear_timeout` on top of
those, and can be used as a context manager (opened on entry, closed on exit).

Wrap it in `ManagedCom(child, read_size, write_size)` to get `peek`,
`peek_until` and `length`, and to gather the bytes written between
`begin_write()` and `end_write()` into one send. `read_size` must be a power
of two, otherwise `TssError(ErrorCode.INVALID_SIZE)` is raised.

## Values on the wire

Numeric parameters are passed and returned as little-endian `bytes` of exactly
`count * size` bytes; use `struct` to pack and unpack them. String parameters
are passed as `str` (or `bytes`) without a terminator and returned as `str`.

## Example

```python
import struct

from tsscore.commands import get_command
from tsscore.header import HeaderBit, header_info_from_bitfield
from tsscore.managed_com import ManagedCom
from tsscore.protocol import read_command, read_header, write_command

com = ManagedCom(my_transport, 256, 256)
com.open()

quat_cmd = get_command(0)  # GetTaredOrientation
write_command(com, False, quat_cmd)
values, checksum = read_command(com, quat_cmd)
quaternion = struct.unpack("<4f", values[0])

info = header_info_from_bitfield(HeaderBit.TIMESTAMP | HeaderBit.ECHO)
accel_cmd = get_command(39)  # GetCorrectedAccelerometerVector
write_command(com, True, accel_cmd)
header = read_header(com, info)
values, checksum = read_command(com, accel_cmd)
accel = struct.unpack("<3f", values[0])
print(header.timestamp, accel)
```

### Settings

```python
from tsscore.settings import (
    get_settings_read,
    get_settings_write,
    set_settings_read,
    set_settings_write,
)

set_settings_write(com, False, ["header"], [[b"\x06"]])
response = set_settings_read(com)  # SettingResponse(error=..., num_success=...)

get_settings_write(com, False, "header;euler_order")
for key, values in get_settings_read(com):
    print(key, values)
```

For responses whose keys are not known in advance (for example `all`), use
`get_settings_read_cb` with a callback that receives a
`GetSettingsCallbackInfo` for each key and returns a `SettingsCallbackState`.
Values of keys reported as `IGNORED` are skipped for you; a callback that reads
a value itself must store the updated checksum back into `info.checksum`.

### Errors

Failures raise `tsscore.errors.TssError`. Its `code` attribute is an
`ErrorCode`, for example `ErrorCode.CHECKSUM_MISMATCH`.

## What this package does not do

- It ships no transport: there is no serial port, Bluetooth or USB class, and
  no device discovery. `ComClass.reenumerate` and `ComClass.auto_detect`
  raise `TssError(ErrorCode.UNIMPLEMENTED_DETECTION)` unless a subclass
  provides them.
- There is no high-level sensor object: no per-command convenience methods,
  no cached header configuration, no streaming, logging or file-streaming
  handling, no debug-message callbacks and no firmware upload. Those are built
  by calling `tsscore.protocol` and `tsscore.settings` directly.
- There is no command-line tool.