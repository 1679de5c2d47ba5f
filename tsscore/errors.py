"""Error codes reported by the sensor protocol layer."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric error codes used throughout the protocol layer."""

    NONE = 0
    SUCCESS = 0
    READ = -1
    BUFFER_OVERFLOW = -2
    GET_SETTING_CALLBACK = -3
    SETTING_KEY_INVALID = -4
    SETTING_KEY_UNREGISTERED = -5
    UNEXPECTED_CHARACTER = -6
    CHECKSUM_MISMATCH = -7
    INVALID_READ_KEY = -8
    INVALID_WRITE_KEY = -9
    INVALID_STREAM_CALLBACK = -10
    INSUFFICIENT_BUFFER = -11
    UNEXPECTED_PACKET_LENGTH = -12
    READ_LEN = -13
    TIMEOUT = -14
    RESPONSE_NOT_FOUND = -15
    FAILED_START_LOGGING = -16
    NOT_IN_BOOTLOADER = -17
    UNIMPLEMENTED_DETECTION = -18
    DETECTION = -19
    LOAD_FIRMWARE = -20
    INVALID_SIZE = -21
    FIRMWARE_UPLOAD_ERASE = -22
    FIRMWARE_UPLOAD = -23
    FIRMWARE_UPLOAD_INVALID_FORMAT = -24
    FIRMWARE_UPLOAD_PROGRAM = -25


class TssError(Exception):
    """Raised when a protocol operation fails; carries an :class:`ErrorCode`."""

    def __init__(self, code, message=None):
        try:
            code = ErrorCode(code)
        except ValueError:
            code = int(code)
        if message is None:
            if isinstance(code, ErrorCode):
                message = code.name.replace("_", " ").lower()
            else:
                message = f"error {code}"
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.message} ({int(self.code)})"