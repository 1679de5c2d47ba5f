import struct

import pytest

from tsscore.header import (
    HEADER_MAX_SIZE,
    Header,
    HeaderBit,
    HeaderInfo,
    header_from_bytes,
    header_info_from_bitfield,
    header_pos_from_bitfield,
    header_size_from_bitfield,
)

ALL_BITS = 0x3F


@pytest.mark.parametrize(
    "position, bit, size",
    [
        (0, HeaderBit.STATUS, 1),
        (1, HeaderBit.TIMESTAMP, 4),
        (2, HeaderBit.ECHO, 1),
        (3, HeaderBit.CHECKSUM, 1),
        (4, HeaderBit.SERIAL, 4),
        (5, HeaderBit.LENGTH, 2),
    ],
)
def test_bit_values_follow_positions(position, bit, size):
    assert HeaderBit(1 << position) is bit
    assert header_size_from_bitfield(1 << position) == size


def test_empty_header_has_no_size():
    assert header_size_from_bitfield(0) == 0


def test_full_header_has_max_size():
    assert header_size_from_bitfield(ALL_BITS) == HEADER_MAX_SIZE


def test_size_is_sum_of_fields():
    combined = HeaderBit.TIMESTAMP | HeaderBit.ECHO
    assert header_size_from_bitfield(combined) == (
        header_size_from_bitfield(HeaderBit.TIMESTAMP)
        + header_size_from_bitfield(HeaderBit.ECHO)
    )


def test_info_from_bitfield():
    info = header_info_from_bitfield(ALL_BITS)
    assert info == HeaderInfo(bitfield=ALL_BITS, size=HEADER_MAX_SIZE)


def test_first_field_at_zero():
    assert header_pos_from_bitfield(ALL_BITS, HeaderBit.STATUS) == 0


def test_last_field_ends_header():
    pos = header_pos_from_bitfield(ALL_BITS, HeaderBit.LENGTH)
    assert pos + header_size_from_bitfield(HeaderBit.LENGTH) == HEADER_MAX_SIZE


def test_position_skips_disabled_fields():
    bitfield = HeaderBit.STATUS | HeaderBit.SERIAL
    assert header_pos_from_bitfield(bitfield, HeaderBit.SERIAL) == \
        header_size_from_bitfield(HeaderBit.STATUS)


def test_position_rejects_zero_bit():
    with pytest.raises(ValueError):
        header_pos_from_bitfield(ALL_BITS, 0)


def test_round_trip_all_fields():
    data = struct.pack("<bIBBIH", 5, 123456, 39, 200, 0xDEADBEEF, 300)
    header = header_from_bytes(header_info_from_bitfield(ALL_BITS), data)
    assert header == Header(status=5, timestamp=123456, echo=39,
                            checksum=200, serial=0xDEADBEEF, length=300)


def test_status_is_signed():
    info = header_info_from_bitfield(HeaderBit.STATUS)
    assert header_from_bytes(info, b"\xff").status == -1


def test_partial_header_leaves_other_fields_zero():
    info = header_info_from_bitfield(HeaderBit.TIMESTAMP | HeaderBit.ECHO)
    data = struct.pack("<IB", 77, 39)
    header = header_from_bytes(info, data)
    assert header == Header(timestamp=77, echo=39)


def test_short_data_rejected():
    info = header_info_from_bitfield(ALL_BITS)
    with pytest.raises(ValueError):
        header_from_bytes(info, b"\x00" * (HEADER_MAX_SIZE - 1))