import pytest

from tsscore.com import AutoDetectResult, ComClass
from tsscore.errors import ErrorCode, TssError
from tsscore.managed_com import (
    ManagedCom,
    base_clear,
    base_clear_timeout,
    base_read_until,
)


class FakeCom(ComClass):
    def __init__(self, incoming=b"", timeout=50):
        self.incoming = bytearray(incoming)
        self.writes = []
        self.timeout = timeout
        self.opened = False
        self.timeouts_set = []
        self.found = None

    def open(self):
        self.opened = True
        return 0

    def close(self):
        self.opened = False
        return 0

    def read(self, num_bytes):
        chunk = bytes(self.incoming[:num_bytes])
        del self.incoming[:num_bytes]
        return chunk

    def write(self, data):
        self.writes.append(bytes(data))
        return 0

    def set_timeout(self, timeout_ms):
        self.timeouts_set.append(timeout_ms)
        self.timeout = timeout_ms

    def get_timeout(self):
        return self.timeout

    def reenumerate(self, callback, detect_data):
        return callback(self.found, detect_data)


def test_read_size_must_be_power_of_two():
    with pytest.raises(TssError) as info:
        ManagedCom(FakeCom(), 6, 8)
    assert info.value.code == ErrorCode.INVALID_SIZE


def test_peek_does_not_consume():
    child = FakeCom(b"hello")
    com = ManagedCom(child, 8, 8)
    assert com.peek(0, 3) == b"hel"
    assert com.peek(1, 2) == b"el"
    assert com.read(5) == b"hello"


def test_peek_beyond_capacity_raises():
    com = ManagedCom(FakeCom(b"abc"), 4, 8)
    with pytest.raises(TssError) as info:
        com.peek(2, 3)
    assert info.value.code == ErrorCode.INSUFFICIENT_BUFFER


def test_peek_returns_what_arrived_before_timeout():
    com = ManagedCom(FakeCom(b"ab", timeout=5), 8, 8)
    assert com.peek(0, 4) == b"ab"


def test_read_combines_ring_and_child():
    data = bytes(range(12))
    com = ManagedCom(FakeCom(data), 8, 8)
    assert com.length() == 8
    assert com.read(12) == data


def test_length_restores_child_timeout():
    child = FakeCom(b"xyz", timeout=123)
    com = ManagedCom(child, 4, 8)
    assert com.length() == 3
    assert child.get_timeout() == 123
    assert 0 in child.timeouts_set


def test_read_until_from_ring():
    com = ManagedCom(FakeCom(b"ab\x00cd"), 8, 8)
    com.length()
    assert com.read_until(0, 10) == b"ab\x00"
    assert com.read(2) == b"cd"


def test_read_until_continues_into_child():
    com = ManagedCom(FakeCom(b"abcdef\x00g"), 4, 8)
    com.length()
    assert com.read_until(0, 20) == b"abcdef\x00"


def test_peek_until_finds_value():
    com = ManagedCom(FakeCom(b"key\x00rest"), 16, 8)
    assert com.peek_until(0, 0, 10) == b"key\x00"
    assert com.peek_until(1, 0, 10) == b"ey\x00"
    assert com.read(4) == b"key\x00"


def test_peek_until_raises_when_buffer_too_small():
    com = ManagedCom(FakeCom(b"abcdef"), 4, 8)
    with pytest.raises(TssError) as info:
        com.peek_until(0, 0, 10)
    assert info.value.code == ErrorCode.INSUFFICIENT_BUFFER


def test_peek_capacity():
    assert ManagedCom(FakeCom(), 32, 8).peek_capacity() == 32


def test_buffered_write_single_flush():
    child = FakeCom()
    com = ManagedCom(child, 8, 8)
    com.begin_write()
    assert com.write(b"abc") is False
    com.end_write()
    assert child.writes == [b"abc"]


def test_buffered_write_splits_on_overflow():
    child = FakeCom()
    com = ManagedCom(child, 8, 4)
    com.begin_write()
    com.write(b"0123456789")
    assert child.writes == [b"0123", b"4567"]
    com.end_write()
    assert b"".join(child.writes) == b"0123456789"


def test_write_reports_full_buffer():
    com = ManagedCom(FakeCom(), 8, 4)
    com.begin_write()
    assert com.write(b"abcd") is True


def test_close_clears_ring_and_closes_child():
    child = FakeCom(b"abcd")
    com = ManagedCom(child, 8, 8)
    com.open()
    assert child.opened
    assert com.length() == 4
    com.close()
    assert not child.opened
    assert com.length() == 0


def test_clear_immediate_discards_everything():
    child = FakeCom(b"abcdefghij")
    com = ManagedCom(child, 4, 8)
    com.length()
    com.clear_immediate()
    assert com.read(10) == b""
    assert child.get_timeout() == 50


def test_clear_timeout_discards_everything():
    child = FakeCom(b"abcdefghij", timeout=20)
    com = ManagedCom(child, 4, 8)
    com.length()
    com.clear_timeout(5)
    assert com.read(10) == b""
    assert child.get_timeout() == 20


def test_context_manager_opens_and_closes():
    child = FakeCom()
    with ManagedCom(child, 8, 8) as com:
        assert child.opened
        assert com.child is child
    assert not child.opened


def test_reenumerate_rewraps_found_device():
    old = FakeCom(b"old")
    new = FakeCom(b"new")
    old.found = new
    com = ManagedCom(old, 8, 8)
    com.length()
    seen = []

    def callback(found, data):
        seen.append((found, data))
        return AutoDetectResult.SUCCESS

    assert com.reenumerate(callback, "data") == AutoDetectResult.SUCCESS
    assert seen == [(com, "data")]
    assert com.child is new
    assert com.read(3) == b"new"


def test_reenumerate_without_support_raises():
    class Plain(FakeCom):
        reenumerate = ComClass.reenumerate

    com = ManagedCom(Plain(), 8, 8)
    with pytest.raises(TssError) as info:
        com.reenumerate(lambda c, d: AutoDetectResult.SUCCESS, None)
    assert info.value.code == ErrorCode.UNIMPLEMENTED_DETECTION


def test_base_read_until():
    child = FakeCom(b"ab\x00cd")
    assert base_read_until(child, 0, 10) == b"ab\x00"
    assert child.get_timeout() == 50
    assert base_read_until(child, 0, 1) == b"c"


def test_base_clear():
    child = FakeCom(bytes(100), timeout=30)
    base_clear(child)
    assert child.incoming == bytearray()
    assert child.get_timeout() == 30


def test_base_clear_timeout():
    child = FakeCom(bytes(100), timeout=20)
    base_clear_timeout(child, 5)
    assert child.incoming == bytearray()
    assert child.get_timeout() == 20