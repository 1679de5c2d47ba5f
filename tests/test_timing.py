import time

import pytest

from tsscore import timing


@pytest.fixture(autouse=True)
def restore_clock():
    yield
    timing.set_time_functions(None, None)


def test_default_diff_is_small_and_non_negative():
    start = timing.time_get()
    elapsed = timing.time_diff(start)
    assert 0 <= elapsed < 1000


def test_default_diff_measures_milliseconds():
    start = timing.time_get()
    time.sleep(0.02)
    assert timing.time_diff(start) >= 15


def test_custom_functions_are_used():
    now = {"value": 100}
    timing.set_time_functions(lambda: now["value"], lambda start: now["value"] - start)
    start = timing.time_get()
    now["value"] += 42
    assert start == 100
    assert timing.time_diff(start) == 42


def test_none_restores_default():
    timing.set_time_functions(lambda: 7, lambda start: 7)
    timing.set_time_functions(None, None)
    start = timing.time_get()
    assert timing.time_diff(start) < 1000
    assert start != 7