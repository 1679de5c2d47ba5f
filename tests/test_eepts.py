from dataclasses import astuple

import pytest

from tsscore.eepts import EeptsOutput, eepts_from_values

VALUES = (3, 1000, -83.1, 38.5, 210.0, 90.0, 12.5, 1.0, 2.0, 0.0, 1, 2, 0.75, 0.5)


def test_from_values_round_trip():
    step = eepts_from_values(VALUES)
    assert astuple(step) == VALUES


def test_field_order_matches_response():
    step = eepts_from_values(VALUES)
    assert step.segment_count == VALUES[0]
    assert step.estimated_gps_longitude == VALUES[2]
    assert step.estimated_gps_latitude == VALUES[3]
    assert step.overall_confidence == VALUES[-1]


def test_integer_fields_are_ints():
    step = eepts_from_values(VALUES)
    assert isinstance(step.estimated_locomotion_mode, int)
    assert step.estimated_receiver_location == VALUES[11]


def test_accepts_iterators():
    step = eepts_from_values(iter(VALUES))
    assert step == EeptsOutput(*VALUES)


@pytest.mark.parametrize("values", [VALUES[:-1], VALUES + (0,), ()])
def test_wrong_count_rejected(values):
    with pytest.raises(ValueError):
        eepts_from_values(values)