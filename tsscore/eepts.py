"""Pedestrian tracking (EEPTS) step output."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterable


@dataclass
class EeptsOutput:
    """One estimated step, in the order the sensor sends its fields."""

    segment_count: int
    timestamp: int
    estimated_gps_longitude: float
    estimated_gps_latitude: float
    estimated_gps_altitude: float
    estimated_heading_angle: float
    estimated_distance_travelled: float
    estimated_distance_x: float
    estimated_distance_y: float
    estimated_distance_z: float
    estimated_locomotion_mode: int
    estimated_receiver_location: int
    last_event_confidence: float
    overall_confidence: float


def eepts_from_values(values: Iterable) -> EeptsOutput:
    """Build an :class:`EeptsOutput` from the values of a step response."""
    values = tuple(values)
    expected = len(fields(EeptsOutput))
    if len(values) != expected:
        raise ValueError(f"expected {expected} values, got {len(values)}")
    converted = [
        int(value) if field.type == "int" else float(value)
        for field, value in zip(fields(EeptsOutput), values)
    ]
    return EeptsOutput(*converted)