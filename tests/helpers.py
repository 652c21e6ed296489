"""Utility functions for tests."""

import datetime
import json
from typing import Any, List

from tidewaves.types import Coordinate, RawSample, Station

T0 = datetime.datetime(2025, 4, 19, 0, 0)
HALF_HOUR = datetime.timedelta(minutes=30)


def assert_json_serializable(obj: Any) -> None:
    """Assert that an object is JSON serializable.

    Raises:
        AssertionError: If the object is not JSON serializable.
    """
    try:
        json.dumps(obj)
    except (TypeError, ValueError) as e:
        raise AssertionError(f"Object is not JSON serializable: {e}") from e


def make_series(
    levels: List[float],
    start: datetime.datetime = T0,
    step: datetime.timedelta = HALF_HOUR,
) -> List[RawSample]:
    """Build evenly spaced samples with the given levels."""
    return [
        RawSample(timestamp=start + i * step, level=level)
        for i, level in enumerate(levels)
    ]


def make_station(station_id: str, lat: float, lon: float, name: str = "") -> Station:
    """Build a station at (lat, lon)."""
    return Station(
        id=station_id,
        name=name or f"Station {station_id}",
        location=Coordinate(latitude=lat, longitude=lon),
    )
