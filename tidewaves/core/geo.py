"""Great-circle distance between coordinates."""

import math

from tidewaves.types import Coordinate

EARTH_RADIUS_M = 6_371_000.0  # Mean earth radius in meters


def distance(a: Coordinate, b: Coordinate) -> float:
    """Return the haversine distance between two coordinates in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    # Rounding can push h slightly outside [0, 1] for antipodal points
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
