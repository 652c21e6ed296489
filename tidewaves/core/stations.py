"""Nearest station selection."""

import logging
import math
from typing import Sequence

from tidewaves.core import geo
from tidewaves.errors import NoStationsAvailable
from tidewaves.types import Coordinate, Station


def nearest(point: Coordinate, candidates: Sequence[Station]) -> Station:
    """Return the candidate station closest to point.

    Candidates are scanned in order and the first station at the minimum
    distance wins, so ties resolve deterministically.

    Args:
        point: Query coordinate
        candidates: Station catalog to choose from

    Returns:
        The nearest station (always a member of candidates)

    Raises:
        NoStationsAvailable: If candidates is empty
    """
    best: Station | None = None
    best_distance = math.inf
    for station in candidates:
        d = geo.distance(point, station.location)
        if best is None or d < best_distance:
            best = station
            best_distance = d

    if best is None:
        logging.warning("No stations available to choose from")
        raise NoStationsAvailable("No nearby tide stations found")

    logging.info(
        f"Nearest station to ({point.latitude}, {point.longitude}): "
        f"{best.name} (ID: {best.id}) at {best_distance / 1000:.2f}km"
    )
    return best
