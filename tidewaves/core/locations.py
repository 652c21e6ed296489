"""Normalization of geocoder search hits into Location records."""

import logging
from typing import Any, Iterable, List, Optional

import pydantic

from tidewaves.types import Coordinate, Location

NAME_SEPARATOR = ", "


def format_name(display_name: str) -> str:
    """Reduce a geocoder display name to "first component, last component".

    "Brooklyn, Kings County, New York, United States" becomes
    "Brooklyn, United States". Names with a single component are kept as is.
    """
    components = display_name.split(NAME_SEPARATOR)
    if len(components) >= 2:
        return f"{components[0]}{NAME_SEPARATOR}{components[-1]}"
    return display_name


def _parse_degrees(value: Any) -> Optional[float]:
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        return None
    try:
        return float(value)
    except ValueError:
        return None


def normalize_hit(hit: Any) -> Optional[Location]:
    """Convert a single search hit, or return None if it is unusable.

    The geocoder reports unparseable positions as 0, so a latitude or
    longitude of exactly zero is treated as missing.
    """
    if not isinstance(hit, dict):
        return None
    display_name = hit.get("display_name")
    if not isinstance(display_name, str):
        return None

    lat = _parse_degrees(hit.get("lat"))
    lon = _parse_degrees(hit.get("lon"))
    if lat is None or lon is None or lat == 0 or lon == 0:
        return None

    try:
        coordinate = Coordinate(latitude=lat, longitude=lon)
    except pydantic.ValidationError:
        return None
    return Location(name=format_name(display_name), coordinate=coordinate)


def normalize(raw_results: Iterable[Any]) -> List[Location]:
    """Convert geocoder hits into Locations, dropping malformed ones.

    Provider order is preserved.
    """
    locations: List[Location] = []
    for hit in raw_results:
        location = normalize_hit(hit)
        if location is None:
            logging.debug(f"Discarding unusable search hit: {hit!r}")
            continue
        locations.append(location)
    return locations
