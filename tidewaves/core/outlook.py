"""Tide outlook queries.

An outlook query picks the station nearest to a coordinate, fetches that
station's predictions around a reference time and reduces them to high, low
and current tide events. Errors from each step propagate unchanged.
"""

import datetime
import logging
from typing import List, Optional, Sequence

from tidewaves.clients.coops import CoopsApi
from tidewaves.core import extrema, stations
from tidewaves.types import Coordinate, QueryWindow, Station, TideEvent, TideOutlook


async def build_outlook(
    client: CoopsApi,
    point: Coordinate,
    station_catalog: Sequence[Station],
    reference_time: datetime.datetime,
    tag: Optional[str] = None,
) -> TideOutlook:
    """Run an outlook query and return the station, window and events.

    Args:
        client: CO-OPS client used to fetch the prediction series
        point: Coordinate to find the nearest station for
        station_catalog: Candidate stations
        reference_time: "Now", as a naive datetime in station local time
        tag: Optional tag for logging

    Raises:
        NoStationsAvailable: If station_catalog is empty
        NoDataAvailable: If the provider has no predictions for the station
        ProviderError, DecodingError, TransportError: If fetching fails
    """
    station = stations.nearest(point, station_catalog)
    return await station_outlook(client, station, reference_time, tag=tag)


async def station_outlook(
    client: CoopsApi,
    station: Station,
    reference_time: datetime.datetime,
    tag: Optional[str] = None,
) -> TideOutlook:
    """Fetch and classify predictions for an already selected station."""
    window = QueryWindow.around(reference_time)
    samples = await client.predictions(station, window, tag=tag)
    events = extrema.classify(samples, reference_time)
    logging.info(
        f"[{tag or station.id}] Outlook for station {station.id}: {len(events)} tide events"
    )
    return TideOutlook(station=station, window=window, events=events)


async def get_outlook(
    client: CoopsApi,
    point: Coordinate,
    station_catalog: Sequence[Station],
    reference_time: datetime.datetime,
) -> List[TideEvent]:
    """Return the tide events around reference_time at the station nearest point.

    An empty list means the window legitimately contains no events; a missing
    prediction series raises NoDataAvailable instead.
    """
    outlook = await build_outlook(client, point, station_catalog, reference_time)
    return outlook.events
