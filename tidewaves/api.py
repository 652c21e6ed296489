"""API handlers for the TimeWaves service.

This module contains FastAPI route handlers for the tide outlook and place
search endpoints. Provider clients and settings are read from app.state,
which is populated by the application lifespan (see main.py).
"""

# Standard library imports
import logging
from typing import List, NoReturn

# Third-party imports
import fastapi
from fastapi import HTTPException

# Local imports
from tidewaves import util
from tidewaves.api_types import (
    CoordinateInfo,
    LocationInfo,
    StationInfo,
    TideEventInfo,
    TideOutlookResponse,
)
from tidewaves.clients.coops import CoopsApi
from tidewaves.clients.nominatim import NominatimApi
from tidewaves.config import Settings
from tidewaves.core import geo, outlook, stations
from tidewaves.errors import (
    BaseClientError,
    InvalidRequest,
    NoDataAvailable,
    NoStationsAvailable,
    TideWavesError,
)
from tidewaves.types import Coordinate, Station


def raise_http_error(e: TideWavesError, tag: str) -> NoReturn:
    """Translate an engine error into an HTTPException.

    Caller mistakes and missing data are logged as warnings, upstream failures
    as errors.
    """
    if isinstance(e, InvalidRequest):
        logging.warning(f"[{tag}] Invalid request: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    if isinstance(e, (NoStationsAvailable, NoDataAvailable)):
        logging.warning(f"[{tag}] No data: {e}")
        raise HTTPException(status_code=404, detail=str(e)) from e
    if isinstance(e, BaseClientError):
        logging.error(f"[{tag}] Upstream provider failure: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e
    logging.error(f"[{tag}] Unexpected engine error: {e}")
    raise HTTPException(status_code=500, detail=str(e)) from e


def station_info(station: Station, point: Coordinate | None = None) -> StationInfo:
    distance_km = None
    if point is not None:
        distance_km = round(geo.distance(point, station.location) / 1000, 3)
    return StationInfo(
        id=station.id,
        name=station.name,
        location=CoordinateInfo.from_coordinate(station.location),
        distance_km=distance_km,
    )


def register_routes(app: fastapi.FastAPI) -> None:
    """Register API routes with the FastAPI application.

    Args:
        app: The FastAPI application
    """

    def get_settings() -> Settings:
        return app.state.settings  # type: ignore[no-any-return]

    def get_coops() -> CoopsApi:
        return app.state.coops_client  # type: ignore[no-any-return]

    def get_nominatim() -> NominatimApi:
        return app.state.nominatim_client  # type: ignore[no-any-return]

    @app.get("/api/tides", response_model=TideOutlookResponse)
    async def tide_outlook(
        lat: float, lon: float, shift: int = 0
    ) -> TideOutlookResponse:
        """Return high, low and current tide events at the station nearest (lat, lon).

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees
            shift: Time shift in minutes from the current time

        Raises:
            HTTPException: 400 for bad coordinates, 404 when no station or
                predictions are available, 502 when a provider fails
        """
        tag = f"{lat:.4f},{lon:.4f}"
        logging.info(f"[{tag}] Processing tide outlook request with shift={shift}")
        client = get_coops()
        try:
            point = util.make_coordinate(lat, lon)
            catalog = await client.stations(tag=tag)
            station = stations.nearest(point, catalog)
            # Predictions come back in station local time, so "now" must too
            timezone = util.station_timezone(station, get_settings().timezone)
            reference_time = util.effective_time(timezone, shift_minutes=shift)
            result = await outlook.station_outlook(
                client, station, reference_time, tag=tag
            )
        except TideWavesError as e:
            raise_http_error(e, tag)

        return TideOutlookResponse(
            station=station_info(result.station, point),
            window_begin=result.window.begin.isoformat(),
            window_end=result.window.end.isoformat(),
            events=[
                TideEventInfo(
                    time=event.timestamp.isoformat(),
                    height=event.height,
                    kind=event.kind,
                )
                for event in result.events
            ],
        )

    @app.get("/api/stations/nearest", response_model=StationInfo)
    async def nearest_station(lat: float, lon: float) -> StationInfo:
        """Return the tide prediction station nearest (lat, lon)."""
        tag = f"{lat:.4f},{lon:.4f}"
        logging.info(f"[{tag}] Processing nearest station request")
        try:
            point = util.make_coordinate(lat, lon)
            catalog = await get_coops().stations(tag=tag)
            station = stations.nearest(point, catalog)
        except TideWavesError as e:
            raise_http_error(e, tag)
        return station_info(station, point)

    @app.get("/api/search", response_model=List[LocationInfo])
    async def search(q: str = "") -> List[LocationInfo]:
        """Search places by free text and return normalized locations."""
        logging.info(f"[search] Processing search request for {q!r}")
        try:
            results = await get_nominatim().search_locations(q, tag="search")
        except TideWavesError as e:
            raise_http_error(e, "search")
        return [
            LocationInfo(
                name=location.name,
                location=CoordinateInfo.from_coordinate(location.coordinate),
            )
            for location in results
        ]

    @app.get("/api/healthy", status_code=200)
    async def healthy() -> bool:
        """Liveness check."""
        return True
