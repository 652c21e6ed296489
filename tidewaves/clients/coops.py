"""NOAA CO-OPS (Center for Operational Oceanographic Products and Services) API client."""

# Standard library imports
import datetime
import logging
from typing import Any, List, Literal, Optional, TypedDict

# Third-party imports
import aiohttp
import numpy as np
import pandas as pd
from pandera.errors import SchemaError, SchemaErrors
import pydantic

# Local imports
from tidewaves import util
from tidewaves.clients.base import BaseApiClient
from tidewaves.errors import DecodingError, InvalidRequest, NoDataAvailable, ProviderError
from tidewaves.types import Coordinate, QueryWindow, RawSample, Station

# Type definitions for NOAA CO-OPS API client
ProductType = Literal["predictions"]
RequestDateFormat = "%Y%m%d %H:%M"
PredictionTimeFormat = "%Y-%m-%d %H:%M"


class CoopsRequestParams(TypedDict, total=False):
    """Parameters for NOAA CO-OPS API requests."""

    product: ProductType
    datum: str
    begin_date: str
    end_date: str
    station: str
    interval: str
    application: str
    time_zone: str
    units: str
    format: str


class CoopsApi(BaseApiClient):
    """Client for the NOAA CO-OPS Tides and Currents API.

    Provides the catalog of tide prediction stations and the water level
    prediction series for a single station.

    API documentation: https://api.tidesandcurrents.noaa.gov/api/prod/

    Prediction timestamps are naive datetimes in the station's local time
    (either standard or daylight time).
    """

    BASE_URL = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
    STATIONS_URL = "https://api.tidesandcurrents.noaa.gov/mdapi/prod/webapi/stations.json"
    BASE_PARAMS: CoopsRequestParams = {
        "application": "timewaves",
        "time_zone": "lst_ldt",
        "units": "metric",
        "format": "json",
    }

    @property
    def client_type(self) -> str:
        return "coops"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        application: Optional[str] = None,
        base_url: Optional[str] = None,
        stations_url: Optional[str] = None,
    ) -> None:
        """Initialize CoopsApi with an aiohttp client session."""
        super().__init__(session, max_retries=max_retries, retry_delay=retry_delay)
        self.base_params: CoopsRequestParams = dict(self.BASE_PARAMS)  # type: ignore[assignment]
        if application:
            self.base_params["application"] = application
        self.base_url = base_url or self.BASE_URL
        self.stations_url = stations_url or self.STATIONS_URL

    def _format_date(self, date: datetime.datetime) -> str:
        """Format a timestamp for NOAA CO-OPS API requests."""
        return date.strftime(RequestDateFormat)

    async def stations(self, tag: Optional[str] = None) -> List[Station]:
        """Return the catalog of tide prediction stations.

        Entries with a missing or unparseable id, name or position are skipped.
        Stations keep their UTC offset ("timezonecorr") and DST flag ("observedst")
        so callers can tell the local time the predictions are reported in.

        Raises:
            DecodingError: If the response has no station list
        """
        payload = await self.request_with_retry(
            self.stations_url, {"type": "tidepredictions"}, tag=tag
        )
        raw_stations = payload.get("stations") if isinstance(payload, dict) else None
        if not isinstance(raw_stations, list):
            raise DecodingError("Station catalog response has no 'stations' list")

        stations: List[Station] = []
        for entry in raw_stations:
            station = self._parse_station(entry)
            if station is not None:
                stations.append(station)

        skipped = len(raw_stations) - len(stations)
        if skipped:
            self.log(
                f"Skipped {skipped} malformed station entries",
                level=logging.WARNING,
                tag=tag,
            )
        self.log(f"Found {len(stations)} tide prediction stations", tag=tag)
        return stations

    def _parse_station(self, entry: Any) -> Optional[Station]:
        if not isinstance(entry, dict):
            return None
        try:
            return Station(
                id=str(entry["id"]),
                name=str(entry["name"]),
                location=Coordinate(
                    latitude=float(entry["lat"]), longitude=float(entry["lng"])
                ),
                utc_offset=_parse_offset(entry.get("timezonecorr")),
                observes_dst=entry.get("observedst") is True,
            )
        except (KeyError, TypeError, ValueError, pydantic.ValidationError):
            return None

    async def predictions(
        self,
        station: Station,
        window: QueryWindow,
        tag: Optional[str] = None,
    ) -> List[RawSample]:
        """Return 30-minute water level predictions for a station.

        Args:
            station: Station to fetch predictions for
            window: Time range to cover; the provider may return fewer points at the edges
            tag: Optional tag for logging

        Returns:
            Samples in ascending timestamp order without duplicate timestamps.
            Heights are in meters relative to MLLW.

        Raises:
            InvalidRequest: If the station id is empty or the window is inverted
            ProviderError: If the request fails or the provider reports an error
            DecodingError: If the response or every sample in it is unparseable
            NoDataAvailable: If the provider returns no predictions
        """
        if not station.id.strip():
            raise InvalidRequest("Station id must not be empty")
        if window.begin > window.end:
            raise InvalidRequest("Window begin must be <= end")

        params: CoopsRequestParams = dict(self.base_params)  # type: ignore[assignment]
        params.update(
            {
                "product": "predictions",
                "datum": "MLLW",
                "begin_date": self._format_date(window.begin),
                "end_date": self._format_date(window.end),
                "station": station.id,
                "interval": "30",
            }
        )

        self.log(
            f"Fetching tide predictions for station {station.id} from {params['begin_date']} to {params['end_date']}",
            tag=tag,
        )
        payload = await self.request_with_retry(self.base_url, params, tag=tag)
        if not isinstance(payload, dict):
            raise DecodingError("Prediction response is not a JSON object")

        error = payload.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            message = message or "Unknown NOAA CO-OPS error"
            self.log(
                f"NOAA CO-OPS API data error: {message}", level=logging.ERROR, tag=tag
            )
            raise ProviderError(message)

        raw = payload.get("predictions")
        if not raw:
            raise NoDataAvailable(f"No tide data available for station {station.id}")
        if not isinstance(raw, list):
            raise DecodingError("'predictions' is not a list")

        df = self._parse_predictions(raw)
        skipped = len(raw) - len(df)
        if skipped:
            self.log(
                f"Skipped {skipped} unparseable or duplicate predictions",
                level=logging.WARNING,
                tag=tag,
            )
        if df.empty:
            raise DecodingError(
                f"None of the {len(raw)} predictions for station {station.id} could be parsed"
            )

        try:
            df = util.validate_predictions_dataframe(df)
        except (SchemaError, SchemaErrors) as e:
            raise DecodingError(f"Invalid prediction series: {e}") from e

        self.log(f"Processing {len(df)} predictions", tag=tag)
        return [
            RawSample(timestamp=ts.to_pydatetime(), level=float(level))
            for ts, level in df["level"].items()
        ]

    # Name used for the prediction step when composing an outlook query
    fetch = predictions

    def _parse_predictions(self, raw: List[Any]) -> pd.DataFrame:
        """Parse raw {t, v} records, dropping the ones that do not parse.

        Returns:
            DataFrame with index=time (naive, sorted, unique) and a float "level" column
        """
        records = [r for r in raw if isinstance(r, dict)]
        df = pd.DataFrame(
            {
                "time": [_scalar_or_none(r.get("t"), str) for r in records],
                "level": [
                    _scalar_or_none(r.get("v"), (str, int, float)) for r in records
                ],
            },
            dtype=object,
        )
        return (
            df.assign(
                time=lambda x: pd.to_datetime(
                    x["time"], format=PredictionTimeFormat, errors="coerce"
                ),
                level=lambda x: pd.to_numeric(x["level"], errors="coerce").astype(
                    float
                ),
            )
            .replace([np.inf, -np.inf], np.nan)
            .dropna()
            .drop_duplicates(subset="time", keep="first")
            .set_index("time")
            .sort_index(kind="stable")
        )


def _scalar_or_none(value: Any, types: Any) -> Any:
    """Return value if it is one of types (bools excluded), else None."""
    if isinstance(value, bool) or not isinstance(value, types):
        return None
    return value


def _parse_offset(value: Any) -> Optional[float]:
    """Parse a station's 'timezonecorr' (hours from UTC), None if absent or invalid."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
