"""Type definitions for tidewaves.

Internal value types shared by the clients and the core engine. API
request/response models live in api_types.py.

All timestamps are naive datetimes in the station's local time, which is how
NOAA CO-OPS reports them when queried with time_zone=lst_ldt.
"""

# Standard library imports
import datetime
import enum
from typing import Annotated, List, Optional

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field

# Predictions are requested from 12 hours before to 24 hours after the reference time
WINDOW_LOOKBACK = datetime.timedelta(hours=12)
WINDOW_LOOKAHEAD = datetime.timedelta(hours=24)


class TideKind(enum.Enum):
    HIGH = "high"
    LOW = "low"
    CURRENT = "current"


class Coordinate(BaseModel, frozen=True):
    """A point on the earth's surface in decimal degrees."""

    model_config = ConfigDict(extra="forbid")

    latitude: Annotated[float, Field(ge=-90, le=90, description="Latitude")]
    longitude: Annotated[float, Field(ge=-180, le=180, description="Longitude")]


class Station(BaseModel, frozen=True):
    """A tide prediction station from the NOAA CO-OPS catalog."""

    model_config = ConfigDict(extra="forbid")

    id: str  # Opaque station identifier (e.g., "8518750")
    name: str
    location: Coordinate
    utc_offset: Annotated[
        Optional[float],
        Field(ge=-12, le=14, description="Standard time offset from UTC in hours"),
    ] = None
    observes_dst: bool = False


class RawSample(BaseModel, frozen=True):
    """A single water level prediction."""

    model_config = ConfigDict(extra="forbid")

    timestamp: datetime.datetime
    level: float  # Height in meters relative to MLLW


class TideEvent(BaseModel, frozen=True):
    """A significant point in a prediction series (high, low or current level)."""

    model_config = ConfigDict(extra="forbid")

    timestamp: datetime.datetime
    height: float
    kind: TideKind


class Location(BaseModel, frozen=True):
    """A named place, e.g. a geocoder search hit."""

    model_config = ConfigDict(extra="forbid")

    name: str  # "City, Country" when derivable
    coordinate: Coordinate


class QueryWindow(BaseModel, frozen=True):
    """Time range of predictions to request for a single query."""

    model_config = ConfigDict(extra="forbid")

    begin: datetime.datetime
    end: datetime.datetime

    @classmethod
    def around(cls, reference_time: datetime.datetime) -> "QueryWindow":
        """Build the window for a query made at reference_time."""
        return cls(
            begin=reference_time - WINDOW_LOOKBACK,
            end=reference_time + WINDOW_LOOKAHEAD,
        )


class TideOutlook(BaseModel, frozen=True):
    """Everything produced by one outlook query."""

    model_config = ConfigDict(extra="forbid")

    station: Station
    window: QueryWindow
    events: List[TideEvent]
