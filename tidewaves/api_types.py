"""API Type definitions for tidewaves.

This module contains type definitions used for API request/response handling
via Pydantic models. Internal types are defined in types.py.
"""

# Standard library imports
from typing import List

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field

# Local imports
from tidewaves import types

#############################################################
# API TYPES - Used for external API request/response models  #
#############################################################


class CoordinateInfo(BaseModel):
    """Geographic coordinate for API responses."""

    model_config = ConfigDict(extra="forbid")

    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")

    @classmethod
    def from_coordinate(cls, coordinate: types.Coordinate) -> "CoordinateInfo":
        return cls(latitude=coordinate.latitude, longitude=coordinate.longitude)


class StationInfo(BaseModel):
    """Tide prediction station for API responses."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="NOAA CO-OPS station ID (e.g., '8518750')")
    name: str = Field(..., description="Station name")
    location: CoordinateInfo
    distance_km: float | None = Field(
        None, description="Distance from the query point in kilometers, if known"
    )


class TideEventInfo(BaseModel):
    """Individual tide event for API responses."""

    model_config = ConfigDict(extra="forbid")

    time: str = Field(
        ...,
        description="ISO 8601 formatted timestamp (in the station's local time)",
    )
    height: float = Field(..., description="Water level in meters relative to MLLW")
    kind: types.TideKind = Field(..., description="Event kind (high, low or current)")


class TideOutlookResponse(BaseModel):
    """Response for a tide outlook query."""

    model_config = ConfigDict(extra="forbid")

    station: StationInfo
    window_begin: str = Field(..., description="ISO 8601 start of the queried window")
    window_end: str = Field(..., description="ISO 8601 end of the queried window")
    events: List[TideEventInfo] = Field(
        ..., description="High, low and current events in ascending time order"
    )


class LocationInfo(BaseModel):
    """A place search result for API responses."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Display name, 'City, Country' when derivable")
    location: CoordinateInfo
