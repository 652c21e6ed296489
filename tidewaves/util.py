"""Shared utilities."""

# Standard library imports
import datetime
from typing import Dict

# Third-party imports
import pandas as pd
import pydantic
import pytz

# Local application imports
from tidewaves.dataframe_models import PredictionDataModel
from tidewaves.errors import InvalidRequest
from tidewaves.types import Coordinate, Station

# Time shift limits for outlook queries (in minutes)
MAX_SHIFT_LIMIT = 1440  # 24 hours forward
MIN_SHIFT_LIMIT = -1440  # 24 hours backward

# Zones whose daylight saving rules apply to a station that observes DST,
# keyed by the station's standard time offset from UTC in hours
DST_ZONES: Dict[float, str] = {
    -4: "America/Halifax",
    -5: "US/Eastern",
    -6: "US/Central",
    -7: "US/Mountain",
    -8: "US/Pacific",
    -9: "US/Alaska",
    -10: "America/Adak",
}


def utc_now() -> datetime.datetime:
    """Returns the current time in UTC as a naive datetime (without timezone information).

    All timestamps in the application are naive datetimes in their respective timezones.
    For NOAA data, timestamps are in local time based on the station's location.
    """
    # Get timezone-aware UTC time, then strip the timezone to make it naive
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def effective_time(
    timezone: datetime.tzinfo, shift_minutes: int = 0
) -> datetime.datetime:
    """Calculate the effective time with an optional shift, in the specified timezone.

    Args:
        timezone: Timezone to convert the time to (required)
        shift_minutes: Number of minutes to shift from current time

    Returns:
        Naive datetime with the shift applied, in the specified timezone with tzinfo removed
    """
    now = utc_now().replace(tzinfo=datetime.timezone.utc)
    now = now.astimezone(timezone)

    if shift_minutes:
        # Clamp the shift limit
        shift_minutes = max(MIN_SHIFT_LIMIT, min(shift_minutes, MAX_SHIFT_LIMIT))
        now = now + datetime.timedelta(minutes=shift_minutes)

    return now.replace(tzinfo=None)


def station_timezone(
    station: Station, default: datetime.tzinfo
) -> datetime.tzinfo:
    """Return the timezone in which NOAA reports the station's local time (LST/LDT).

    Stations without a known UTC offset fall back to default. Stations that
    observe DST follow the North American rules for their standard offset;
    the others keep a fixed offset all year.
    """
    if station.utc_offset is None:
        return default
    if station.observes_dst and station.utc_offset in DST_ZONES:
        return pytz.timezone(DST_ZONES[station.utc_offset])
    return pytz.FixedOffset(round(station.utc_offset * 60))


def make_coordinate(latitude: float, longitude: float) -> Coordinate:
    """Build a Coordinate, converting validation failures into InvalidRequest.

    Raises:
        InvalidRequest: If either value is not a finite number in range
    """
    try:
        return Coordinate(latitude=latitude, longitude=longitude)
    except pydantic.ValidationError as e:
        raise InvalidRequest(
            f"Invalid coordinate ({latitude}, {longitude}): {e.error_count()} error(s)"
        ) from e


def validate_predictions_dataframe(df: pd.DataFrame) -> pd.DataFrame:
    """Validate a parsed prediction series using Pandera.

    Args:
        df: DataFrame indexed by naive timestamp ("time") with a float "level" column.

    Returns:
        The validated DataFrame.

    Raises:
        pandera.errors.SchemaError: If a validation check fails.
        pandera.errors.SchemaErrors: If the frame has columns outside the model.
    """
    return PredictionDataModel.validate(df)
