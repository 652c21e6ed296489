"""Application configuration.

Settings are held in a single frozen Pydantic model. Defaults describe the
production providers (NOAA CO-OPS for stations and predictions, OpenStreetMap
Nominatim for place search); every field can be overridden with a
TIDEWAVES_* environment variable, e.g. TIDEWAVES_TIMEZONE=US/Pacific.
"""

# Standard library imports
import datetime
import functools
import os
from typing import Annotated, Any, Mapping, Optional

# Third-party imports
import pytz
from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "TIDEWAVES_"


class Settings(BaseModel, frozen=True):
    """Runtime configuration for the provider clients and HTTP service."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    application: Annotated[
        str,
        Field(
            description="Application name reported to NOAA CO-OPS in the 'application' parameter"
        ),
    ] = "timewaves"

    user_agent: Annotated[
        str,
        Field(
            description="Client-identifying User-Agent header, required by the Nominatim usage policy"
        ),
    ] = "TimeWaves/1.0"

    coops_data_url: Annotated[
        str, Field(description="NOAA CO-OPS data getter endpoint")
    ] = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"

    coops_stations_url: Annotated[
        str, Field(description="NOAA CO-OPS metadata endpoint listing stations")
    ] = "https://api.tidesandcurrents.noaa.gov/mdapi/prod/webapi/stations.json"

    nominatim_url: Annotated[
        str, Field(description="Nominatim free-text search endpoint")
    ] = "https://nominatim.openstreetmap.org/search"

    request_timeout: Annotated[
        float, Field(gt=0, description="Total timeout for a single request in seconds")
    ] = 30.0

    max_retries: Annotated[
        int,
        Field(ge=1, description="Attempts made for a request failing at transport level"),
    ] = 3

    retry_delay: Annotated[
        float, Field(ge=0, description="Base back-off between attempts in seconds")
    ] = 1.0

    search_limit: Annotated[
        int, Field(ge=1, le=50, description="Maximum number of place search hits")
    ] = 5

    timezone: Annotated[
        datetime.tzinfo,
        Field(
            description="Fallback timezone for 'now' when a station's UTC offset is unknown (e.g., pytz.timezone('US/Eastern'))"
        ),
    ] = pytz.timezone("US/Eastern")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from TIDEWAVES_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            pytz.UnknownTimeZoneError: If TIDEWAVES_TIMEZONE is not a known zone
            pydantic.ValidationError: If any other value is invalid
        """
        if environ is None:
            environ = os.environ
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            if name == "timezone":
                values[name] = pytz.timezone(raw)
            else:
                values[name] = raw
        return cls(**values)


@functools.lru_cache(maxsize=1)
def get() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings.from_env()
