# noqa

from .base import BaseApiClient
from .coops import CoopsApi
from .nominatim import NominatimApi

__all__ = ["BaseApiClient", "CoopsApi", "NominatimApi"]
