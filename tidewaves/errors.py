"""Error taxonomy for TimeWaves.

Every failure surfaced by the engine is a subclass of TideWavesError, so callers
can catch the whole family at once or single out the case they care about.
Errors raised by the provider clients derive from BaseClientError.
"""


class TideWavesError(Exception):
    """Base exception for all TimeWaves errors."""


class InvalidRequest(TideWavesError):
    """Malformed coordinates or request parameters."""


class NoStationsAvailable(TideWavesError):
    """The station catalog had no candidates to choose from."""


class EmptyInput(TideWavesError):
    """A prediction series with no samples was passed for classification."""


class BaseClientError(TideWavesError):
    """Base exception for all API client errors."""


class TransportError(BaseClientError):
    """Network or connection failure talking to a provider.

    This is the only client error that is retried by the transport layer.
    """


class ProviderError(BaseClientError):
    """The provider reported an error or returned a non-success status."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DecodingError(BaseClientError):
    """The provider response could not be parsed."""


class NoDataAvailable(BaseClientError):
    """The provider answered successfully but without any data."""
