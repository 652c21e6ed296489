"""OpenStreetMap Nominatim place search client.

References:
    - Search API: https://nominatim.org/release-docs/latest/api/Search/
    - Usage policy: https://operations.osmfoundation.org/policies/nominatim/
"""

# Standard library imports
import logging
from typing import Any, Dict, List, Optional

# Third-party imports
import aiohttp

# Local imports
from tidewaves.clients.base import BaseApiClient
from tidewaves.core import locations
from tidewaves.errors import DecodingError
from tidewaves.types import Location


class NominatimApi(BaseApiClient):
    """Client for free-text place search against Nominatim.

    The usage policy requires every request to identify the application, so
    a User-Agent header is always sent.
    """

    BASE_URL = "https://nominatim.openstreetmap.org/search"
    DEFAULT_USER_AGENT = "TimeWaves/1.0"
    DEFAULT_LIMIT = 5
    # Restricts hits to cities, towns and villages
    FEATURE_TYPE = "settlement"

    @property
    def client_type(self) -> str:
        return "nominatim"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        user_agent: Optional[str] = None,
        base_url: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> None:
        super().__init__(session, max_retries=max_retries, retry_delay=retry_delay)
        self.user_agent = user_agent or self.DEFAULT_USER_AGENT
        self.base_url = base_url or self.BASE_URL
        self.limit = limit or self.DEFAULT_LIMIT

    @property
    def headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": "application/json"}

    async def search(self, query: str, tag: Optional[str] = None) -> List[Any]:
        """Return the raw search hits for a free-text query.

        Raises:
            ProviderError: If the request fails with a non-success status
            DecodingError: If the response is not a JSON array
        """
        params = {
            "q": query,
            "format": "json",
            "limit": self.limit,
            "featuretype": self.FEATURE_TYPE,
            "addressdetails": 1,
        }
        payload = await self.request_with_retry(
            self.base_url, params, headers=self.headers, tag=tag
        )
        if not isinstance(payload, list):
            self.log(
                f"Unexpected search response type {type(payload).__name__}",
                level=logging.ERROR,
                tag=tag,
            )
            raise DecodingError("Search response is not a JSON array")
        return payload

    async def search_locations(
        self, query: str, tag: Optional[str] = None
    ) -> List[Location]:
        """Search for places matching query and normalize the hits.

        A blank query returns no results without contacting the provider.
        """
        query = query.strip()
        if not query:
            return []
        hits = await self.search(query, tag=tag)
        results = locations.normalize(hits)
        self.log(
            f"Search for {query!r} returned {len(results)} of {len(hits)} hits",
            tag=tag,
        )
        return results
