import asyncio
import logging
import aiohttp
from typing import List, Optional, Sequence
from pydantic import BaseModel, Field, ValidationError

from core.config import settings
from features.common.exceptions.tide_exceptions import SearchError
from features.common.models.location_types import Location, make_location_id

logger = logging.getLogger(__name__)

class GeocodingResult(BaseModel):
    """One place from the Open-Meteo geocoding API."""
    name: str
    latitude: float
    longitude: float
    admin1: Optional[str] = None  # state / region
    country: Optional[str] = None

class GeocodingResponse(BaseModel):
    # "results" is omitted entirely when nothing matches
    results: List[GeocodingResult] = Field(default_factory=list)

def build_display_name(name: str, fragments: Sequence[Optional[str]]) -> str:
    """Append each fragment unless the name built so far already contains it."""
    full_name = name
    for fragment in fragments:
        if fragment and fragment not in full_name:
            full_name += f", {fragment}"
    return full_name

class GeocodingClient:
    """Free-text place search returning Location candidates."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None
    ) -> None:
        self.base_url = base_url or settings.geocoding_base_url
        self._session = session
        self._owns_session = session is None

    async def _init_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        if self._session and self._owns_session:
            await self._session.close()
        self._session = None

    async def search(self, query: str) -> List[Location]:
        """Search for places matching query.

        Raises:
            SearchError: on transport, HTTP status or decode failures.
        """
        query = (query or "").strip()
        if not query:
            return []

        params = {
            "name": query,
            "count": str(settings.geocoding_result_limit),
            "language": settings.geocoding_language,
            "format": "json"
        }

        logger.info(f"🔎 Searching for: {query}")
        session = await self._init_session()
        try:
            async with session.get(self.base_url, params=params) as response:
                body = await response.text(errors="replace")
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Geocoding error for '{query}': {str(e) or type(e).__name__}")
            raise SearchError(str(e) or type(e).__name__) from e

        if not 200 <= status < 300:
            logger.error(f"Geocoding service returned {status} for '{query}'")
            raise SearchError(f"Geocoding service returned status {status}")

        try:
            payload = GeocodingResponse.model_validate_json(body)
        except ValidationError as e:
            logger.error(f"Could not decode geocoding response for '{query}': {e.error_count()} error(s)")
            raise SearchError("Invalid response from geocoding service") from e

        locations = [
            Location(
                id=make_location_id(result.latitude, result.longitude),
                name=build_display_name(result.name, [result.admin1, result.country]),
                latitude=result.latitude,
                longitude=result.longitude
            )
            for result in payload.results
        ]
        logger.info(f"Found {len(locations)} locations")
        return locations
