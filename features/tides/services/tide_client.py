import asyncio
import logging
import aiohttp
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from pydantic import ValidationError

from core.config import settings
from features.common.exceptions.tide_exceptions import (
    DecodingError,
    NoTidalDataError,
    ServerError,
    TideServiceError,
    TransportError
)
from features.common.models.location_types import Location
from features.tides.models.tide_types import TideEvent, WorldTidesResponse
from features.tides.services.tide_normalizer import normalize

logger = logging.getLogger(__name__)

NO_TIDAL_DATA_MARKERS = ("out of range", "no tide data")

def classify_error_response(status: int, body: str) -> TideServiceError:
    """Map a non-2xx WorldTides response to a typed error.

    WorldTides answers 400 for inland coordinates, so a 400 or a body that
    says the point is out of range means there is no tide here at all.
    """
    text = (body or "").lower()
    if status == 400 or any(marker in text for marker in NO_TIDAL_DATA_MARKERS):
        return NoTidalDataError()
    return ServerError(status)

def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"{location}: {first.get('msg', 'invalid value')}"

class WorldTidesClient:
    """Client for the WorldTides v3 prediction API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None
    ) -> None:
        self.api_key = api_key or settings.resolve_api_key()
        self.base_url = base_url or settings.worldtides_base_url
        self.window = timedelta(hours=settings.tide_window_hours)
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

    def build_params(self, location: Location, now: datetime) -> Dict[str, str]:
        """Query for a window of tide_window_hours either side of now."""
        start = int((now - self.window).timestamp())
        end = int((now + self.window).timestamp())
        return {
            "extremes": "",
            "heights": "",
            "datum": settings.tide_datum,
            "lat": str(location.latitude),
            "lon": str(location.longitude),
            "start": str(start),
            "end": str(end),
            "key": self.api_key
        }

    async def fetch_response(self, location: Location, now: datetime) -> WorldTidesResponse:
        """Run the request and decode the body, raising typed errors."""
        params = self.build_params(location, now)
        session = await self._init_session()

        try:
            async with session.get(self.base_url, params=params) as response:
                body = await response.text(errors="replace")
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Transport error fetching tides for {location.name}: {str(e) or type(e).__name__}")
            raise TransportError(str(e) or type(e).__name__) from e

        logger.debug(f"WorldTides responded {status} for {location.id}")

        if not 200 <= status < 300:
            error = classify_error_response(status, body)
            logger.error(f"WorldTides error {status} for {location.name}: {body[:200]}")
            raise error

        try:
            return WorldTidesResponse.model_validate_json(body)
        except ValidationError as e:
            detail = _describe_validation_error(e)
            logger.error(f"Could not decode WorldTides response for {location.name}: {detail}")
            raise DecodingError(detail) from e

    async def fetch_tides(self, location: Location, now: Optional[datetime] = None) -> List[TideEvent]:
        """Get the sorted tide series for a location.

        Raises:
            TideServiceError: one of NoTidalDataError, ServerError,
                DecodingError or TransportError.
        """
        now = now or datetime.now(timezone.utc)
        logger.info(f"🌊 Fetching tide data for {location.name} ({location.latitude}, {location.longitude})")

        response = await self.fetch_response(location, now)
        try:
            events = normalize(response.extremes, response.heights)
        except (OverflowError, ValueError, OSError) as e:
            logger.error(f"Unusable timestamps in WorldTides response for {location.name}: {str(e)}")
            raise DecodingError(f"invalid timestamp: {str(e)}") from e

        logger.info(f"Received {len(events)} tide events for {location.name}")
        return events
