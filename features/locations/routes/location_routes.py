from typing import List
from fastapi import APIRouter, HTTPException, Depends, Query, Request
from pydantic import BaseModel

from core.config import settings
from features.common.exceptions.tide_exceptions import SearchError
from features.common.models.location_types import Location
from features.locations.services.geocoding_client import GeocodingClient
from features.tides.services.tide_session import TideSessionController
import logging

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/locations",
    tags=["Locations"],
    responses={
        502: {"description": "Geocoding service unavailable"}
    }
)

class FavoriteToggleResponse(BaseModel):
    location: Location
    is_favorite: bool

def get_session(request: Request) -> TideSessionController:
    """Dependency to get the TideSessionController instance."""
    return request.app.state.tide_session

def get_geocoder(request: Request) -> GeocodingClient:
    """Dependency to get the GeocodingClient instance."""
    return request.app.state.geocoding_client

@router.get(
    "/search",
    response_model=List[Location],
    summary="Search for locations",
    description="Returns places matching a free-text query"
)
async def search_locations(
    q: str = Query("", description="Place name to search for"),
    geocoder: GeocodingClient = Depends(get_geocoder)
) -> List[Location]:
    """Search for locations by name."""
    try:
        return await geocoder.search(q)
    except SearchError as e:
        raise HTTPException(status_code=502, detail=f"Location search failed: {e.detail}")

@router.get(
    "/recent",
    response_model=List[Location],
    summary="Get recent locations",
    description="Returns the most recently selected locations, newest first"
)
async def get_recent_locations(
    session: TideSessionController = Depends(get_session)
) -> List[Location]:
    return session.recent_locations

@router.get(
    "/favorites",
    response_model=List[Location],
    summary="Get favorite locations"
)
async def get_favorite_locations(
    session: TideSessionController = Depends(get_session)
) -> List[Location]:
    return session.favorite_locations

@router.post(
    "/favorites",
    response_model=FavoriteToggleResponse,
    summary="Toggle a favorite location",
    description="Adds the location to favorites, or removes it if it is already one"
)
async def toggle_favorite(
    location: Location,
    session: TideSessionController = Depends(get_session)
) -> FavoriteToggleResponse:
    is_favorite = session.toggle_favorite(location)
    return FavoriteToggleResponse(location=location, is_favorite=is_favorite)

@router.get(
    "/suggested",
    response_model=List[str],
    summary="Get suggested place names"
)
async def get_suggested_locations() -> List[str]:
    return settings.suggested_locations
