from fastapi import APIRouter, HTTPException, Depends, Request
from features.common.exceptions.tide_exceptions import NoLocationSelectedError
from features.common.models.location_types import Location
from features.tides.models.tide_types import SessionState, SessionStatus, TideSummary
from features.tides.services.tide_session import TideSessionController
from features.tides.services.tide_summary import summarize

router = APIRouter(
    prefix="/tides",
    tags=["Tides"]
)

def get_session(request: Request) -> TideSessionController:
    """Dependency to get the TideSessionController instance."""
    return request.app.state.tide_session

@router.get(
    "/state",
    response_model=SessionState,
    summary="Get the tide session state",
    description="Returns the current location, status and tide series"
)
async def get_state(
    session: TideSessionController = Depends(get_session)
) -> SessionState:
    """Get the current session state."""
    return session.state

@router.post(
    "/location",
    response_model=SessionState,
    summary="Select a location",
    description="Saves the location, records it as recent and fetches its tides for the next 24 hours"
)
async def select_location(
    location: Location,
    session: TideSessionController = Depends(get_session)
) -> SessionState:
    """Select a location and wait for its tide data."""
    return await session.select_location(location)

@router.post(
    "/retry",
    response_model=SessionState,
    summary="Retry the current location",
    description="Fetches tide data again for the currently selected location"
)
async def retry(
    session: TideSessionController = Depends(get_session)
) -> SessionState:
    """Fetch again for the current location."""
    try:
        return await session.retry()
    except NoLocationSelectedError as e:
        raise HTTPException(status_code=409, detail=str(e))

@router.get(
    "/summary",
    response_model=TideSummary,
    summary="Get a summary of the loaded tides",
    description="Returns the next high and low tides and the events of the next 24 hours"
)
async def get_summary(
    session: TideSessionController = Depends(get_session)
) -> TideSummary:
    """Summarize the loaded tide series."""
    state = session.state
    if state.status != SessionStatus.LOADED:
        raise HTTPException(status_code=409, detail=f"Tide data is not loaded (status: {state.status.value})")
    return summarize(state.events)
