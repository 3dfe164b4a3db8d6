import logging
from typing import Callable, List, Optional

from core.config import settings
from features.common.exceptions.tide_exceptions import NoLocationSelectedError, NoTidalDataError, TideServiceError
from features.common.models.location_types import Location
from features.locations.services.preference_store import LocationPreferenceStore
from features.tides.models.tide_types import SessionState, SessionStatus
from features.tides.services.tide_client import WorldTidesClient

logger = logging.getLogger(__name__)

SessionObserver = Callable[[SessionState], None]

class TideSessionController:
    """Drives the idle -> loading -> loaded/failed tide session.

    Each fetch is tagged with a request id taken from a counter that only
    goes up. When a fetch completes, its result is applied only if its id is
    still the latest; otherwise a newer selection has superseded it and the
    result is dropped. All state changes happen on the event loop, and
    observers receive whole SessionState snapshots.
    """

    def __init__(
        self,
        client: WorldTidesClient,
        store: LocationPreferenceStore,
        coastal_suggestions: Optional[List[str]] = None
    ):
        self.client = client
        self.store = store
        if coastal_suggestions is None:
            coastal_suggestions = settings.coastal_suggestions
        self.coastal_suggestions = list(coastal_suggestions)
        self._state = SessionState()
        self._request_counter = 0
        self._observers: List[SessionObserver] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_location(self) -> Optional[Location]:
        return self._state.location

    @property
    def recent_locations(self) -> List[Location]:
        return self.store.recent_locations or []

    @property
    def favorite_locations(self) -> List[Location]:
        return self.store.favorite_locations

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        """Register an observer; returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self, state: SessionState) -> None:
        self._state = state
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception as e:
                logger.exception(f"Session observer failed: {str(e)}")

    async def select_location(self, location: Location) -> SessionState:
        """Persist the selection, then fetch its tides.

        The saved location and recents are written before the request goes
        out, so they reflect the choice even if the fetch fails.
        """
        self.store.save_selected(location)
        self.store.record_recent(location)
        return await self._fetch(location)

    async def retry(self) -> SessionState:
        """Fetch again for the current location."""
        location = self.current_location
        if location is None:
            raise NoLocationSelectedError("No location selected")
        return await self.select_location(location)

    async def load_saved_location(self) -> SessionState:
        """Restore the last selected location and fetch its tides, if there is one."""
        location = self.store.saved_location
        if location is None:
            logger.info("No saved location to restore")
            return self._state

        logger.info(f"Restoring saved location: {location.name}")
        return await self._fetch(location)

    def toggle_favorite(self, location: Location) -> bool:
        is_favorite = self.store.toggle_favorite(location)
        logger.info(f"{'⭐ Added' if is_favorite else 'Removed'} favorite {location.name}")
        return is_favorite

    def is_favorite(self, location: Location) -> bool:
        return self.store.is_favorite(location)

    def _is_stale(self, request_id: int) -> bool:
        return request_id != self._request_counter

    async def _fetch(self, location: Location) -> SessionState:
        self._request_counter += 1
        request_id = self._request_counter

        # Start from a clean slate so no previous series or error lingers
        self._publish(SessionState(
            status=SessionStatus.LOADING,
            location=location,
            request_id=request_id
        ))

        try:
            events = await self.client.fetch_tides(location)
        except TideServiceError as e:
            if self._is_stale(request_id):
                logger.warning(f"Discarding stale failure for {location.name} (request {request_id})")
                return self._state
            logger.error(f"❌ Tide fetch failed for {location.name}: {e.message}")
            state = SessionState(
                status=SessionStatus.FAILED,
                location=location,
                error=e.to_info(),
                suggestions=self.coastal_suggestions if isinstance(e, NoTidalDataError) else [],
                request_id=request_id
            )
        else:
            if self._is_stale(request_id):
                logger.warning(f"Discarding stale tide data for {location.name} (request {request_id})")
                return self._state
            if not events:
                logger.info(f"No tide events returned for {location.name}")
            state = SessionState(
                status=SessionStatus.LOADED,
                location=location,
                events=events,
                request_id=request_id
            )

        logger.info(f"✅ Tide session for {location.name} is {state.status.value}")
        self._publish(state)
        return state

    async def close(self) -> None:
        self._observers.clear()
        await self.client.close()
