import logging
from typing import Any, List, Optional
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from core.config import settings
from features.common.models.location_types import Location, location_key
from features.common.utils.keyed_set import KeyedSet
from features.locations.services.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

SAVED_LOCATION_KEY = "savedLocation"
RECENT_LOCATIONS_KEY = "recentLocations"
FAVORITE_LOCATIONS_KEY = "favoriteLocations"

_location_adapter = TypeAdapter(Location)
_location_list_adapter = TypeAdapter(List[Location])

class PersistedPreferences(BaseModel):
    """Everything the store keeps between sessions."""
    saved_location: Optional[Location] = None
    recent_locations: Optional[List[Location]] = None
    favorite_locations: List[Location] = Field(default_factory=list)

class LocationPreferenceStore:
    """Last selected, recent and favorite locations.

    Every mutation writes through to the backend before returning. Encoding
    and decoding problems are logged and treated as an absent value; nothing
    here raises to the caller.
    """

    def __init__(self, backend: KeyValueStore, recent_limit: Optional[int] = None):
        self.backend = backend
        self.recent_limit = recent_limit or settings.recent_locations_limit
        self._saved_location: Optional[Location] = None
        self._recent_locations: Optional[List[Location]] = None
        self._favorites: KeyedSet[Location] = KeyedSet(location_key)

    @property
    def saved_location(self) -> Optional[Location]:
        return self._saved_location

    @property
    def recent_locations(self) -> Optional[List[Location]]:
        if self._recent_locations is None:
            return None
        return list(self._recent_locations)

    @property
    def favorite_locations(self) -> List[Location]:
        return self._favorites.to_list()

    def snapshot(self) -> PersistedPreferences:
        return PersistedPreferences(
            saved_location=self.saved_location,
            recent_locations=self.recent_locations,
            favorite_locations=self.favorite_locations
        )

    def load(self) -> PersistedPreferences:
        """Read all three keys; a missing or corrupt key falls back on its own."""
        self._saved_location = self._decode(SAVED_LOCATION_KEY, _location_adapter)
        recent = self._decode(RECENT_LOCATIONS_KEY, _location_list_adapter)
        self._recent_locations = None if recent is None else self._dedupe_recent(recent)
        favorites = self._decode(FAVORITE_LOCATIONS_KEY, _location_list_adapter) or []
        self._favorites = KeyedSet(location_key, favorites)

        logger.info(
            f"Loaded preferences: saved={'yes' if self._saved_location else 'no'}, "
            f"recent={len(self._recent_locations or [])}, favorites={len(self._favorites)}"
        )
        return self.snapshot()

    def _dedupe_recent(self, locations: List[Location]) -> List[Location]:
        """Keep the first occurrence of each id, capped at recent_limit."""
        seen = set()
        recent = []
        for location in locations:
            key = location_key(location)
            if key in seen:
                continue
            seen.add(key)
            recent.append(location)
        return recent[:self.recent_limit]

    def save_selected(self, location: Location) -> None:
        self._saved_location = location
        self._encode(SAVED_LOCATION_KEY, location, _location_adapter)

    def record_recent(self, location: Location) -> List[Location]:
        """Move location to the front of the recents, capped at recent_limit."""
        recent = [
            existing for existing in (self._recent_locations or [])
            if location_key(existing) != location_key(location)
        ]
        recent.insert(0, location)
        recent = recent[:self.recent_limit]

        self._recent_locations = recent
        self._encode(RECENT_LOCATIONS_KEY, recent, _location_list_adapter)
        return list(recent)

    def toggle_favorite(self, location: Location) -> bool:
        """Flip favorite membership by id and return the new membership."""
        is_member = self._favorites.toggle(location)
        self._encode(FAVORITE_LOCATIONS_KEY, self._favorites.to_list(), _location_list_adapter)
        return is_member

    def is_favorite(self, location: Location) -> bool:
        return location in self._favorites

    def _encode(self, key: str, value: Any, adapter: TypeAdapter) -> None:
        try:
            data = adapter.dump_json(value)
        except ValueError as e:
            logger.error(f"Could not encode preference '{key}': {str(e)}")
            return
        if not self.backend.set(key, data):
            logger.warning(f"⚠️  Preference '{key}' was not persisted")

    def _decode(self, key: str, adapter: TypeAdapter) -> Optional[Any]:
        data = self.backend.get(key)
        if data is None:
            return None
        try:
            return adapter.validate_json(data)
        except ValidationError as e:
            logger.warning(f"⚠️  Ignoring corrupt preference '{key}': {e.error_count()} error(s)")
            return None
        except ValueError as e:
            logger.warning(f"⚠️  Ignoring unreadable preference '{key}': {str(e)}")
            return None
