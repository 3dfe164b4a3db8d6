import logging
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEY = "YOUR_DEFAULT_KEY"

class Settings(BaseSettings):
    """Application settings."""

    # WorldTides v3 settings
    worldtides_base_url: str = "https://www.worldtides.info/api/v3"
    worldtides_api_key: Optional[str] = None
    tide_datum: str = "LAT"  # Lowest Astronomical Tide
    tide_window_hours: int = 24  # Hours requested either side of "now"

    # Location preferences
    preferences_dir: str = "data/preferences"
    recent_locations_limit: int = 5

    # Open-Meteo geocoding (free, no key)
    geocoding_base_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    geocoding_result_limit: int = 10
    geocoding_language: str = "en"

    # Offered when nothing has been selected yet
    suggested_locations: List[str] = [
        "San Francisco, CA",
        "Seattle, WA",
        "Boston, MA",
        "Miami, FL",
        "Honolulu, HI"
    ]
    # Offered when a location has no tidal data
    coastal_suggestions: List[str] = [
        "San Francisco, CA",
        "Miami Beach, FL",
        "Cape Cod, MA",
        "Malibu, CA",
        "Waikiki Beach, HI"
    ]

    def resolve_api_key(self) -> str:
        """Get the WorldTides key, falling back to a placeholder when unset."""
        key = (self.worldtides_api_key or "").strip()
        if not key:
            logger.warning("⚠️  Using default API key. Set TIDES_WORLDTIDES_API_KEY to query WorldTides")
            return PLACEHOLDER_API_KEY
        return key

    model_config = SettingsConfigDict(
        env_prefix="tides_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
