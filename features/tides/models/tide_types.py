from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

from features.common.models.location_types import Location

class TideType(str, Enum):
    """Kind of tide event."""
    HIGH = "high"
    LOW = "low"
    CURRENT = "current"

class TideEvent(BaseModel):
    """A single point of the tide series. Unique by time within a series."""
    model_config = ConfigDict(frozen=True)

    time: datetime = Field(..., description="Event time (UTC)")
    height: float = Field(..., description="Height in meters above datum")
    type: TideType = Field(..., description="high, low or current")

# WorldTides v3 wire format

class WorldTidesExtreme(BaseModel):
    dt: int
    height: float
    type: str  # "High" or "Low"

class WorldTidesHeight(BaseModel):
    dt: int
    height: float

class WorldTidesResponse(BaseModel):
    """Body of a successful WorldTides request with extremes and heights."""
    status: int
    extremes: List[WorldTidesExtreme]
    heights: List[WorldTidesHeight]

# Session state

class TideErrorInfo(BaseModel):
    """Published form of a tide fetch failure."""
    model_config = ConfigDict(frozen=True)

    kind: str
    message: str
    suggestion: Optional[str] = None
    retryable: bool = True

class SessionStatus(str, Enum):
    """Status of the tide session."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"

class SessionState(BaseModel):
    """Immutable snapshot of the tide session, replaced on every transition."""
    model_config = ConfigDict(frozen=True)

    status: SessionStatus = SessionStatus.IDLE
    location: Optional[Location] = None
    events: List[TideEvent] = Field(default_factory=list)
    error: Optional[TideErrorInfo] = None
    suggestions: List[str] = Field(default_factory=list)
    request_id: int = 0

    @computed_field
    @property
    def has_data(self) -> bool:
        return self.status == SessionStatus.LOADED and len(self.events) > 0

# Summary of a loaded series

class HeightRange(BaseModel):
    min: float
    max: float

class TideSummary(BaseModel):
    """Next extremes and the coming 24 hours of a tide series."""
    next_high: Optional[TideEvent] = Field(None, description="First high tide after now")
    next_low: Optional[TideEvent] = Field(None, description="First low tide after now")
    current: Optional[TideEvent] = Field(None, description="Current height sample")
    upcoming: List[TideEvent] = Field(default_factory=list, description="Events in the next 24 hours")
    height_range: Optional[HeightRange] = Field(None, description="Height range of upcoming events")
