from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from features.tides.models.tide_types import HeightRange, TideEvent, TideSummary, TideType

def summarize(events: Sequence[TideEvent], now: Optional[datetime] = None) -> TideSummary:
    """Build the next-high/next-low and 24 hour view of a sorted series."""
    now = now or datetime.now(timezone.utc)
    horizon = now + timedelta(hours=24)

    future = [e for e in events if e.time > now]
    upcoming = [e for e in events if now <= e.time <= horizon]
    heights = [e.height for e in upcoming]

    return TideSummary(
        next_high=next((e for e in future if e.type == TideType.HIGH), None),
        next_low=next((e for e in future if e.type == TideType.LOW), None),
        current=next((e for e in events if e.type == TideType.CURRENT), None),
        upcoming=upcoming,
        height_range=HeightRange(min=min(heights), max=max(heights)) if heights else None
    )
