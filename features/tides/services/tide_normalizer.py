from datetime import datetime, timezone
from typing import List, Sequence

from features.tides.models.tide_types import (
    TideEvent,
    TideType,
    WorldTidesExtreme,
    WorldTidesHeight
)

def _from_epoch(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)

def normalize(
    extremes: Sequence[WorldTidesExtreme],
    heights: Sequence[WorldTidesHeight]
) -> List[TideEvent]:
    """Merge extremes and the current height sample into one sorted series.

    Only the first height sample is kept, as the current level. The sort is
    stable and extremes go in first, so on a time tie the extreme comes
    before the current sample.
    """
    events = [
        TideEvent(
            time=_from_epoch(extreme.dt),
            height=extreme.height,
            type=TideType.HIGH if extreme.type == "High" else TideType.LOW
        )
        for extreme in extremes
    ]

    if heights:
        current = heights[0]
        events.append(
            TideEvent(
                time=_from_epoch(current.dt),
                height=current.height,
                type=TideType.CURRENT
            )
        )

    return sorted(events, key=lambda event: event.time)
