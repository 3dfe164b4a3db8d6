"""
Shared fixtures for the tide session tests.
"""
import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

import pytest

from features.common.models.location_types import Location, make_location_id
from features.locations.services.key_value_store import InMemoryKeyValueStore
from features.locations.services.preference_store import LocationPreferenceStore
from features.tides.models.tide_types import TideEvent, TideType


def make_location(name: str, latitude: float, longitude: float) -> Location:
    return Location(
        id=make_location_id(latitude, longitude),
        name=name,
        latitude=latitude,
        longitude=longitude,
    )


def make_event(epoch: int, height: float, type: TideType) -> TideEvent:
    return TideEvent(
        time=datetime.fromtimestamp(epoch, tz=timezone.utc),
        height=height,
        type=type,
    )


class FakeTideClient:
    """Stands in for WorldTidesClient; results are scripted per location id."""

    def __init__(self):
        self.results: Dict[str, Union[List[TideEvent], Exception]] = {}
        self.delays: Dict[str, float] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[Location] = []
        self.on_fetch = None
        self.closed = False

    def respond(
        self,
        location: Location,
        result: Union[List[TideEvent], Exception],
        delay: float = 0.0,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.results[location.id] = result
        self.delays[location.id] = delay
        if gate is not None:
            self.gates[location.id] = gate

    async def fetch_tides(self, location: Location, now: Optional[datetime] = None) -> List[TideEvent]:
        self.calls.append(location)
        if self.on_fetch:
            self.on_fetch(location)
        if location.id in self.gates:
            await self.gates[location.id].wait()
        delay = self.delays.get(location.id, 0.0)
        if delay:
            await asyncio.sleep(delay)
        result = self.results.get(location.id, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def santa_cruz() -> Location:
    return make_location("Santa Cruz, California", 36.9741, -122.0308)


@pytest.fixture
def boston() -> Location:
    return make_location("Boston, Massachusetts", 42.3601, -71.0589)


@pytest.fixture
def denver() -> Location:
    return make_location("Denver, Colorado", 39.7392, -104.9903)


@pytest.fixture
def sample_events() -> List[TideEvent]:
    return [
        make_event(1735700000, 0.3, TideType.LOW),
        make_event(1735710000, 0.9, TideType.CURRENT),
        make_event(1735722000, 1.8, TideType.HIGH),
    ]


@pytest.fixture
def kv_backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def preference_store(kv_backend) -> LocationPreferenceStore:
    store = LocationPreferenceStore(kv_backend, recent_limit=5)
    store.load()
    return store


@pytest.fixture
def fake_tide_client() -> FakeTideClient:
    return FakeTideClient()
