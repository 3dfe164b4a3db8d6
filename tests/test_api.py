"""
Integration tests for the Tide Times HTTP routes
"""
import pytest
from fastapi.testclient import TestClient

from features.common.exceptions.tide_exceptions import NoTidalDataError, SearchError
from features.tides.services.tide_session import TideSessionController
from main import app


class FakeGeocoder:
    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error

    async def search(self, query):
        if self.error:
            raise self.error
        return [loc for loc in self.results if query.lower() in loc.name.lower()]

    async def close(self):
        pass


@pytest.fixture
def client(fake_tide_client, preference_store, santa_cruz, boston):
    """TestClient wired to fakes; the lifespan is not run."""
    app.state.tide_session = TideSessionController(
        client=fake_tide_client,
        store=preference_store,
        coastal_suggestions=["Malibu, CA"],
    )
    app.state.geocoding_client = FakeGeocoder(results=[santa_cruz, boston])
    return TestClient(app)


def as_body(location):
    return location.model_dump()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestTideRoutes:
    """Tests for /tides."""

    def test_initial_state_is_idle(self, client):
        data = client.get("/tides/state").json()
        assert data["status"] == "idle"
        assert data["location"] is None
        assert data["has_data"] is False

    def test_select_location_returns_loaded_state(self, client, fake_tide_client, santa_cruz, sample_events):
        fake_tide_client.respond(santa_cruz, sample_events)

        response = client.post("/tides/location", json=as_body(santa_cruz))

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "loaded"
        assert data["location"]["id"] == santa_cruz.id
        assert [e["type"] for e in data["events"]] == ["low", "current", "high"]
        assert data["has_data"] is True

    def test_no_tidal_data_state(self, client, fake_tide_client, denver):
        fake_tide_client.respond(denver, NoTidalDataError())

        data = client.post("/tides/location", json=as_body(denver)).json()

        assert data["status"] == "failed"
        assert data["error"]["kind"] == "no_tidal_data"
        assert data["error"]["retryable"] is False
        assert data["suggestions"] == ["Malibu, CA"]

    def test_retry_without_location_conflicts(self, client):
        assert client.post("/tides/retry").status_code == 409

    def test_retry_after_selection(self, client, fake_tide_client, santa_cruz, sample_events):
        fake_tide_client.respond(santa_cruz, sample_events)
        client.post("/tides/location", json=as_body(santa_cruz))

        response = client.post("/tides/retry")
        assert response.status_code == 200
        assert len(fake_tide_client.calls) == 2

    def test_summary_requires_loaded_state(self, client):
        assert client.get("/tides/summary").status_code == 409

    def test_summary_after_load(self, client, fake_tide_client, santa_cruz, sample_events):
        fake_tide_client.respond(santa_cruz, sample_events)
        client.post("/tides/location", json=as_body(santa_cruz))

        response = client.get("/tides/summary")
        assert response.status_code == 200
        assert "upcoming" in response.json()


class TestLocationRoutes:
    """Tests for /locations."""

    def test_search(self, client, santa_cruz):
        data = client.get("/locations/search", params={"q": "santa"}).json()
        assert [loc["id"] for loc in data] == [santa_cruz.id]

    def test_search_error_is_bad_gateway(self, client):
        app.state.geocoding_client = FakeGeocoder(error=SearchError("network down"))
        response = client.get("/locations/search", params={"q": "boston"})
        assert response.status_code == 502

    def test_selection_is_recorded_as_recent(self, client, fake_tide_client, santa_cruz, boston):
        fake_tide_client.respond(santa_cruz, [])
        fake_tide_client.respond(boston, [])
        client.post("/tides/location", json=as_body(santa_cruz))
        client.post("/tides/location", json=as_body(boston))

        data = client.get("/locations/recent").json()
        assert [loc["id"] for loc in data] == [boston.id, santa_cruz.id]

    def test_toggle_favorite(self, client, boston):
        first = client.post("/locations/favorites", json=as_body(boston)).json()
        assert first["is_favorite"] is True
        assert [loc["id"] for loc in client.get("/locations/favorites").json()] == [boston.id]

        second = client.post("/locations/favorites", json=as_body(boston)).json()
        assert second["is_favorite"] is False
        assert client.get("/locations/favorites").json() == []

    def test_suggested(self, client):
        data = client.get("/locations/suggested").json()
        assert "Honolulu, HI" in data
