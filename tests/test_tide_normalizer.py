"""
Unit tests for merging WorldTides extremes and heights into one series
"""
from datetime import datetime, timezone

from features.tides.models.tide_types import TideType, WorldTidesExtreme, WorldTidesHeight
from features.tides.services.tide_normalizer import normalize


def extreme(dt, height, label):
    return WorldTidesExtreme(dt=dt, height=height, type=label)


def height(dt, value):
    return WorldTidesHeight(dt=dt, height=value)


class TestNormalize:
    """Tests for normalize()."""

    def test_output_is_sorted_by_time(self):
        """Events should come out in ascending time order whatever the input order."""
        events = normalize(
            [extreme(3000, 1.9, "High"), extreme(1000, 0.2, "Low"), extreme(5000, 0.4, "Low")],
            [height(2000, 1.1), height(2100, 1.2)],
        )
        times = [e.time for e in events]
        assert times == sorted(times)
        assert len(events) == 4

    def test_labels_map_to_types(self):
        """'High' maps to high; any other label maps to low."""
        events = normalize(
            [extreme(1000, 1.5, "High"), extreme(2000, 0.1, "Low"), extreme(3000, 0.2, "low-ish")],
            [],
        )
        assert [e.type for e in events] == [TideType.HIGH, TideType.LOW, TideType.LOW]

    def test_only_first_height_is_current(self):
        """Only the first instantaneous sample becomes the current event."""
        events = normalize(
            [extreme(1000, 1.5, "High")],
            [height(1200, 1.3), height(1500, 1.1), height(1800, 0.9)],
        )
        current = [e for e in events if e.type == TideType.CURRENT]
        assert len(current) == 1
        assert current[0].height == 1.3
        assert current[0].time == datetime.fromtimestamp(1200, tz=timezone.utc)

    def test_no_heights_means_no_current(self):
        """An empty heights list is not an error, just no current event."""
        events = normalize([extreme(1000, 1.5, "High"), extreme(7000, 0.3, "Low")], [])
        assert len(events) == 2
        assert all(e.type != TideType.CURRENT for e in events)

    def test_both_empty_gives_empty_series(self):
        """No extremes and no heights gives an empty series."""
        assert normalize([], []) == []

    def test_tie_keeps_extreme_before_current(self):
        """On equal timestamps the extreme stays ahead of the current sample."""
        events = normalize([extreme(1000, 1.5, "High")], [height(1000, 1.5)])
        assert [e.type for e in events] == [TideType.HIGH, TideType.CURRENT]

    def test_times_are_utc(self):
        """Epoch seconds should decode to timezone-aware UTC datetimes."""
        events = normalize([extreme(0, 0.0, "Low")], [])
        assert events[0].time == datetime(1970, 1, 1, tzinfo=timezone.utc)
