"""Tests for demand window and supply availability filtering."""

from datetime import UTC, datetime, timedelta

from demandmap.heatmap import DemandEvent, SupplyRecord, filter_demand, filter_supply

SNAPSHOT = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


def _event(offset: timedelta) -> DemandEvent:
    return DemandEvent(timestamp=SNAPSHOT + offset, latitude=40.71, longitude=-74.01)


def _vehicle(start: timedelta, end: timedelta) -> SupplyRecord:
    return SupplyRecord(
        start_time=SNAPSHOT + start,
        end_time=SNAPSHOT + end,
        latitude=40.71,
        longitude=-74.01,
    )


class TestFilterDemand:
    """Tests for the demand lookback window."""

    def test_empty_input(self):
        """No events in, no events out."""
        assert filter_demand([], SNAPSHOT, 60) == []

    def test_event_at_snapshot_included(self):
        """An event exactly at the snapshot is inside the window."""
        event = _event(timedelta(0))
        assert filter_demand([event], SNAPSHOT, 60) == [event]

    def test_event_at_window_start_included(self):
        """The window start is inclusive."""
        event = _event(-timedelta(minutes=60))
        assert filter_demand([event], SNAPSHOT, 60) == [event]

    def test_event_just_before_window_excluded(self):
        """One second before the window start is outside."""
        event = _event(-timedelta(minutes=60, seconds=1))
        assert filter_demand([event], SNAPSHOT, 60) == []

    def test_event_after_snapshot_excluded(self):
        """Future events are not counted."""
        event = _event(timedelta(seconds=1))
        assert filter_demand([event], SNAPSHOT, 60) == []

    def test_zero_window_keeps_only_exact_matches(self):
        """A zero-minute window keeps only events at the snapshot instant."""
        exact = _event(timedelta(0))
        earlier = _event(-timedelta(seconds=1))
        assert filter_demand([exact, earlier], SNAPSHOT, 0) == [exact]

    def test_snapshot_outside_data_range(self):
        """A snapshot far from the data yields nothing rather than an error."""
        events = [_event(timedelta(minutes=-5)), _event(timedelta(minutes=-10))]
        assert filter_demand(events, SNAPSHOT + timedelta(days=30), 60) == []


class TestFilterSupply:
    """Tests for supply availability at the snapshot."""

    def test_empty_input(self):
        """No records in, no records out."""
        assert filter_supply([], SNAPSHOT) == []

    def test_start_equal_snapshot_included(self):
        """A vehicle starting exactly at the snapshot is available."""
        record = _vehicle(timedelta(0), timedelta(hours=1))
        assert filter_supply([record], SNAPSHOT) == [record]

    def test_end_equal_snapshot_included(self):
        """A vehicle ending exactly at the snapshot is available."""
        record = _vehicle(-timedelta(hours=1), timedelta(0))
        assert filter_supply([record], SNAPSHOT) == [record]

    def test_interval_not_containing_snapshot_excluded(self):
        """Vehicles entirely before or after the snapshot are not available."""
        before = _vehicle(-timedelta(hours=2), -timedelta(seconds=1))
        after = _vehicle(timedelta(seconds=1), timedelta(hours=2))
        assert filter_supply([before, after], SNAPSHOT) == []

    def test_no_lookback_window_for_supply(self):
        """Supply ignores the demand window: only the snapshot instant matters."""
        ended_recently = _vehicle(-timedelta(hours=1), -timedelta(minutes=1))
        assert filter_supply([ended_recently], SNAPSHOT) == []
