"""Tests for Pydantic schemas."""

import math
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from demandmap.heatmap import (
    AggregatedCell,
    CoverageCell,
    DemandEvent,
    DisplayMode,
    HeatmapResult,
)
from demandmap.schemas.auth import LoginRequest, RegisterRequest
from demandmap.schemas.events import EventIn
from demandmap.schemas.heatmap import (
    ActiveCellResponse,
    DemandEventIn,
    HeatmapRequest,
    HeatmapResponse,
    SupplyRecordIn,
)


class TestAuthSchemas:
    """Tests for authentication schemas."""

    def test_login_request_valid(self):
        """LoginRequest should accept valid data."""
        request = LoginRequest(username="testuser", password="password123")
        assert request.username == "testuser"
        assert request.password == "password123"

    def test_login_request_missing_username(self):
        """LoginRequest should reject missing username."""
        with pytest.raises(ValidationError):
            LoginRequest(password="password123")

    def test_login_request_missing_password(self):
        """LoginRequest should reject missing password."""
        with pytest.raises(ValidationError):
            LoginRequest(username="testuser")

    def test_register_request_valid(self):
        """RegisterRequest should accept valid data."""
        request = RegisterRequest(
            username="testuser",
            password="password123",
        )
        assert request.username == "testuser"
        assert request.password == "password123"
        assert request.email is None
        assert request.display_name is None

    def test_register_request_with_optional_fields(self):
        """RegisterRequest should accept optional email and display_name."""
        request = RegisterRequest(
            username="testuser",
            password="password123",
            email="test@example.com",
            display_name="Test User",
        )
        assert request.email == "test@example.com"
        assert request.display_name == "Test User"

    def test_register_request_missing_password(self):
        """RegisterRequest should reject missing password."""
        with pytest.raises(ValidationError):
            RegisterRequest(username="testuser")

    def test_register_request_short_username(self):
        """RegisterRequest should reject username less than 3 chars."""
        with pytest.raises(ValidationError):
            RegisterRequest(username="ab", password="password123")

    def test_register_request_short_password(self):
        """RegisterRequest should reject password less than 8 chars."""
        with pytest.raises(ValidationError):
            RegisterRequest(username="testuser", password="short")


class TestEventSchemas:
    """Tests for stored-event schemas."""

    def test_event_in_valid(self):
        """EventIn should keep coordinates as stripped strings and convert to UTC."""
        event = EventIn(
            timestamp="2024-01-01T07:00:00-05:00", latitude=" 40.7100 ", longitude="-74.01"
        )
        assert event.latitude == "40.7100"
        assert event.timestamp == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_event_in_naive_timestamp_is_utc(self):
        """EventIn should treat naive timestamps as UTC."""
        event = EventIn(timestamp="2024-01-01T12:00:00", latitude="0", longitude="0")
        assert event.timestamp.tzinfo is not None
        assert event.timestamp.hour == 12

    @pytest.mark.parametrize(
        "latitude, longitude",
        [("90.1", "0"), ("0", "-180.5"), ("north", "0"), ("inf", "0"), ("", "0")],
    )
    def test_event_in_invalid_coordinates(self, latitude, longitude):
        """EventIn should reject out-of-range or non-numeric coordinates."""
        with pytest.raises(ValidationError):
            EventIn(timestamp="2024-01-01T12:00:00Z", latitude=latitude, longitude=longitude)

    def test_event_in_boundary_coordinates(self):
        """EventIn should accept the exact range bounds."""
        event = EventIn(timestamp="2024-01-01T12:00:00Z", latitude="-90", longitude="180")
        assert (event.latitude, event.longitude) == ("-90", "180")


class TestHeatmapSchemas:
    """Tests for heatmap request and response schemas."""

    def test_request_defaults(self):
        """HeatmapRequest should default window, resolution and datasets."""
        request = HeatmapRequest(snapshot_time="2024-01-01T12:00:00Z")
        assert request.window_minutes == 60
        assert request.resolution == 8
        assert request.demand == []
        assert request.supply == []

    @pytest.mark.parametrize("resolution", [4, 13])
    def test_request_resolution_band(self, resolution):
        """HeatmapRequest should reject resolutions outside the band."""
        with pytest.raises(ValidationError, match="resolution must be between"):
            HeatmapRequest(snapshot_time="2024-01-01T12:00:00Z", resolution=resolution)

    def test_request_negative_window(self):
        """HeatmapRequest should reject negative windows."""
        with pytest.raises(ValidationError):
            HeatmapRequest(snapshot_time="2024-01-01T12:00:00Z", window_minutes=-5)

    def test_demand_in_to_event(self):
        """DemandEventIn should convert to a UTC DemandEvent."""
        event = DemandEventIn(
            timestamp="2024-01-01T12:00:00", latitude=40.71, longitude=-74.01
        ).to_event()
        assert event == DemandEvent(
            timestamp=datetime(2024, 1, 1, 12, 0, tzinfo=UTC), latitude=40.71, longitude=-74.01
        )

    def test_supply_in_to_record(self):
        """SupplyRecordIn should convert to a UTC SupplyRecord."""
        record = SupplyRecordIn(
            start_time="2024-01-01T10:00:00Z",
            end_time="2024-01-01T14:00:00+02:00",
            latitude=40.71,
            longitude=-74.01,
        ).to_record()
        assert record.end_time == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_active_cell_finite(self):
        """ActiveCellResponse should pass finite ratios through."""
        cell = AggregatedCell(
            cell_id="abc", demand_count=3, supply_count=2, ratio=1.5, center=(-74.0, 40.7)
        )
        response = ActiveCellResponse.from_cell(cell)
        assert response.ratio == 1.5
        assert response.infinite is False
        assert response.label == "1.5"

    def test_active_cell_infinite(self):
        """ActiveCellResponse should send infinity as a null ratio with a flag."""
        cell = AggregatedCell(
            cell_id="abc", demand_count=3, supply_count=0, ratio=math.inf, center=(-74.0, 40.7)
        )
        response = ActiveCellResponse.from_cell(cell)
        assert response.ratio is None
        assert response.infinite is True
        assert response.label == "∞"
        assert '"ratio":null' in response.model_dump_json()

    def test_response_from_result(self):
        """HeatmapResponse should carry the mode, totals and cells."""
        result = HeatmapResult(
            mode=DisplayMode.COUNT,
            active_cells=[
                AggregatedCell(
                    cell_id="a", demand_count=4, supply_count=0, ratio=4.0, center=(1.0, 2.0)
                )
            ],
            inactive_cells=[CoverageCell(cell_id="b", center=(1.5, 2.5))],
            demand_total=4,
            supply_total=0,
            center=(2.0, 1.0),
        )
        response = HeatmapResponse.from_result(result)
        assert response.mode == DisplayMode.COUNT
        assert response.demand_count == 4
        assert response.inactive_cells[0].cell_id == "b"
        assert response.center == (2.0, 1.0)
        assert response.model_dump(mode="json")["mode"] == "count"
