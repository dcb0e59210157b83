"""Settings validation and Prometheus path normalization."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.middleware.prometheus_middleware import normalize_path
from app.monitoring.prometheus_metrics import prometheus_metrics


@pytest.mark.unit
class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None, database_url="sqlite://")
        assert settings.studio_open_hour == 9
        assert settings.studio_close_hour == 22
        assert settings.slot_step_minutes == 30
        assert settings.is_sqlite

    def test_open_must_precede_close(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, studio_open_hour=22, studio_close_hour=9)

    def test_step_must_divide_opening_hours(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, slot_step_minutes=45)

    def test_production_requires_identity_secret(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="production")

    def test_allowed_origins_are_split(self) -> None:
        settings = Settings(_env_file=None, allowed_origins="https://a.example, https://b.example")
        assert settings.allowed_origins == ["https://a.example", "https://b.example"]

    def test_blank_audience_disables_check(self) -> None:
        settings = Settings(_env_file=None, identity_jwt_audience="  ")
        assert settings.identity_jwt_audience is None


@pytest.mark.unit
class TestMetrics:
    def test_ulid_segments_are_collapsed(self) -> None:
        path = "/api/v1/bookings/01J0ZQ8M3W7T9V2K4N6P8R0S1X/payment"
        assert normalize_path(path) == "/api/v1/bookings/:id/payment"
        assert normalize_path("/api/v1/rooms") == "/api/v1/rooms"

    def test_conflict_counter_is_exported(self) -> None:
        prometheus_metrics.inc_booking_conflict("room", "engine")
        output = prometheus_metrics.get_metrics().decode()
        assert "booking_conflicts_total" in output
