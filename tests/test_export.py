"""Tests for JSON-ready dict conversion."""

import json
from datetime import datetime, timezone

from sysobs.core.ambient import AmbientPayloadBuilder
from sysobs.core.events import EventLog
from sysobs.core.export import (
    event_to_dict,
    forecast_to_dict,
    ingest_result_to_dict,
    payload_to_dict,
    trend_to_dict,
    weather_to_dict,
)
from sysobs.core.weather import WeatherEvaluator
from sysobs.models.bundles import IngestResult
from sysobs.models.enums import EventType, ForecastType, SeriesDirection
from sysobs.models.metrics import Forecast, TrendAnalysis

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestWeatherToDict:
    def test_shape(self):
        report = WeatherEvaluator().generate_from({"disk_percent": 95})
        data = weather_to_dict(report)
        assert data["version"] == "1.0.0"
        assert data["state"] == "act"
        assert data["categories"]["disk"]["state"] == "act"
        assert data["categories"]["disk"]["threshold_critical"] == 90
        assert data["notifications"]["notification_type"] == "toast"
        assert data["notifications"]["snooze_options"][0] == {
            "label": "30 minutes",
            "duration_seconds": 1800,
        }
        assert data["actions"][0]["action_id"] == "fix_disk"
        assert data["actions"][0]["handler"] == "open_a_and_e"
        assert data["actions"][0]["parameters"] == {"category": "disk"}
        assert data["trends"]["overall"] == {"direction": "stable"}
        assert data["source"]["tool"] == "sysobs"
        assert data["source"]["last_scan"] is None

    def test_json_serializable(self):
        report = WeatherEvaluator().generate_from({"memory_percent": 80})
        json.dumps(weather_to_dict(report))


class TestPayloadToDict:
    def test_shape(self):
        payload = AmbientPayloadBuilder(WeatherEvaluator()).generate_from({"disk_percent": 85})
        data = payload_to_dict(payload)
        assert data["theme_id"] == "default"
        assert data["indicator"]["icon"] == "cloud"
        assert data["indicator"]["state"] == "watch"
        assert data["badge"] == {"visible": True, "count": 1, "color": "#FF9800"}
        assert data["popover"]["metrics"][0]["label"] == "disk"
        assert data["quick_actions"][0]["id"] == "investigate_disk"
        assert data["schedule"]["refresh_interval_seconds"] == 30
        json.dumps(data)


class TestSmallConverters:
    def test_forecast(self):
        f = Forecast(
            metric_name="m",
            forecast_type=ForecastType.THRESHOLD,
            current_value=70,
            predicted_value=90,
            prediction_at=NOW,
            confidence=0.3,
            message="m may breach 90",
            data_points=3,
            generated_at=NOW,
        )
        data = forecast_to_dict(f)
        assert data["forecast_type"] == "threshold"
        assert data["prediction_at"] == "2026-01-01T00:00:00+00:00"

    def test_trend(self):
        t = TrendAnalysis("m", SeriesDirection.INCREASING, 2.5, 10.0, 4, NOW)
        assert trend_to_dict(t)["direction"] == "increasing"

    def test_ingest_result(self):
        assert ingest_result_to_dict(IngestResult(1, 2, "b")) == {
            "metrics_recorded": 1,
            "events_recorded": 2,
            "bundle_id": "b",
        }

    def test_event(self):
        events = EventLog()
        events(EventType.ANOMALY, "src", {"title": "t"})
        data = event_to_dict(events.recent()[0])
        assert data["event_type"] == "anomaly"
        assert data["data"] == {"title": "t"}
