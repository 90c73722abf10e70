"""Tests for markdown formatters."""

from datetime import datetime, timezone

from sysobs.core.ambient import AmbientPayloadBuilder
from sysobs.core.events import EventLog
from sysobs.core.themes import ThemeRegistry
from sysobs.core.weather import WeatherEvaluator
from sysobs.mcp.formatters import (
    format_error,
    format_events,
    format_forecasts,
    format_ingest_result,
    format_payload,
    format_themes,
    format_trend,
    format_weather,
)
from sysobs.models.bundles import IngestResult
from sysobs.models.enums import EventType, ForecastType, SeriesDirection
from sysobs.models.metrics import Forecast, TrendAnalysis
from sysobs.models.results import Err, ErrorKind


def _now():
    return datetime.now(timezone.utc)


class TestFormatWeather:
    def test_act(self):
        report = WeatherEvaluator().generate_from({"disk_percent": 95})
        out = format_weather(report)
        assert "ACT" in out
        assert "| disk | act | 95% |" in out
        assert "`fix_disk`" in out
        assert "Trends:" in out

    def test_calm_has_no_actions(self):
        out = format_weather(WeatherEvaluator().generate_from({}))
        assert "Suggested Actions" not in out
        assert "All systems nominal" in out


class TestFormatPayload:
    def test_minimal_hides_metrics(self):
        payload = AmbientPayloadBuilder(WeatherEvaluator()).generate_from({}, "minimal")
        out = format_payload(payload)
        assert "## Ambient (minimal)" in out
        assert "hidden" in out
        assert "- disk:" not in out

    def test_default_lists_metrics(self):
        payload = AmbientPayloadBuilder(WeatherEvaluator()).generate_from({"cpu_percent": 85})
        out = format_payload(payload)
        assert "- cpu: 85% (watch)" in out
        assert "`investigate_cpu`" in out


class TestFormatForecasts:
    def test_empty(self):
        assert "No forecasts" in format_forecasts([])

    def test_rows(self):
        f = Forecast(
            metric_name="disk_usage_percent",
            forecast_type=ForecastType.EXHAUSTION,
            current_value=70,
            predicted_value=100,
            prediction_at=_now(),
            confidence=0.3,
            message="disk_usage_percent is projected to reach 100%",
            data_points=3,
        )
        out = format_forecasts([f])
        assert "disk_usage_percent" in out
        assert "0.30" in out


class TestSmallFormatters:
    def test_error(self):
        out = format_error(Err(ErrorKind.INSUFFICIENT_DATA, "disk"))
        assert "insufficient_data" in out
        assert "(disk)" in out

    def test_trend(self):
        t = TrendAnalysis("m", SeriesDirection.DECREASING, -2.0, 10.0, 5, _now())
        out = format_trend(t)
        assert "decreasing" in out
        assert "-2.00/hour" in out

    def test_ingest_result(self):
        out = format_ingest_result(IngestResult(3, 1, "bundle-x"))
        assert "bundle-x" in out
        assert "3 metrics" in out

    def test_themes(self):
        out = format_themes(ThemeRegistry().all())
        assert "| default | Default | sun | cloud | storm | 4 |" in out
        assert "| minimal | Minimal | ok | warn | crit | — |" in out

    def test_events(self):
        events = EventLog()
        events(EventType.ANOMALY, "theatre", {"title": "Disk nearly full"})
        out = format_events(events.recent())
        assert "[anomaly]" in out
        assert "Disk nearly full" in out

    def test_no_events(self):
        assert "No events recorded" in format_events([])
