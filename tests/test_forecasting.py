"""Tests for trend analysis and forecasting."""

from datetime import datetime, timedelta, timezone

import pytest

from sysobs.config import ForecastConfig
from sysobs.core.forecasting import ForecastingEngine, confidence_score
from sysobs.core.store import MetricsStore
from sysobs.models.enums import ForecastType, SeriesDirection
from sysobs.models.metrics import Sample
from sysobs.models.results import Err, ErrorKind, Ok

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return MetricsStore(clock=lambda: T0)


@pytest.fixture
def engine(store):
    return ForecastingEngine(store)


def hourly(store, name, values):
    """Record values one hour apart, ending at the store's current time."""
    start = store.now() - timedelta(hours=len(values) - 1)
    for i, v in enumerate(values):
        store.record_at(name, v, start + timedelta(hours=i))


class TestAnalyzeTrend:
    def test_insufficient_data(self, store, engine):
        hourly(store, "m", [50])
        result = engine.analyze_trend("m")
        assert isinstance(result, Err)
        assert result.error is ErrorKind.INSUFFICIENT_DATA
        assert result.ok is False

    def test_two_points_insufficient(self, store, engine):
        hourly(store, "m", [50, 60])
        assert engine.analyze_trend("m").error is ErrorKind.INSUFFICIENT_DATA

    def test_unknown_metric(self, engine):
        assert engine.analyze_trend("ghost").error is ErrorKind.INSUFFICIENT_DATA

    def test_increasing(self, store, engine):
        hourly(store, "m", [50, 60, 70])
        result = engine.analyze_trend("m")
        assert isinstance(result, Ok)
        trend = result.value
        assert trend.direction is SeriesDirection.INCREASING
        assert trend.rate_per_hour == pytest.approx(10.0)
        assert trend.current_value == 70
        assert trend.data_points == 3
        assert trend.last_timestamp == T0

    def test_decreasing(self, store, engine):
        hourly(store, "m", [50, 45, 40])
        trend = engine.analyze_trend("m").value
        assert trend.direction is SeriesDirection.DECREASING
        assert trend.rate_per_hour == pytest.approx(-5.0)

    def test_stable(self, store, engine):
        hourly(store, "m", [50, 80, 50])
        assert engine.analyze_trend("m").value.direction is SeriesDirection.STABLE

    def test_zero_elapsed_is_stable(self, store, engine):
        for v in (1, 2, 3):
            store.record_at("m", v, T0)
        trend = engine.analyze_trend("m").value
        assert trend.rate_per_hour == 0.0
        assert trend.direction is SeriesDirection.STABLE

    def test_looks_past_freshness_window(self, store, engine):
        start = T0 - timedelta(days=2)
        for i, v in enumerate([10, 20, 30]):
            store.record_at("m", v, start + timedelta(hours=i))
        assert store.all_fresh() == []
        assert isinstance(engine.analyze_trend("m"), Ok)


class TestPredictExhaustion:
    def test_success(self, store, engine):
        hourly(store, "disk_usage_percent", [50, 60, 70])
        result = engine.predict_exhaustion("disk_usage_percent", 100)
        assert isinstance(result, Ok)
        f = result.value
        assert f.forecast_type is ForecastType.EXHAUSTION
        assert f.current_value == 70
        assert f.predicted_value == 100
        assert f.prediction_at == T0 + timedelta(hours=3)
        assert 0.0 <= f.confidence <= 1.0
        assert "disk_usage_percent" in f.message
        assert "reach 100% in 3.0 hours" in f.message
        assert f.data_points == 3
        assert f.generated_at == T0

    def test_message_unit_only_for_percent_metrics(self, store, engine):
        hourly(store, "envelope_artifacts", [1, 2, 3])
        f = engine.predict_exhaustion("envelope_artifacts", 10).value
        assert "reach 10 in" in f.message
        assert "%" not in f.message

    def test_not_trending(self, store, engine):
        hourly(store, "m", [50, 45, 40])
        assert engine.predict_exhaustion("m", 100).error is ErrorKind.NOT_TRENDING

    def test_insufficient_data(self, store, engine):
        hourly(store, "m", [50])
        assert engine.predict_exhaustion("m", 100).error is ErrorKind.INSUFFICIENT_DATA

    def test_target_already_reached(self, store, engine):
        hourly(store, "m", [80, 90, 100])
        f = engine.predict_exhaustion("m", 100).value
        assert f.prediction_at == T0

    def test_tiny_rate_is_clamped(self, store, engine):
        hourly(store, "m", [1.0, 1.0, 1.0 + 1e-12])
        f = engine.predict_exhaustion("m", 1e9).value
        assert f.prediction_at > T0


class TestPredictThresholdBreach:
    def test_already_breached(self, store, engine):
        hourly(store, "m", [90, 92, 95])
        assert engine.predict_threshold_breach("m", 85).error is ErrorKind.ALREADY_BREACHED

    def test_exactly_at_threshold(self, store, engine):
        hourly(store, "m", [70, 80, 85])
        assert engine.predict_threshold_breach("m", 85).error is ErrorKind.ALREADY_BREACHED

    def test_success(self, store, engine):
        hourly(store, "m", [50, 60, 70])
        f = engine.predict_threshold_breach("m", 90).value
        assert f.forecast_type is ForecastType.THRESHOLD
        assert f.predicted_value == 90
        assert f.prediction_at == T0 + timedelta(hours=2)
        assert "breach" in f.message

    def test_not_trending(self, store, engine):
        hourly(store, "m", [50, 45, 40])
        assert engine.predict_threshold_breach("m", 90).error is ErrorKind.NOT_TRENDING


class TestGenerate:
    def test_empty_store(self, engine):
        assert engine.generate() == []

    def test_skips_metrics_without_enough_data(self, store, engine):
        hourly(store, "m", [10, 20])
        assert engine.generate() == []

    def test_sorted_by_confidence(self, store, engine):
        hourly(store, "noisy", [10, 40, 15, 45, 50])
        hourly(store, "steady", [10, 20, 30, 40, 50, 60, 70, 80])
        hourly(store, "short", [10, 20, 30])
        forecasts = engine.generate()
        assert forecasts
        confidences = [f.confidence for f in forecasts]
        assert confidences == sorted(confidences, reverse=True)
        assert all(0.0 <= c <= 1.0 for c in confidences)
        assert forecasts[0].metric_name == "steady"

    def test_derives_both_forecast_types(self, store, engine):
        hourly(store, "m", [50, 60, 70])
        types = {f.forecast_type for f in engine.generate()}
        assert types == {ForecastType.EXHAUSTION, ForecastType.THRESHOLD}

    def test_breached_metric_only_gets_exhaustion(self, store, engine):
        hourly(store, "m", [90, 92, 95])
        forecasts = engine.generate()
        assert [f.forecast_type for f in forecasts] == [ForecastType.EXHAUSTION]

    def test_metric_past_target_gets_no_exhaustion(self, store, engine):
        hourly(store, "memory_used", [8000, 8100, 8192])
        assert engine.generate() == []

    def test_metric_at_target_gets_no_exhaustion(self, store, engine):
        hourly(store, "m", [80, 90, 100])
        assert engine.generate() == []

    def test_configured_targets(self, store):
        hourly(store, "m", [50, 60, 70])
        engine = ForecastingEngine(store, ForecastConfig(exhaustion_target=200, breach_threshold=300))
        forecasts = engine.generate()
        assert [f.predicted_value for f in forecasts] == [200]


class TestConfidence:
    def _series(self, values):
        return [
            Sample(name="m", value=v, timestamp=T0 + timedelta(hours=i))
            for i, v in enumerate(values)
        ]

    def test_deterministic(self):
        series = self._series([10, 25, 22, 40])
        assert confidence_score(series) == confidence_score(series)

    def test_grows_with_sample_count(self):
        assert confidence_score(self._series([10, 20, 30])) < confidence_score(
            self._series([10, 20, 30, 40, 50, 60])
        )

    def test_grows_with_consistency(self):
        assert confidence_score(self._series([10, 40, 15, 50])) < confidence_score(
            self._series([10, 20, 30, 40])
        )

    def test_perfect_line_saturates(self):
        assert confidence_score(self._series(range(0, 120, 10))) == 1.0

    def test_bounds(self):
        assert confidence_score(self._series([5])) == 0.0
        assert 0.0 <= confidence_score(self._series([3, 1, 4, 1, 5, 9, 2, 6])) <= 1.0
