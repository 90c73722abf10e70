"""Trend analysis and linear-extrapolation forecasts over metric series.

Confidence for a series of ``n`` points is ``min(1, n / FULL_CONFIDENCE_POINTS) * r²``
where ``r²`` is the coefficient of determination of a least-squares line of
value against elapsed time (taken as 1.0 when the values do not vary). The
score is deterministic for a given series, grows with the number of points and
with how well a straight line explains them, and always lies in [0, 1].
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta

from sysobs.config import ForecastConfig
from sysobs.core.store import MetricsStore
from sysobs.models.enums import ForecastType, SeriesDirection
from sysobs.models.metrics import Forecast, Sample, TrendAnalysis
from sysobs.models.results import Err, ErrorKind, Ok, Result

logger = logging.getLogger("sysobs.forecasting")

# Minimum samples before any trend or forecast is attempted
MIN_DATA_POINTS = 3

# Sample count at which the size component of confidence saturates
FULL_CONFIDENCE_POINTS = 10

# Projections further out than this are reported at the horizon
MAX_HORIZON_HOURS = 24 * 365 * 100.0


def _fit_r_squared(samples: list[Sample]) -> float:
    """Coefficient of determination of value ~ time over the series."""
    origin = samples[0].timestamp
    xs = [(s.timestamp - origin).total_seconds() / 3600.0 for s in samples]
    ys = [s.value for s in samples]
    n = len(samples)

    mean_x = sum(xs) / n
    mean_y = sum(ys) / n
    sxx = sum((x - mean_x) ** 2 for x in xs)
    syy = sum((y - mean_y) ** 2 for y in ys)
    sxy = sum((x - mean_x) * (y - mean_y) for x, y in zip(xs, ys))

    if syy == 0.0:
        return 1.0
    if sxx == 0.0:
        return 0.0
    r_squared = (sxy * sxy) / (sxx * syy)
    return max(0.0, min(1.0, r_squared))


def confidence_score(samples: list[Sample]) -> float:
    if len(samples) < 2:
        return 0.0
    size_factor = min(1.0, len(samples) / FULL_CONFIDENCE_POINTS)
    return round(size_factor * _fit_r_squared(samples), 4)


def _fmt(value: float) -> str:
    return f"{value:g}"


def _unit_for(metric_name: str) -> str:
    return "%" if metric_name.endswith("_percent") else ""


def _fmt_hours(hours: float) -> str:
    if hours < 1:
        return f"{max(0, round(hours * 60))} minutes"
    if hours < 48:
        return f"{hours:.1f} hours"
    return f"{hours / 24:.1f} days"


class ForecastingEngine:
    """Reads per-metric series from a store and projects them forward."""

    def __init__(
        self,
        store: MetricsStore,
        config: ForecastConfig | None = None,
    ) -> None:
        self._store = store
        self._config = config or ForecastConfig()

    def analyze_trend(self, metric_name: str) -> Result[TrendAnalysis]:
        """Rate of change from first to last sample, in units per hour."""
        samples = self._store.series(metric_name)
        if len(samples) < MIN_DATA_POINTS:
            return Err(ErrorKind.INSUFFICIENT_DATA, metric_name)

        first, last = samples[0], samples[-1]
        elapsed_hours = (last.timestamp - first.timestamp).total_seconds() / 3600.0
        rate = (last.value - first.value) / elapsed_hours if elapsed_hours > 0 else 0.0

        if rate > 0:
            direction = SeriesDirection.INCREASING
        elif rate < 0:
            direction = SeriesDirection.DECREASING
        else:
            direction = SeriesDirection.STABLE

        return Ok(
            TrendAnalysis(
                metric_name=metric_name,
                direction=direction,
                rate_per_hour=rate,
                current_value=last.value,
                data_points=len(samples),
                last_timestamp=last.timestamp,
                confidence=confidence_score(samples),
            )
        )

    def predict_exhaustion(
        self, metric_name: str, target_value: float
    ) -> Result[Forecast]:
        """When an increasing metric will reach ``target_value`` (its budget)."""
        result = self.analyze_trend(metric_name)
        if isinstance(result, Err):
            return result
        trend = result.value
        if trend.direction is not SeriesDirection.INCREASING:
            return Err(ErrorKind.NOT_TRENDING, metric_name)
        return Ok(self._exhaustion(trend, target_value))

    def predict_threshold_breach(
        self, metric_name: str, threshold: float
    ) -> Result[Forecast]:
        """When a metric still below ``threshold`` will cross it."""
        result = self.analyze_trend(metric_name)
        if isinstance(result, Err):
            return result
        trend = result.value
        if trend.current_value >= threshold:
            return Err(ErrorKind.ALREADY_BREACHED, metric_name)
        if trend.direction is not SeriesDirection.INCREASING:
            return Err(ErrorKind.NOT_TRENDING, metric_name)

        hours = self._hours_until(trend, threshold)
        return Ok(
            self._forecast(
                trend,
                ForecastType.THRESHOLD,
                threshold,
                hours,
                f"{metric_name} may breach {_fmt(threshold)} "
                f"in {_fmt_hours(hours)} (currently {_fmt(trend.current_value)})",
            )
        )

    def generate(self) -> list[Forecast]:
        """Every forecast derivable from metrics with enough data, most confident first.

        Metrics already at or past the exhaustion target get no exhaustion
        forecast, since there is nothing left to project.
        """
        forecasts: list[Forecast] = []
        target = self._config.exhaustion_target
        for name in self._store.metric_names():
            result = self.analyze_trend(name)
            if isinstance(result, Err):
                continue
            trend = result.value
            if trend.direction is SeriesDirection.INCREASING and trend.current_value < target:
                forecasts.append(self._exhaustion(trend, target))

            if self._config.breach_threshold < target:
                breach = self.predict_threshold_breach(name, self._config.breach_threshold)
                if isinstance(breach, Ok):
                    forecasts.append(breach.value)

        forecasts.sort(key=lambda f: f.confidence, reverse=True)
        logger.debug("Generated %d forecasts", len(forecasts))
        return forecasts

    @staticmethod
    def _hours_until(trend: TrendAnalysis, target: float) -> float:
        hours = (target - trend.current_value) / trend.rate_per_hour
        if not math.isfinite(hours):
            return MAX_HORIZON_HOURS
        return min(MAX_HORIZON_HOURS, max(0.0, hours))

    def _exhaustion(self, trend: TrendAnalysis, target_value: float) -> Forecast:
        hours = self._hours_until(trend, target_value)
        return self._forecast(
            trend,
            ForecastType.EXHAUSTION,
            target_value,
            hours,
            f"{trend.metric_name} is projected to reach "
            f"{_fmt(target_value)}{_unit_for(trend.metric_name)} "
            f"in {_fmt_hours(hours)} at {_fmt(trend.rate_per_hour)}/hour",
        )

    def _forecast(
        self,
        trend: TrendAnalysis,
        forecast_type: ForecastType,
        predicted_value: float,
        hours: float,
        message: str,
    ) -> Forecast:
        return Forecast(
            metric_name=trend.metric_name,
            forecast_type=forecast_type,
            current_value=trend.current_value,
            predicted_value=predicted_value,
            prediction_at=trend.last_timestamp + timedelta(hours=hours),
            confidence=trend.confidence,
            message=message,
            data_points=trend.data_points,
            generated_at=self._store.now(),
        )
