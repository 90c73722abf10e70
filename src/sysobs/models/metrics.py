"""Frozen dataclass models for metric samples, trends and forecasts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from sysobs.models.enums import ForecastType, SeriesDirection


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Sample:
    """A single numeric observation of a named metric."""

    name: str
    value: float
    timestamp: datetime = field(default_factory=_now)
    tags: dict[str, str] = field(default_factory=dict)
    source: str | None = None


@dataclass(frozen=True, slots=True)
class TrendAnalysis:
    """First-to-last rate of change over a metric series."""

    metric_name: str
    direction: SeriesDirection
    rate_per_hour: float
    current_value: float
    data_points: int
    last_timestamp: datetime
    confidence: float = 0.0


@dataclass(frozen=True, slots=True)
class Forecast:
    """A predicted future crossing of a value for one metric."""

    metric_name: str
    forecast_type: ForecastType
    current_value: float
    predicted_value: float
    prediction_at: datetime
    confidence: float  # 0.0 - 1.0
    message: str
    data_points: int
    generated_at: datetime = field(default_factory=_now)
