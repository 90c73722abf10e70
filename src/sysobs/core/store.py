"""In-memory, time-indexed metrics store with read-time freshness filtering."""

from __future__ import annotations

import bisect
import logging
import numbers
import threading
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone

from sysobs.config import StoreConfig
from sysobs.models.metrics import Sample

logger = logging.getLogger("sysobs.store")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _check_value(name: str, value: object) -> float:
    # bool is an int subclass but never a measurement
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"Metric {name!r} requires a numeric value, got {value!r}")
    return float(value)


class MetricsStore:
    """Append-only store of numeric samples, one ordered series per metric name.

    Samples older than the TTL stay in their series (forecasting looks past
    the freshness window) but are excluded from :meth:`all_fresh`. Each series
    keeps at most ``max_points_per_metric`` samples, dropping the oldest.

    All reads and writes go through one lock, so readers always see whole
    samples and a consistent snapshot.
    """

    def __init__(
        self,
        ttl: timedelta | float | None = None,
        max_points_per_metric: int | None = None,
        clock: Clock | None = None,
    ) -> None:
        defaults = StoreConfig()
        if ttl is None:
            ttl = defaults.ttl_seconds
        self._ttl = ttl if isinstance(ttl, timedelta) else timedelta(seconds=ttl)
        self._max_points = max_points_per_metric or defaults.max_points_per_metric
        self._clock = clock or utc_now
        self._series: dict[str, list[Sample]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: StoreConfig, clock: Clock | None = None) -> MetricsStore:
        return cls(
            ttl=config.ttl_seconds,
            max_points_per_metric=config.max_points_per_metric,
            clock=clock,
        )

    def __enter__(self) -> MetricsStore:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        """Drop every retained sample."""
        with self._lock:
            self._series.clear()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def now(self) -> datetime:
        return self._clock()

    # --- Writes ---

    def record(
        self,
        name: str,
        value: float,
        tags: Mapping[str, str] | None = None,
        source: str | None = None,
    ) -> Sample:
        """Append a sample stamped with the current time."""
        return self.record_at(name, value, self._clock(), tags=tags, source=source)

    def record_at(
        self,
        name: str,
        value: float,
        timestamp: datetime,
        tags: Mapping[str, str] | None = None,
        source: str | None = None,
    ) -> Sample:
        """Append a sample with an explicit (possibly backdated) timestamp."""
        sample = Sample(
            name=name,
            value=_check_value(name, value),
            timestamp=_as_utc(timestamp),
            tags=dict(tags or {}),
            source=source,
        )
        with self._lock:
            series = self._series.setdefault(name, [])
            if not series or series[-1].timestamp <= sample.timestamp:
                series.append(sample)
            else:
                bisect.insort_right(series, sample, key=lambda s: s.timestamp)
            if len(series) > self._max_points:
                del series[: len(series) - self._max_points]
        logger.debug("Recorded %s=%s at %s", name, sample.value, sample.timestamp)
        return sample

    # --- Reads ---

    def all_fresh(self) -> list[Sample]:
        """Every sample no older than the TTL, grouped by name in timestamp order."""
        cutoff = self._clock() - self._ttl
        with self._lock:
            return [
                s
                for series in self._series.values()
                for s in series
                if s.timestamp >= cutoff
            ]

    def series(self, name: str) -> list[Sample]:
        """All retained samples for one metric, fresh or stale, oldest first."""
        with self._lock:
            return list(self._series.get(name, ()))

    def metric_names(self) -> list[str]:
        with self._lock:
            return sorted(self._series)

    def count(self, name: str | None = None) -> int:
        with self._lock:
            if name is not None:
                return len(self._series.get(name, ()))
            return sum(len(s) for s in self._series.values())
