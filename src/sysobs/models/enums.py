"""Enumerations for sysobs models."""

from enum import Enum


class WeatherState(str, Enum):
    """Overall or per-category health classification."""

    CALM = "calm"
    WATCH = "watch"
    ACT = "act"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {WeatherState.CALM: 0, WeatherState.WATCH: 1, WeatherState.ACT: 2}


class TrendDirection(str, Enum):
    """Short-term direction reported in a weather report."""

    IMPROVING = "improving"
    STABLE = "stable"
    DEGRADING = "degrading"


class SeriesDirection(str, Enum):
    """Sign of the fitted rate for a metric series."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class ForecastType(str, Enum):
    EXHAUSTION = "exhaustion"
    THRESHOLD = "threshold"


class NotificationType(str, Enum):
    SILENT = "silent"
    BADGE = "badge"
    TOAST = "toast"


class ActionPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ActionHandler(str, Enum):
    """UI surface an action routes to. A route name, never a command."""

    OPEN_THEATRE = "open_theatre"
    OPEN_A_AND_E = "open_a_and_e"


class EventType(str, Enum):
    """Event kinds emitted to the event recorder during ingestion."""

    ANOMALY = "anomaly"
    METRIC = "metric"
    CHANGE = "change"
