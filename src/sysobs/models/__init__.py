"""sysobs data models."""

from sysobs.models.ambient import (
    AmbientPayload,
    Badge,
    Indicator,
    MetricLine,
    Popover,
    PopoverFormat,
    QuickAction,
    Schedule,
    Theme,
    ThemeState,
)
from sysobs.models.bundles import (
    EnvelopeFinding,
    EnvelopeSource,
    EventRecord,
    EvidenceEnvelope,
    IngestResult,
    RunBundle,
)
from sysobs.models.enums import (
    ActionHandler,
    ActionPriority,
    EventType,
    ForecastType,
    NotificationType,
    SeriesDirection,
    TrendDirection,
    WeatherState,
)
from sysobs.models.metrics import Forecast, Sample, TrendAnalysis
from sysobs.models.results import Err, ErrorKind, Ok, Result
from sysobs.models.weather import (
    CategoryEvaluation,
    NotificationPolicy,
    SnoozeOption,
    SuggestedAction,
    Trend,
    WeatherReport,
    WeatherSource,
)

__all__ = [
    "WeatherState",
    "TrendDirection",
    "SeriesDirection",
    "ForecastType",
    "NotificationType",
    "ActionPriority",
    "ActionHandler",
    "EventType",
    "Ok",
    "Err",
    "ErrorKind",
    "Result",
    "Sample",
    "TrendAnalysis",
    "Forecast",
    "CategoryEvaluation",
    "SnoozeOption",
    "NotificationPolicy",
    "SuggestedAction",
    "Trend",
    "WeatherSource",
    "WeatherReport",
    "ThemeState",
    "PopoverFormat",
    "Theme",
    "Indicator",
    "Badge",
    "MetricLine",
    "Popover",
    "QuickAction",
    "Schedule",
    "AmbientPayload",
    "RunBundle",
    "EnvelopeFinding",
    "EnvelopeSource",
    "EvidenceEnvelope",
    "IngestResult",
    "EventRecord",
]
