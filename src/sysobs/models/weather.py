"""Frozen dataclass models for system weather reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sysobs.models.enums import (
    ActionHandler,
    ActionPriority,
    NotificationType,
    TrendDirection,
    WeatherState,
)

WEATHER_VERSION = "1.0.0"


@dataclass(frozen=True, slots=True)
class CategoryEvaluation:
    """Threshold evaluation of one tracked category (disk, memory, cpu)."""

    state: WeatherState
    summary: str
    metric_value: float
    metric_unit: str
    threshold_warning: float
    threshold_critical: float


@dataclass(frozen=True, slots=True)
class SnoozeOption:
    label: str
    duration_seconds: int


@dataclass(frozen=True, slots=True)
class NotificationPolicy:
    """How loudly a weather state should surface to the user."""

    should_notify: bool = False
    notification_type: NotificationType = NotificationType.SILENT
    snooze_options: tuple[SnoozeOption, ...] = ()


@dataclass(frozen=True, slots=True)
class SuggestedAction:
    """A UI suggestion. Routes to a handler surface; carries no command."""

    action_id: str
    label: str
    description: str
    priority: ActionPriority
    handler: ActionHandler
    category: str


@dataclass(frozen=True, slots=True)
class Trend:
    direction: TrendDirection = TrendDirection.STABLE


@dataclass(frozen=True, slots=True)
class WeatherSource:
    tool: str = "sysobs"
    last_scan: datetime | None = None
    scan_profile: str = "continuous"


@dataclass(frozen=True, slots=True)
class WeatherReport:
    """Point-in-time health classification across all tracked categories."""

    timestamp: datetime
    state: WeatherState
    summary: str
    categories: dict[str, CategoryEvaluation]
    notifications: NotificationPolicy = field(default_factory=NotificationPolicy)
    actions: tuple[SuggestedAction, ...] = ()
    trends: dict[str, Trend] = field(default_factory=dict)
    source: WeatherSource = field(default_factory=WeatherSource)
    version: str = WEATHER_VERSION
