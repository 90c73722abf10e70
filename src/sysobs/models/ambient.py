"""Frozen dataclass models for themes and ambient UI payloads.

Ambient payloads drive presentation only: no field carries a command or
anything that could change host state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sysobs.models.enums import ActionPriority, WeatherState
from sysobs.models.weather import NotificationPolicy

AMBIENT_VERSION = "1.0.0"


@dataclass(frozen=True, slots=True)
class ThemeState:
    icon: str
    color: str
    animation: str = "none"


@dataclass(frozen=True, slots=True)
class PopoverFormat:
    headline_format: str
    show_metrics: bool = True
    max_metrics: int = 4


@dataclass(frozen=True, slots=True)
class Theme:
    """Visual attributes per weather state plus popover formatting."""

    id: str
    name: str
    states: dict[WeatherState, ThemeState]
    popover: PopoverFormat


@dataclass(frozen=True, slots=True)
class Indicator:
    icon: str
    color: str
    animation: str
    state: WeatherState
    tooltip: str


@dataclass(frozen=True, slots=True)
class Badge:
    visible: bool
    count: int
    color: str


@dataclass(frozen=True, slots=True)
class MetricLine:
    label: str
    value: float
    unit: str
    state: WeatherState


@dataclass(frozen=True, slots=True)
class Popover:
    headline: str
    metrics: tuple[MetricLine, ...]
    last_updated: datetime


@dataclass(frozen=True, slots=True)
class QuickAction:
    id: str
    label: str
    description: str
    priority: ActionPriority


@dataclass(frozen=True, slots=True)
class Schedule:
    refresh_interval_seconds: int
    next_refresh: datetime


@dataclass(frozen=True, slots=True)
class AmbientPayload:
    """Theme-rendered advisory payload derived from a weather report."""

    timestamp: datetime
    theme_id: str
    indicator: Indicator
    badge: Badge
    popover: Popover
    notifications: NotificationPolicy
    quick_actions: tuple[QuickAction, ...]
    schedule: Schedule
    version: str = AMBIENT_VERSION
