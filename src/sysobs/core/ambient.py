"""Ambient payload generation: weather report + theme -> presentation payload.

Payloads drive UI presentation only. They never carry commands or modify
system state; quick actions expose an id and a label, nothing executable.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta

from sysobs.core.store import utc_now
from sysobs.core.themes import ThemeRegistry, apply_state, format_headline
from sysobs.core.weather import WeatherEvaluator
from sysobs.models.ambient import (
    AmbientPayload,
    Badge,
    Indicator,
    MetricLine,
    Popover,
    QuickAction,
    Schedule,
    Theme,
    ThemeState,
)
from sysobs.models.enums import WeatherState
from sysobs.models.weather import NotificationPolicy, WeatherReport

REFRESH_INTERVALS: dict[WeatherState, int] = {
    WeatherState.CALM: 60,
    WeatherState.WATCH: 30,
    WeatherState.ACT: 10,
}


def build_indicator(weather: WeatherReport, theme_state: ThemeState) -> Indicator:
    return Indicator(
        icon=theme_state.icon,
        color=theme_state.color,
        animation=theme_state.animation,
        state=weather.state,
        tooltip=weather.summary,
    )


def build_badge(weather: WeatherReport, theme_state: ThemeState) -> Badge:
    issue_count = sum(
        1 for c in weather.categories.values() if c.state is not WeatherState.CALM
    )
    return Badge(visible=issue_count > 0, count=issue_count, color=theme_state.color)


def build_popover(weather: WeatherReport, theme: Theme) -> Popover:
    metrics: tuple[MetricLine, ...] = ()
    if theme.popover.show_metrics:
        metrics = tuple(
            MetricLine(
                label=name,
                value=cat.metric_value,
                unit=cat.metric_unit,
                state=cat.state,
            )
            for name, cat in list(weather.categories.items())[: theme.popover.max_metrics]
        )

    return Popover(
        headline=format_headline(theme, weather.state, weather.summary),
        metrics=metrics,
        last_updated=weather.timestamp,
    )


def build_quick_actions(weather: WeatherReport) -> tuple[QuickAction, ...]:
    return tuple(
        QuickAction(
            id=a.action_id,
            label=a.label,
            description=a.description,
            priority=a.priority,
        )
        for a in weather.actions
    )


def build_schedule(state: WeatherState) -> Schedule:
    seconds = REFRESH_INTERVALS[state]
    return Schedule(
        refresh_interval_seconds=seconds,
        next_refresh=utc_now() + timedelta(seconds=seconds),
    )


def build_payload(weather: WeatherReport, theme: Theme) -> AmbientPayload:
    theme_state = apply_state(theme, weather.state)
    return AmbientPayload(
        timestamp=weather.timestamp,
        theme_id=theme.id,
        indicator=build_indicator(weather, theme_state),
        badge=build_badge(weather, theme_state),
        popover=build_popover(weather, theme),
        notifications=weather.notifications or NotificationPolicy(),
        quick_actions=build_quick_actions(weather),
        schedule=build_schedule(weather.state),
    )


class AmbientPayloadBuilder:
    """Combines weather from a :class:`WeatherEvaluator` with a theme."""

    def __init__(
        self,
        evaluator: WeatherEvaluator,
        themes: ThemeRegistry | None = None,
        default_theme: str = "default",
    ) -> None:
        self._evaluator = evaluator
        self._themes = themes or ThemeRegistry()
        self._default_theme = default_theme

    def generate(self) -> AmbientPayload:
        return self.generate_with_theme(self._default_theme)

    def generate_with_theme(self, theme_id: str) -> AmbientPayload:
        weather = self._evaluator.generate()
        return build_payload(weather, self._themes.get(theme_id))

    def generate_from(
        self, readings: Mapping[str, float], theme_id: str = "default"
    ) -> AmbientPayload:
        """Payload from explicit readings, bypassing the store."""
        weather = self._evaluator.generate_from(readings)
        return build_payload(weather, self._themes.get(theme_id))
