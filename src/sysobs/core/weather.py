"""System weather: threshold evaluation of tracked categories.

Weather reports are derived from advisory metrics. They indicate trends and
suggest where to look; they are not authoritative state and never carry a
command.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from sysobs.core.store import MetricsStore, utc_now
from sysobs.models.enums import (
    ActionHandler,
    ActionPriority,
    NotificationType,
    TrendDirection,
    WeatherState,
)
from sysobs.models.metrics import Sample
from sysobs.models.weather import (
    CategoryEvaluation,
    NotificationPolicy,
    SnoozeOption,
    SuggestedAction,
    Trend,
    WeatherReport,
    WeatherSource,
)

logger = logging.getLogger("sysobs.weather")

# Change between the two most recent values needed to call a trend
TREND_EPSILON = 5.0


@dataclass(frozen=True, slots=True)
class CategoryRule:
    """How one category is read from the store and judged."""

    name: str
    metric_key: str
    reading_key: str
    trend_key: str
    warning: float
    critical: float
    unit: str = "%"


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("disk", "disk_usage_percent", "disk_percent", "disk_usage", 80, 90),
    CategoryRule("memory", "memory_usage_percent", "memory_percent", "memory_pressure", 75, 90),
    CategoryRule("cpu", "cpu_load_percent", "cpu_percent", "cpu_load", 80, 95),
)

NOTIFICATION_POLICIES: dict[WeatherState, NotificationPolicy] = {
    WeatherState.CALM: NotificationPolicy(),
    WeatherState.WATCH: NotificationPolicy(
        should_notify=True,
        notification_type=NotificationType.BADGE,
        snooze_options=(
            SnoozeOption("1 hour", 3600),
            SnoozeOption("4 hours", 14400),
        ),
    ),
    WeatherState.ACT: NotificationPolicy(
        should_notify=True,
        notification_type=NotificationType.TOAST,
        snooze_options=(
            SnoozeOption("30 minutes", 1800),
            SnoozeOption("1 hour", 3600),
        ),
    ),
}


def _fmt(value: float) -> str:
    return f"{value:g}"


def evaluate_threshold(rule: CategoryRule, value: float) -> CategoryEvaluation:
    """Classify one value against a rule's warning/critical thresholds."""
    if value >= rule.critical:
        state, label = WeatherState.ACT, "Critical"
    elif value >= rule.warning:
        state, label = WeatherState.WATCH, "Elevated"
    else:
        state, label = WeatherState.CALM, "Normal"

    return CategoryEvaluation(
        state=state,
        summary=f"{label}: {_fmt(value)}{rule.unit} usage",
        metric_value=value,
        metric_unit=rule.unit,
        threshold_warning=rule.warning,
        threshold_critical=rule.critical,
    )


def overall_state(categories: Mapping[str, CategoryEvaluation]) -> WeatherState:
    """Most severe state across categories (calm when there are none)."""
    return max(
        (c.state for c in categories.values()),
        key=lambda s: s.severity,
        default=WeatherState.CALM,
    )


def summarize(state: WeatherState, categories: Mapping[str, CategoryEvaluation]) -> str:
    if state is WeatherState.CALM:
        return "All systems nominal. No action needed."

    if state is WeatherState.WATCH:
        watching = ", ".join(k for k, v in categories.items() if v.state is WeatherState.WATCH)
        return f"Monitoring {watching}. No immediate action required."

    acting = ", ".join(
        f"{k} ({v.summary})" for k, v in categories.items() if v.state is WeatherState.ACT
    )
    return f"Action recommended: {acting}"


def suggest_actions(
    state: WeatherState, categories: Mapping[str, CategoryEvaluation]
) -> tuple[SuggestedAction, ...]:
    """One action per category at the overall state. Ids depend only on the name."""
    if state is WeatherState.WATCH:
        return tuple(
            SuggestedAction(
                action_id=f"investigate_{name}",
                label=f"Investigate {name}",
                description=f"Open Operating Theatre for {name} diagnostics",
                priority=ActionPriority.MEDIUM,
                handler=ActionHandler.OPEN_THEATRE,
                category=name,
            )
            for name, cat in categories.items()
            if cat.state is WeatherState.WATCH
        )

    if state is WeatherState.ACT:
        return tuple(
            SuggestedAction(
                action_id=f"fix_{name}",
                label=f"Fix {name} now",
                description=f"Open Emergency Room for immediate {name} remediation",
                priority=ActionPriority.HIGH,
                handler=ActionHandler.OPEN_A_AND_E,
                category=name,
            )
            for name, cat in categories.items()
            if cat.state is WeatherState.ACT
        )

    return ()


def trend_direction(values: list[float]) -> TrendDirection:
    """Compare the two most recent values of an oldest-first list."""
    if len(values) < 2:
        return TrendDirection.STABLE
    previous, latest = values[-2], values[-1]
    if latest > previous + TREND_EPSILON:
        return TrendDirection.DEGRADING
    if latest < previous - TREND_EPSILON:
        return TrendDirection.IMPROVING
    return TrendDirection.STABLE


def aggregate_trend(trends: Iterable[Trend]) -> Trend:
    directions = {t.direction for t in trends}
    if TrendDirection.DEGRADING in directions:
        return Trend(TrendDirection.DEGRADING)
    if TrendDirection.IMPROVING in directions:
        return Trend(TrendDirection.IMPROVING)
    return Trend(TrendDirection.STABLE)


def _values_for(samples: Iterable[Sample], name: str) -> list[float]:
    matching = sorted((s for s in samples if s.name == name), key=lambda s: s.timestamp)
    return [s.value for s in matching]


def readings_from(
    disk: float | None = None,
    memory: float | None = None,
    cpu: float | None = None,
) -> dict[str, float] | None:
    """Readings map for :meth:`WeatherEvaluator.generate_from`.

    Returns None when no value is given, meaning "use the store". Missing
    values among given ones read as 0.
    """
    if disk is None and memory is None and cpu is None:
        return None
    return {
        "disk_percent": disk or 0.0,
        "memory_percent": memory or 0.0,
        "cpu_percent": cpu or 0.0,
    }


class WeatherEvaluator:
    """Builds :class:`WeatherReport` values from a store snapshot or explicit readings."""

    def __init__(
        self,
        store: MetricsStore | None = None,
        rules: tuple[CategoryRule, ...] = CATEGORY_RULES,
    ) -> None:
        self._store = store
        self._rules = rules

    @property
    def rules(self) -> tuple[CategoryRule, ...]:
        return self._rules

    def generate(self) -> WeatherReport:
        """Weather from the freshest value of each category in the store."""
        if self._store is None:
            raise RuntimeError("WeatherEvaluator has no store; use generate_from()")

        samples = self._store.all_fresh()
        series = {rule.metric_key: _values_for(samples, rule.metric_key) for rule in self._rules}

        categories = {
            rule.name: evaluate_threshold(
                rule, series[rule.metric_key][-1] if series[rule.metric_key] else 0.0
            )
            for rule in self._rules
        }

        trends = {
            rule.trend_key: Trend(trend_direction(series[rule.metric_key]))
            for rule in self._rules
        }
        trends["overall"] = aggregate_trend(trends.values())

        last_scan = max((s.timestamp for s in samples), default=None)
        report = self._build(
            categories,
            trends,
            WeatherSource(last_scan=last_scan, scan_profile="continuous"),
            timestamp=self._store.now(),
        )
        logger.debug("Weather from %d fresh samples: %s", len(samples), report.state.value)
        return report

    def generate_from(self, readings: Mapping[str, float]) -> WeatherReport:
        """Weather from an explicit ``{disk_percent, memory_percent, cpu_percent}`` map."""
        categories = {
            rule.name: evaluate_threshold(rule, float(readings.get(rule.reading_key, 0) or 0))
            for rule in self._rules
        }
        trends = {rule.trend_key: Trend() for rule in self._rules}
        trends["overall"] = Trend()
        return self._build(categories, trends, WeatherSource(scan_profile="snapshot"))

    def _build(
        self,
        categories: dict[str, CategoryEvaluation],
        trends: dict[str, Trend],
        source: WeatherSource,
        timestamp: datetime | None = None,
    ) -> WeatherReport:
        state = overall_state(categories)
        return WeatherReport(
            timestamp=timestamp or utc_now(),
            state=state,
            summary=summarize(state, categories),
            categories=categories,
            notifications=NOTIFICATION_POLICIES[state],
            actions=suggest_actions(state, categories),
            trends=trends,
            source=source,
        )
