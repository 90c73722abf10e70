"""Markdown formatters for LLM-friendly output."""

from __future__ import annotations

from sysobs.models.ambient import AmbientPayload, Theme
from sysobs.models.bundles import EventRecord, IngestResult
from sysobs.models.enums import WeatherState
from sysobs.models.metrics import Forecast, TrendAnalysis
from sysobs.models.results import Err, ErrorKind
from sysobs.models.weather import WeatherReport

_ERROR_MESSAGES = {
    ErrorKind.MISSING_VERSION: "Envelope rejected: `version` is missing or not a string.",
    ErrorKind.MISSING_ENVELOPE_ID: "Envelope rejected: `envelope_id` is missing or not a string.",
    ErrorKind.INSUFFICIENT_DATA: "Not enough data: at least 3 samples are needed.",
    ErrorKind.NOT_TRENDING: "Metric is not trending upward; no exhaustion is projected.",
    ErrorKind.ALREADY_BREACHED: "Metric is already at or above the threshold.",
    ErrorKind.UNREADABLE_INPUT: "Input could not be read.",
}


def format_error(err: Err) -> str:
    """Format an expected failure with its detail."""
    message = _ERROR_MESSAGES.get(err.error, err.error.value)
    if err.detail:
        message += f" ({err.detail})"
    return f"**{err.error.value}** — {message}"


def format_weather(report: WeatherReport) -> str:
    """Format a weather report as a markdown table plus actions."""
    lines = [
        f"## System Weather: {report.state.value.upper()}",
        f"**Summary:** {report.summary}  ",
        f"**Time:** {report.timestamp.isoformat()}  ",
        "",
        "| Category | State | Value | Warning | Critical |",
        "|----------|-------|-------|---------|----------|",
    ]
    for name, cat in report.categories.items():
        lines.append(
            f"| {name} | {cat.state.value} | {cat.metric_value:g}{cat.metric_unit} "
            f"| {cat.threshold_warning:g} | {cat.threshold_critical:g} |"
        )

    if report.trends:
        trends = ", ".join(f"{k}: {t.direction.value}" for k, t in report.trends.items())
        lines.extend(["", f"**Trends:** {trends}"])

    if report.actions:
        lines.extend(["", "### Suggested Actions"])
        for a in report.actions:
            lines.append(f"- **[{a.priority.value}]** `{a.action_id}` — {a.description}")

    return "\n".join(lines)


def format_payload(payload: AmbientPayload) -> str:
    """Format an ambient payload as the user would see it."""
    ind = payload.indicator
    lines = [
        f"## Ambient ({payload.theme_id})",
        f"**Indicator:** {ind.icon} `{ind.color}` ({ind.animation})  ",
        f"**Headline:** {payload.popover.headline}  ",
        f"**Badge:** {payload.badge.count if payload.badge.visible else 'hidden'}  ",
        f"**Refresh:** every {payload.schedule.refresh_interval_seconds}s",
    ]
    if payload.popover.metrics:
        lines.append("")
        for m in payload.popover.metrics:
            lines.append(f"- {m.label}: {m.value:g}{m.unit} ({m.state.value})")
    if payload.quick_actions:
        lines.extend(["", "### Quick Actions"])
        for a in payload.quick_actions:
            lines.append(f"- `{a.id}` {a.label} [{a.priority.value}]")
    return "\n".join(lines)


def format_forecasts(forecasts: list[Forecast], title: str = "Forecasts") -> str:
    """Format forecasts as a table, most confident first."""
    if not forecasts:
        return f"## {title}\n\nNo forecasts: no metric has an upward trend over 3+ samples."

    lines = [
        f"## {title}",
        "",
        "| Metric | Type | Current | Predicted | At | Confidence | Message |",
        "|--------|------|---------|-----------|----|------------|---------|",
    ]
    for f in forecasts:
        lines.append(
            f"| {f.metric_name} | {f.forecast_type.value} | {f.current_value:g} "
            f"| {f.predicted_value:g} | {f.prediction_at.isoformat()} "
            f"| {f.confidence:.2f} | {f.message} |"
        )
    return "\n".join(lines)


def format_trend(trend: TrendAnalysis) -> str:
    return (
        f"## Trend: {trend.metric_name}\n"
        f"- Direction: {trend.direction.value}\n"
        f"- Rate: {trend.rate_per_hour:+.2f}/hour\n"
        f"- Current: {trend.current_value:g}\n"
        f"- Data points: {trend.data_points}"
    )


def format_ingest_result(result: IngestResult) -> str:
    return (
        f"Ingested `{result.bundle_id}`: "
        f"{result.metrics_recorded} metrics, {result.events_recorded} events"
    )


def format_themes(themes: list[Theme]) -> str:
    lines = [
        "## Themes",
        "",
        "| ID | Name | Calm | Watch | Act | Popover metrics |",
        "|----|------|------|-------|-----|-----------------|",
    ]
    for t in themes:
        icons = [t.states[s].icon if s in t.states else "—" for s in WeatherState]
        shown = str(t.popover.max_metrics) if t.popover.show_metrics else "—"
        lines.append(f"| {t.id} | {t.name} | {' | '.join(icons)} | {shown} |")
    return "\n".join(lines)


def format_events(events: list[EventRecord], title: str = "Recent Events") -> str:
    if not events:
        return f"## {title}\n\nNo events recorded."

    lines = [f"## {title}", ""]
    for e in events:
        ts = e.recorded_at.isoformat() if e.recorded_at else "???"
        label = e.data.get("title") or e.data.get("type") or e.data.get("action") or ""
        lines.append(f"- **[{e.event_type}]** `{ts}` *{e.source}* {label}".rstrip())
    return "\n".join(lines)
