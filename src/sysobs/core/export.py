"""JSON-ready dict conversion for weather, ambient payloads and forecasts."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sysobs.models.ambient import AmbientPayload
from sysobs.models.bundles import EventRecord, IngestResult
from sysobs.models.metrics import Forecast, TrendAnalysis
from sysobs.models.weather import NotificationPolicy, WeatherReport


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def notifications_to_dict(policy: NotificationPolicy) -> dict[str, Any]:
    return {
        "should_notify": policy.should_notify,
        "notification_type": policy.notification_type.value,
        "snooze_options": [
            {"label": s.label, "duration_seconds": s.duration_seconds}
            for s in policy.snooze_options
        ],
    }


def weather_to_dict(report: WeatherReport) -> dict[str, Any]:
    """system-weather JSON shape."""
    return {
        "version": report.version,
        "timestamp": _iso(report.timestamp),
        "state": report.state.value,
        "summary": report.summary,
        "categories": {
            name: {
                "state": cat.state.value,
                "summary": cat.summary,
                "metric_value": cat.metric_value,
                "metric_unit": cat.metric_unit,
                "threshold_warning": cat.threshold_warning,
                "threshold_critical": cat.threshold_critical,
            }
            for name, cat in report.categories.items()
        },
        "notifications": notifications_to_dict(report.notifications),
        "actions": [
            {
                "action_id": a.action_id,
                "label": a.label,
                "description": a.description,
                "priority": a.priority.value,
                "handler": a.handler.value,
                "parameters": {"category": a.category},
            }
            for a in report.actions
        ],
        "trends": {key: {"direction": t.direction.value} for key, t in report.trends.items()},
        "source": {
            "tool": report.source.tool,
            "last_scan": _iso(report.source.last_scan),
            "scan_profile": report.source.scan_profile,
        },
    }


def payload_to_dict(payload: AmbientPayload) -> dict[str, Any]:
    """ambient-payload JSON shape."""
    return {
        "version": payload.version,
        "timestamp": _iso(payload.timestamp),
        "theme_id": payload.theme_id,
        "indicator": {
            "icon": payload.indicator.icon,
            "color": payload.indicator.color,
            "animation": payload.indicator.animation,
            "state": payload.indicator.state.value,
            "tooltip": payload.indicator.tooltip,
        },
        "badge": {
            "visible": payload.badge.visible,
            "count": payload.badge.count,
            "color": payload.badge.color,
        },
        "popover": {
            "headline": payload.popover.headline,
            "metrics": [
                {"label": m.label, "value": m.value, "unit": m.unit, "state": m.state.value}
                for m in payload.popover.metrics
            ],
            "last_updated": _iso(payload.popover.last_updated),
        },
        "notifications": notifications_to_dict(payload.notifications),
        "quick_actions": [
            {
                "id": a.id,
                "label": a.label,
                "description": a.description,
                "priority": a.priority.value,
            }
            for a in payload.quick_actions
        ],
        "schedule": {
            "refresh_interval_seconds": payload.schedule.refresh_interval_seconds,
            "next_refresh": _iso(payload.schedule.next_refresh),
        },
    }


def forecast_to_dict(forecast: Forecast) -> dict[str, Any]:
    return {
        "metric_name": forecast.metric_name,
        "forecast_type": forecast.forecast_type.value,
        "current_value": forecast.current_value,
        "predicted_value": forecast.predicted_value,
        "prediction_at": _iso(forecast.prediction_at),
        "confidence": forecast.confidence,
        "message": forecast.message,
        "data_points": forecast.data_points,
        "generated_at": _iso(forecast.generated_at),
    }


def trend_to_dict(trend: TrendAnalysis) -> dict[str, Any]:
    return {
        "metric_name": trend.metric_name,
        "direction": trend.direction.value,
        "rate_per_hour": trend.rate_per_hour,
        "current_value": trend.current_value,
        "data_points": trend.data_points,
    }


def ingest_result_to_dict(result: IngestResult) -> dict[str, Any]:
    return {
        "metrics_recorded": result.metrics_recorded,
        "events_recorded": result.events_recorded,
        "bundle_id": result.bundle_id,
    }


def event_to_dict(event: EventRecord) -> dict[str, Any]:
    return {
        "event_type": event.event_type,
        "source": event.source,
        "data": event.data,
        "recorded_at": _iso(event.recorded_at),
    }
