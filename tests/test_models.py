"""Tests for sysobs data models."""

from dataclasses import fields
from datetime import datetime

import pytest

from sysobs.models import (
    ActionHandler,
    EventType,
    Err,
    ErrorKind,
    IngestResult,
    NotificationPolicy,
    NotificationType,
    Ok,
    Sample,
    SuggestedAction,
    WeatherReport,
    WeatherState,
)


class TestEnums:
    def test_weather_state_values(self):
        assert WeatherState.CALM == "calm"
        assert WeatherState.ACT == "act"

    def test_severity_order(self):
        assert WeatherState.CALM.severity < WeatherState.WATCH.severity < WeatherState.ACT.severity

    def test_event_types(self):
        assert {e.value for e in EventType} == {"anomaly", "metric", "change"}

    def test_handlers_are_routes(self):
        assert ActionHandler.OPEN_THEATRE == "open_theatre"
        assert ActionHandler.OPEN_A_AND_E == "open_a_and_e"


class TestResults:
    def test_ok(self):
        r = Ok(5)
        assert r.ok is True
        assert r.value == 5

    def test_err(self):
        r = Err(ErrorKind.NOT_TRENDING, "m")
        assert r.ok is False
        assert r.error == "not_trending"
        assert r.detail == "m"


class TestSample:
    def test_defaults(self):
        s = Sample(name="m", value=1.0)
        assert s.tags == {}
        assert s.source is None
        assert isinstance(s.timestamp, datetime)
        assert s.timestamp.tzinfo is not None

    def test_frozen(self):
        s = Sample(name="m", value=1.0)
        with pytest.raises(AttributeError):
            s.value = 2.0  # type: ignore[misc]


class TestAdvisoryOnly:
    def test_notification_policy_default_is_silent(self):
        p = NotificationPolicy()
        assert p.should_notify is False
        assert p.notification_type is NotificationType.SILENT
        assert p.snooze_options == ()

    def test_actions_carry_no_command(self):
        names = {f.name for f in fields(SuggestedAction)}
        assert names == {"action_id", "label", "description", "priority", "handler", "category"}

    def test_report_version(self):
        assert "version" in {f.name for f in fields(WeatherReport)}


class TestIngestResult:
    def test_envelope_alias(self):
        r = IngestResult(metrics_recorded=1, events_recorded=0, bundle_id="env-9")
        assert r.envelope_id == "env-9"
