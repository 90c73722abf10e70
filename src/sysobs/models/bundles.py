"""Typed views over inbound run bundles and evidence envelopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class RunBundle:
    """A loosely-typed snapshot + findings + applied changes package."""

    bundle_id: str | None = None
    timestamp: datetime | None = None
    source: str | None = None
    snapshot: dict[str, Any] = field(default_factory=dict)
    findings: tuple[dict[str, Any], ...] = ()
    applied: tuple[dict[str, Any], ...] = ()


@dataclass(frozen=True, slots=True)
class EnvelopeFinding:
    finding_id: str | None
    severity: str
    category: str | None
    title: str | None
    auto_fixable: bool = False


@dataclass(frozen=True, slots=True)
class EnvelopeSource:
    tool: str = "unknown"
    hostname: str | None = None


@dataclass(frozen=True, slots=True)
class EvidenceEnvelope:
    """Schema-typed findings and artifacts from an external diagnostic tool."""

    version: str
    envelope_id: str
    created_at: datetime | None = None
    source: EnvelopeSource = field(default_factory=EnvelopeSource)
    artifacts: tuple[dict[str, Any], ...] = ()
    findings: tuple[EnvelopeFinding, ...] = ()
    metrics: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class IngestResult:
    metrics_recorded: int
    events_recorded: int
    bundle_id: str

    @property
    def envelope_id(self) -> str:
        return self.bundle_id


@dataclass(frozen=True, slots=True)
class EventRecord:
    """An event emitted to the recorder side channel."""

    event_type: str
    source: str
    data: dict[str, Any]
    recorded_at: datetime | None = None
