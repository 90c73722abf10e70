"""Run bundle and evidence envelope ingestion.

Raw JSON-shaped mappings are parsed into typed structures at this boundary,
then normalized into metrics store writes and recorder events:

- run bundle: ``snapshot`` numbers become samples, ``findings`` become
  ``anomaly``/``metric`` events, ``applied`` entries become ``change`` events
- evidence envelope: ``findings`` become events, ``metrics`` become samples,
  and the artifact count is always recorded as ``envelope_artifacts``
"""

from __future__ import annotations

import logging
import numbers
import secrets
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sysobs.core.events import EventRecorder, log_event
from sysobs.core.store import MetricsStore
from sysobs.models.bundles import (
    EnvelopeFinding,
    EnvelopeSource,
    EvidenceEnvelope,
    IngestResult,
    RunBundle,
)
from sysobs.models.enums import EventType
from sysobs.models.results import Err, ErrorKind, Ok, Result

logger = logging.getLogger("sysobs.ingestion")

DEFAULT_BUNDLE_SOURCE = "operating-theatre"

ARTIFACT_COUNT_METRIC = "envelope_artifacts"

# Run bundle finding severity/type values treated as anomalies
BUNDLE_ANOMALY_SEVERITIES = frozenset({"critical", "error", "anomaly"})

# Envelope finding severities treated as anomalies
ENVELOPE_ANOMALY_SEVERITIES = frozenset({"critical", "high"})


def _parse_dt(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Ignoring unparseable timestamp %r", value)
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _is_number(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _mapping_entries(value: object, field_name: str) -> tuple[dict[str, Any], ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        logger.warning("Ignoring %s: expected a list, got %s", field_name, type(value).__name__)
        return ()
    entries = []
    for item in value:
        if isinstance(item, Mapping):
            entries.append(dict(item))
        else:
            logger.warning("Skipping malformed %s entry: %r", field_name, item)
    return tuple(entries)


def _mapping(value: object, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        logger.warning("Ignoring %s: expected a mapping, got %s", field_name, type(value).__name__)
        return {}
    return dict(value)


def new_bundle_id() -> str:
    return "bundle-" + secrets.token_urlsafe(8)


def parse_run_bundle(data: Mapping[str, Any]) -> RunBundle:
    """Typed view of a run bundle. Never fails; malformed sections are dropped."""
    bundle_id = None
    for key in ("id", "bundle_id"):
        if isinstance(data.get(key), str):
            bundle_id = data[key]
            break

    source = data.get("source")
    return RunBundle(
        bundle_id=bundle_id,
        timestamp=_parse_dt(data.get("timestamp")),
        source=source if isinstance(source, str) else None,
        snapshot=_mapping(data.get("snapshot"), "snapshot"),
        findings=_mapping_entries(data.get("findings"), "findings"),
        applied=_mapping_entries(data.get("applied"), "applied"),
    )


def parse_envelope(data: Mapping[str, Any]) -> Result[EvidenceEnvelope]:
    """Typed view of an evidence envelope; version and envelope_id are required."""
    version = data.get("version")
    if not isinstance(version, str):
        return Err(ErrorKind.MISSING_VERSION)
    envelope_id = data.get("envelope_id")
    if not isinstance(envelope_id, str):
        return Err(ErrorKind.MISSING_ENVELOPE_ID)

    source_data = _mapping(data.get("source"), "source")
    host = source_data.get("host")
    tool = source_data.get("tool")
    source = EnvelopeSource(
        tool=tool if isinstance(tool, str) and tool else "unknown",
        hostname=host.get("hostname") if isinstance(host, Mapping) else None,
    )

    findings = tuple(
        EnvelopeFinding(
            finding_id=f.get("finding_id"),
            severity=str(f.get("severity") or "info"),
            category=f.get("category"),
            title=f.get("title"),
            auto_fixable=bool(f.get("auto_fixable") or False),
        )
        for f in _mapping_entries(data.get("findings"), "findings")
    )

    return Ok(
        EvidenceEnvelope(
            version=version,
            envelope_id=envelope_id,
            created_at=_parse_dt(data.get("created_at")),
            source=source,
            artifacts=_mapping_entries(data.get("artifacts"), "artifacts"),
            findings=findings,
            metrics=_mapping(data.get("metrics"), "metrics"),
        )
    )


class BundleIngestor:
    """Normalizes inbound bundles into store writes and recorder events.

    Samples are stamped with the store clock at ingest time, so a freshly
    ingested bundle always counts towards the weather. The bundle's own time
    is kept in the ``observed_at`` tag. With ``backfill=True`` samples are
    stamped with the bundle time instead, which turns a sequence of archived
    bundles into a time series for forecasting.
    """

    def __init__(
        self,
        store: MetricsStore,
        recorder: EventRecorder | None = None,
        *,
        backfill: bool = False,
    ) -> None:
        self._store = store
        self._recorder = recorder or log_event
        self._backfill = backfill

    def _stamp(self, observed_at: datetime | None, tags: dict[str, str]) -> datetime:
        if observed_at is None:
            return self._store.now()
        tags["observed_at"] = observed_at.isoformat()
        return observed_at if self._backfill else self._store.now()

    def ingest(
        self,
        bundle: Mapping[str, Any] | RunBundle,
        source: str | None = None,
    ) -> Result[IngestResult]:
        """Ingest a run bundle. Missing ids are replaced with a fresh synthetic id."""
        if isinstance(bundle, Mapping):
            bundle = parse_run_bundle(bundle)
        elif not isinstance(bundle, RunBundle):
            return Err(ErrorKind.UNREADABLE_INPUT, "run bundle must be a mapping")

        bundle_id = bundle.bundle_id or new_bundle_id()
        source = source or bundle.source or DEFAULT_BUNDLE_SOURCE
        tags = {"bundle_id": bundle_id}
        timestamp = self._stamp(bundle.timestamp, tags)

        metrics_count = self._record_snapshot(bundle.snapshot, source, timestamp, tags)

        events_count = 0
        for finding in bundle.findings:
            kind = finding.get("severity") or finding.get("type")
            event_type = (
                EventType.ANOMALY if kind in BUNDLE_ANOMALY_SEVERITIES else EventType.METRIC
            )
            self._recorder(event_type, source, finding)
            events_count += 1

        for change in bundle.applied:
            self._recorder(EventType.CHANGE, source, change)
            events_count += 1

        logger.debug(
            "Ingested bundle %s: %d metrics, %d events", bundle_id, metrics_count, events_count
        )
        return Ok(
            IngestResult(
                metrics_recorded=metrics_count,
                events_recorded=events_count,
                bundle_id=bundle_id,
            )
        )

    def ingest_envelope(
        self,
        envelope: Mapping[str, Any] | EvidenceEnvelope,
        source: str | None = None,
    ) -> Result[IngestResult]:
        """Ingest an evidence envelope. Validation failures write nothing."""
        if isinstance(envelope, Mapping):
            parsed = parse_envelope(envelope)
            if isinstance(parsed, Err):
                logger.warning("Rejected envelope: %s", parsed.error.value)
                return parsed
            envelope = parsed.value
        elif not isinstance(envelope, EvidenceEnvelope):
            return Err(ErrorKind.UNREADABLE_INPUT, "envelope must be a mapping")

        source = source or envelope.source.tool
        tags = {"envelope_id": envelope.envelope_id}
        timestamp = self._stamp(envelope.created_at, tags)

        events_count = 0
        for finding in envelope.findings:
            event_type = (
                EventType.ANOMALY
                if finding.severity in ENVELOPE_ANOMALY_SEVERITIES
                else EventType.METRIC
            )
            self._recorder(
                event_type,
                source,
                {
                    "finding_id": finding.finding_id,
                    "severity": finding.severity,
                    "category": finding.category,
                    "title": finding.title,
                    "auto_fixable": finding.auto_fixable,
                },
            )
            events_count += 1

        metrics_count = self._record_snapshot(envelope.metrics, source, timestamp, tags)

        self._store.record_at(
            ARTIFACT_COUNT_METRIC, len(envelope.artifacts), timestamp, tags=tags, source=source
        )
        metrics_count += 1

        logger.debug(
            "Ingested envelope %s: %d metrics, %d events",
            envelope.envelope_id, metrics_count, events_count,
        )
        return Ok(
            IngestResult(
                metrics_recorded=metrics_count,
                events_recorded=events_count,
                bundle_id=envelope.envelope_id,
            )
        )

    def _record_snapshot(
        self,
        snapshot: Mapping[str, Any],
        source: str,
        timestamp: datetime,
        tags: dict[str, str],
    ) -> int:
        count = 0
        for name, value in snapshot.items():
            if not _is_number(value):
                continue
            self._store.record_at(str(name), value, timestamp, tags=tags, source=source)
            count += 1
        return count
