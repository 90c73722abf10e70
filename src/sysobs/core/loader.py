"""File and directory adapters that parse JSON and hand it to the ingestor."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

from sysobs.core.ingestion import BundleIngestor
from sysobs.models.bundles import IngestResult
from sysobs.models.results import Err, ErrorKind, Result

logger = logging.getLogger("sysobs.loader")

# Optional section files merged into a bundle directory's manifest
BUNDLE_SECTIONS = ("snapshot", "findings", "plan", "applied")


def _read_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _load_mapping(path: Path) -> dict[str, Any] | Err:
    try:
        data = _read_json(path)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return Err(ErrorKind.UNREADABLE_INPUT, f"{path}: {exc}")
    if not isinstance(data, dict):
        return Err(ErrorKind.UNREADABLE_INPUT, f"{path}: top-level JSON must be an object")
    return data


def is_envelope(data: dict[str, Any]) -> bool:
    """Envelopes are recognised by their ``envelope_id`` field."""
    return "envelope_id" in data


def ingest_file(
    ingestor: BundleIngestor, path: Path | str, source: str | None = None
) -> Result[IngestResult]:
    """Ingest a run bundle JSON file."""
    data = _load_mapping(Path(path))
    if isinstance(data, Err):
        return data
    return ingestor.ingest(data, source=source)


def ingest_envelope_file(
    ingestor: BundleIngestor, path: Path | str, source: str | None = None
) -> Result[IngestResult]:
    """Ingest an evidence envelope JSON file."""
    data = _load_mapping(Path(path))
    if isinstance(data, Err):
        return data
    return ingestor.ingest_envelope(data, source=source)


def ingest_directory(
    ingestor: BundleIngestor, dir_path: Path | str, source: str | None = None
) -> Result[IngestResult]:
    """Ingest a bundle directory: ``manifest.json`` plus optional section files.

    Section files that are missing or unparseable are skipped.
    """
    root = Path(dir_path)
    bundle = _load_mapping(root / "manifest.json")
    if isinstance(bundle, Err):
        return bundle

    for section in BUNDLE_SECTIONS:
        section_path = root / f"{section}.json"
        if not section_path.is_file():
            continue
        try:
            bundle[section] = _read_json(section_path)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Skipping %s: %s", section_path, exc)

    return ingestor.ingest(bundle, source=source)


def ingest_path(
    ingestor: BundleIngestor, path: Path | str, source: str | None = None
) -> Result[IngestResult]:
    """Ingest a bundle directory, a bundle file or an envelope file."""
    path = Path(path)
    if path.is_dir():
        return ingest_directory(ingestor, path, source)

    data = _load_mapping(path)
    if isinstance(data, Err):
        return data
    if is_envelope(data):
        return ingestor.ingest_envelope(data, source=source)
    return ingestor.ingest(data, source=source)


def follow_directory(
    ingestor: BundleIngestor,
    dir_path: Path | str,
    source: str | None = None,
) -> Generator[tuple[Path, Result[IngestResult]], None, None]:
    """Watch a drop directory and ingest each JSON file that appears. Requires watchfiles."""
    try:
        from watchfiles import Change, watch
    except ImportError:
        raise ImportError(
            "watchfiles is required for follow mode. Install with: pip install sysobs[watch]"
        )

    root = Path(dir_path)
    if not root.is_dir():
        return

    seen: dict[Path, int] = {p: p.stat().st_mtime_ns for p in root.glob("*.json")}

    for changes in watch(root):
        for change_type, changed_path in sorted(changes, key=lambda c: c[1]):
            changed = Path(changed_path)
            if change_type is Change.deleted or changed.suffix != ".json":
                continue
            try:
                mtime = changed.stat().st_mtime_ns
            except OSError:
                continue
            if seen.get(changed) == mtime:
                continue
            seen[changed] = mtime
            yield changed, ingest_path(ingestor, changed, source)
