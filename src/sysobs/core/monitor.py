"""Host metrics capture via psutil. Observation only."""

from __future__ import annotations

import logging

import psutil

from sysobs.config import SampleConfig
from sysobs.core.store import MetricsStore
from sysobs.models.metrics import Sample

logger = logging.getLogger("sysobs.monitor")

HOST_SOURCE = "host"


def capture_host_metrics(
    cpu_interval: float = 0.5, disk_path: str = "/"
) -> dict[str, float]:
    """Point-in-time disk, memory and CPU usage percentages for this host.

    Metrics that cannot be read are left out rather than reported as zero.
    """
    readings: dict[str, float] = {}

    try:
        readings["disk_usage_percent"] = round(psutil.disk_usage(disk_path).percent, 1)
    except OSError as exc:
        logger.warning("Cannot read disk usage for %s: %s", disk_path, exc)

    try:
        readings["memory_usage_percent"] = round(psutil.virtual_memory().percent, 1)
    except (psutil.AccessDenied, OSError):
        logger.warning("Cannot read virtual memory statistics")

    try:
        readings["cpu_load_percent"] = round(psutil.cpu_percent(interval=cpu_interval), 1)
    except (psutil.AccessDenied, OSError):
        logger.warning("Cannot read CPU utilisation")

    return readings


def record_host_metrics(
    store: MetricsStore, config: SampleConfig | None = None
) -> list[Sample]:
    """Capture host metrics and record each one in the store."""
    config = config or SampleConfig()
    readings = capture_host_metrics(config.cpu_sample_interval, config.disk_path)
    samples = []
    for name, value in readings.items():
        tags = {"path": config.disk_path} if name == "disk_usage_percent" else None
        samples.append(store.record(name, value, tags=tags, source=HOST_SOURCE))
    logger.debug("Recorded %d host samples", len(samples))
    return samples

