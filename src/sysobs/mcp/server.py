"""FastMCP server factory exposing read-only observability tools.

The server keeps one :class:`Observatory` (and so one metrics store) for the
lifetime of the process. No tool issues commands or changes host state.
"""

from __future__ import annotations

import logging

from sysobs.config import SysobsConfig
from sysobs.core.observatory import Observatory
from sysobs.core.weather import readings_from
from sysobs.mcp.formatters import (
    format_error,
    format_events,
    format_forecasts,
    format_ingest_result,
    format_payload,
    format_themes,
    format_trend,
    format_weather,
)
from sysobs.models.results import Err

logger = logging.getLogger("sysobs.mcp")


def create_server(config: SysobsConfig | None = None, observatory: Observatory | None = None):
    """Create and return a configured FastMCP server instance.

    Args:
        config: Optional pre-loaded config. If None, loads from cwd.
        observatory: Optional pre-built observatory (tests, embedding).
    """
    from mcp.server.fastmcp import FastMCP

    mcp = FastMCP("sysobs", instructions="Ambient system weather, forecasts and advisories")
    obs = observatory or Observatory.create(config)

    @mcp.tool()
    def sysobs_sample() -> str:
        """Sample this host's disk, memory and CPU usage into the metrics store.

        Observation only: reads psutil counters, changes nothing.
        """
        from sysobs.core.monitor import record_host_metrics

        try:
            samples = record_host_metrics(obs.store, obs.config.sample)
        except OSError as exc:
            logger.warning("Host sampling failed: %s", exc)
            return f"Error sampling host metrics: {exc}"
        if not samples:
            return "No host metrics could be read."
        lines = [f"Recorded {len(samples)} samples:"]
        lines.extend(f"- {s.name}: {s.value:g}" for s in samples)
        return "\n".join(lines)

    @mcp.tool()
    def sysobs_weather(
        disk: float | None = None,
        memory: float | None = None,
        cpu: float | None = None,
    ) -> str:
        """Get the current system weather (calm / watch / act).

        With no arguments the report uses fresh samples from the store. Passing
        any reading evaluates those readings instead.

        Args:
            disk: Disk usage percent (optional)
            memory: Memory usage percent (optional)
            cpu: CPU load percent (optional)
        """
        readings = readings_from(disk, memory, cpu)
        if readings is None:
            return format_weather(obs.weather.generate())
        return format_weather(obs.weather.generate_from(readings))

    @mcp.tool()
    def sysobs_ambient(
        theme: str | None = None,
        disk: float | None = None,
        memory: float | None = None,
        cpu: float | None = None,
    ) -> str:
        """Get the theme-rendered ambient payload for UI surfaces.

        Args:
            theme: Theme id: default, minimal or tech (unknown ids use default)
            disk: Disk usage percent (optional)
            memory: Memory usage percent (optional)
            cpu: CPU load percent (optional)
        """
        theme_id = theme or obs.config.ambient.default_theme
        readings = readings_from(disk, memory, cpu)
        if readings is None:
            payload = obs.ambient.generate_with_theme(theme_id)
        else:
            payload = obs.ambient.generate_from(readings, theme_id)
        return format_payload(payload)

    @mcp.tool()
    def sysobs_forecast(
        metric: str | None = None,
        target: float | None = None,
        threshold: float | None = None,
    ) -> str:
        """Forecast metric exhaustion or threshold breaches from recorded trends.

        Without a metric, returns every forecast sorted by confidence.

        Args:
            metric: Metric name to analyse (optional)
            target: Budget value for an exhaustion forecast (requires metric)
            threshold: Threshold for a breach forecast (requires metric)
        """
        if metric is None:
            return format_forecasts(obs.forecasting.generate())

        if threshold is not None:
            result = obs.forecasting.predict_threshold_breach(metric, threshold)
        elif target is not None:
            result = obs.forecasting.predict_exhaustion(metric, target)
        else:
            trend = obs.forecasting.analyze_trend(metric)
            if isinstance(trend, Err):
                return format_error(trend)
            return format_trend(trend.value)

        if isinstance(result, Err):
            return format_error(result)
        return format_forecasts([result.value], title=f"Forecast: {metric}")

    @mcp.tool()
    def sysobs_ingest(path: str, source: str | None = None) -> str:
        """Ingest a run bundle (file or directory) or an evidence envelope file.

        Envelopes are recognised by their envelope_id field.

        Args:
            path: Path to a JSON file or a bundle directory with manifest.json
            source: Override the source identifier (optional)
        """
        from sysobs.core.loader import ingest_path

        result = ingest_path(obs.ingestor, path, source)
        if isinstance(result, Err):
            return format_error(result)
        return format_ingest_result(result.value)

    @mcp.tool()
    def sysobs_themes() -> str:
        """List the available ambient themes."""
        return format_themes(obs.themes.all())

    @mcp.tool()
    def sysobs_events(event_type: str | None = None, limit: int = 50) -> str:
        """Recent findings and changes recorded during ingestion.

        Args:
            event_type: Filter by type: anomaly, metric or change (optional)
            limit: Max entries to return
        """
        return format_events(obs.events.recent(limit=limit, event_type=event_type))

    return mcp


def main() -> None:
    """Entry point for sysobs-mcp (stdio transport)."""
    from sysobs.logging_setup import setup_logging

    setup_logging()
    server = create_server()
    server.run()


if __name__ == "__main__":
    main()
