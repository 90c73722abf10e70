"""Typer CLI for sysobs: weather, ambient payloads, ingestion and forecasts."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from sysobs.config import SysobsConfig
from sysobs.core.ingestion import BundleIngestor
from sysobs.core.observatory import Observatory
from sysobs.core.weather import readings_from
from sysobs.models.bundles import IngestResult
from sysobs.models.enums import WeatherState
from sysobs.models.results import Err
from sysobs.models.weather import WeatherReport

app = typer.Typer(
    name="sysobs",
    help="Ambient system weather — observe, forecast, advise. Never acts.",
    no_args_is_help=True,
)
console = Console(stderr=True)

_STATE_STYLE = {
    WeatherState.CALM: "green",
    WeatherState.WATCH: "yellow",
    WeatherState.ACT: "red",
}

DiskOpt = Annotated[Optional[float], typer.Option("--disk", help="Disk usage percent")]
MemoryOpt = Annotated[Optional[float], typer.Option("--memory", help="Memory usage percent")]
CpuOpt = Annotated[Optional[float], typer.Option("--cpu", help="CPU load percent")]
JsonOpt = Annotated[bool, typer.Option("--json", help="Print JSON to stdout")]


def _config() -> SysobsConfig:
    return SysobsConfig.load()


def _sample_host(obs: Observatory) -> None:
    from sysobs.core.monitor import record_host_metrics

    samples = record_host_metrics(obs.store, obs.config.sample)
    if not samples:
        console.print("[yellow]No host metrics could be read.[/yellow]")


def _emit_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


def _print_weather(report: WeatherReport) -> None:
    from rich.table import Table

    style = _STATE_STYLE[report.state]
    console.print(f"\n[bold {style}]{report.state.value.upper()}[/bold {style}] — {report.summary}")

    table = Table(title="Categories")
    table.add_column("Category", style="bold")
    table.add_column("State")
    table.add_column("Value", justify="right")
    table.add_column("Warn", justify="right")
    table.add_column("Crit", justify="right")
    for name, cat in report.categories.items():
        cat_style = _STATE_STYLE[cat.state]
        table.add_row(
            name,
            f"[{cat_style}]{cat.state.value}[/{cat_style}]",
            f"{cat.metric_value:g}{cat.metric_unit}",
            f"{cat.threshold_warning:g}",
            f"{cat.threshold_critical:g}",
        )
    console.print(table)

    for action in report.actions:
        console.print(f"  {action.label} ({action.priority.value}): {action.description}")


def _ingest_paths(
    ingestor: BundleIngestor, paths: list[Path], source: str | None
) -> tuple[list[IngestResult], int]:
    """Ingest each path, reporting per-path results.

    Returns the successful results and the failure count.
    """
    from sysobs.core.loader import ingest_path

    results: list[IngestResult] = []
    failures = 0
    for path in paths:
        result = ingest_path(ingestor, path, source)
        if isinstance(result, Err):
            failures += 1
            detail = f" ({escape(result.detail)})" if result.detail else ""
            console.print(f"[red]{escape(str(path))}: {result.error.value}[/red]{detail}")
            continue
        r = result.value
        results.append(r)
        console.print(
            f"[green]Ingested[/green] {r.bundle_id}: "
            f"{r.metrics_recorded} metrics, {r.events_recorded} events"
        )
    return results, failures


@app.command()
def weather(
    disk: DiskOpt = None,
    memory: MemoryOpt = None,
    cpu: CpuOpt = None,
    as_json: JsonOpt = False,
) -> None:
    """Show system weather from explicit readings or a live host sample."""
    from sysobs.core.export import weather_to_dict

    with Observatory.create(_config()) as obs:
        readings = readings_from(disk, memory, cpu)
        if readings is None:
            _sample_host(obs)
            report = obs.weather.generate()
        else:
            report = obs.weather.generate_from(readings)

    if as_json:
        _emit_json(weather_to_dict(report))
    else:
        _print_weather(report)


@app.command()
def ambient(
    theme: Annotated[Optional[str], typer.Option("--theme", "-t", help="Theme id")] = None,
    disk: DiskOpt = None,
    memory: MemoryOpt = None,
    cpu: CpuOpt = None,
    as_json: JsonOpt = False,
) -> None:
    """Build the ambient payload for UI surfaces."""
    from sysobs.core.export import payload_to_dict

    with Observatory.create(_config()) as obs:
        theme_id = theme or obs.config.ambient.default_theme
        readings = readings_from(disk, memory, cpu)
        if readings is None:
            _sample_host(obs)
            payload = obs.ambient.generate_with_theme(theme_id)
        else:
            payload = obs.ambient.generate_from(readings, theme_id)

    if as_json:
        _emit_json(payload_to_dict(payload))
        return

    ind = payload.indicator
    console.print(f"\n[bold]{payload.popover.headline}[/bold]")
    console.print(f"  Indicator: {ind.icon} {ind.color} ({ind.animation})")
    if payload.badge.visible:
        console.print(f"  Badge: {payload.badge.count}")
    for line in payload.popover.metrics:
        console.print(f"  {line.label}: {line.value:g}{line.unit} ({line.state.value})")
    for action in payload.quick_actions:
        console.print(f"  → {action.label} ({action.priority.value})")
    console.print(f"  Next refresh in {payload.schedule.refresh_interval_seconds}s")


@app.command()
def themes() -> None:
    """List available ambient themes."""
    from rich.table import Table

    with Observatory.create(_config()) as obs:
        all_themes = obs.themes.all()

    table = Table(title="Themes")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    for state in WeatherState:
        table.add_column(state.value.capitalize())
    table.add_column("Popover metrics")

    for t in all_themes:
        table.add_row(
            t.id,
            t.name,
            *(t.states[s].icon if s in t.states else "—" for s in WeatherState),
            str(t.popover.max_metrics) if t.popover.show_metrics else "—",
        )
    console.print(table)


@app.command()
def ingest(
    paths: Annotated[list[Path], typer.Argument(help="Bundle/envelope JSON files or bundle directories")],
    source: Annotated[Optional[str], typer.Option("--source", "-s", help="Override source identifier")] = None,
    follow: Annotated[bool, typer.Option("--follow", "-f", help="Watch a drop directory for new files")] = False,
    as_json: JsonOpt = False,
) -> None:
    """Ingest run bundles or evidence envelopes, then show the resulting weather."""
    from sysobs.core.export import event_to_dict, ingest_result_to_dict, weather_to_dict

    with Observatory.create(_config()) as obs:
        if follow:
            from sysobs.core.loader import follow_directory

            if len(paths) != 1 or not paths[0].is_dir():
                console.print("[red]--follow needs exactly one directory[/red]")
                raise typer.Exit(1)

            console.print(f"[dim]Watching {paths[0]}... (Ctrl+C to stop)[/dim]")
            try:
                for changed, result in follow_directory(obs.ingestor, paths[0], source):
                    if isinstance(result, Err):
                        console.print(f"[red]{changed.name}: {result.error.value}[/red]")
                        continue
                    console.print(
                        f"[green]{changed.name}[/green]: {result.value.metrics_recorded} metrics, "
                        f"{result.value.events_recorded} events"
                    )
                    _print_weather(obs.weather.generate())
            except KeyboardInterrupt:
                console.print("\n[dim]Stopped.[/dim]")
            return

        results, failures = _ingest_paths(obs.ingestor, paths, source)
        report = obs.weather.generate()
        events = obs.events.recent()

    if as_json:
        _emit_json({
            "results": [ingest_result_to_dict(r) for r in results],
            "events": [event_to_dict(e) for e in events],
            "weather": weather_to_dict(report),
        })
    else:
        _print_weather(report)

    if failures:
        raise typer.Exit(1)


@app.command()
def forecast(
    paths: Annotated[list[Path], typer.Argument(help="Bundle/envelope files to build series from")],
    metric: Annotated[Optional[str], typer.Option("--metric", "-m", help="Metric to analyse")] = None,
    target: Annotated[Optional[float], typer.Option("--target", help="Exhaustion budget")] = None,
    threshold: Annotated[Optional[float], typer.Option("--threshold", help="Breach threshold")] = None,
    as_json: JsonOpt = False,
) -> None:
    """Forecast exhaustion and threshold breaches from a sequence of bundles."""
    from sysobs.core.export import forecast_to_dict, trend_to_dict

    with Observatory.create(_config()) as obs:
        # Stamp samples with bundle times so the files form a series
        _ingest_paths(BundleIngestor(obs.store, obs.events, backfill=True), paths, None)

        if metric is None:
            forecasts = obs.forecasting.generate()
        else:
            if threshold is not None:
                result = obs.forecasting.predict_threshold_breach(metric, threshold)
            elif target is not None:
                result = obs.forecasting.predict_exhaustion(metric, target)
            else:
                result = obs.forecasting.analyze_trend(metric)

            if isinstance(result, Err):
                console.print(f"[yellow]{metric}: {result.error.value}[/yellow]")
                raise typer.Exit(1)

            if target is None and threshold is None:
                trend = result.value
                if as_json:
                    _emit_json(trend_to_dict(trend))
                else:
                    console.print(
                        f"{metric}: {trend.direction.value} at {trend.rate_per_hour:+.2f}/hour "
                        f"(current {trend.current_value:g}, {trend.data_points} points)"
                    )
                return
            forecasts = [result.value]

    if as_json:
        _emit_json([forecast_to_dict(f) for f in forecasts])
        return

    if not forecasts:
        console.print("[dim]No forecasts: no metric trends upward over 3+ samples.[/dim]")
        return

    from rich.table import Table

    table = Table(title="Forecasts")
    table.add_column("Metric", style="bold")
    table.add_column("Type")
    table.add_column("Current", justify="right")
    table.add_column("Predicted", justify="right")
    table.add_column("At")
    table.add_column("Confidence", justify="right")
    for f in forecasts:
        table.add_row(
            f.metric_name,
            f.forecast_type.value,
            f"{f.current_value:g}",
            f"{f.predicted_value:g}",
            f.prediction_at.isoformat(timespec="minutes"),
            f"{f.confidence:.2f}",
        )
    console.print(table)
    for f in forecasts:
        console.print(f"  {f.message}")


@app.command()
def sample(
    count: Annotated[int, typer.Option("--count", "-n", help="Number of samples")] = 3,
    interval: Annotated[float, typer.Option("--interval", "-i", help="Seconds between samples")] = 5.0,
) -> None:
    """Sample this host repeatedly, then show weather and short-term trends."""
    with Observatory.create(_config()) as obs:
        for i in range(count):
            if i:
                time.sleep(interval)
            _sample_host(obs)
            console.print(f"[dim]Sample {i + 1}/{count}[/dim]")

        report = obs.weather.generate()

    _print_weather(report)
    trends = ", ".join(f"{k}: {t.direction.value}" for k, t in report.trends.items())
    console.print(f"  Trends: {trends}")


def main() -> None:
    """Entry point for the sysobs CLI."""
    from sysobs.logging_setup import setup_logging

    setup_logging()
    app()


if __name__ == "__main__":
    main()
