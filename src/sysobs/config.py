"""Layered configuration: .sysobs/config.toml -> SYSOBS_* env vars -> defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib  # 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """In-memory metrics store settings."""

    ttl_seconds: float = 3600.0
    max_points_per_metric: int = 1000


@dataclass(frozen=True, slots=True)
class ForecastConfig:
    """Targets used when forecasts are derived automatically."""

    exhaustion_target: float = 100.0
    breach_threshold: float = 90.0


@dataclass(frozen=True, slots=True)
class AmbientConfig:
    default_theme: str = "default"


@dataclass(frozen=True, slots=True)
class SampleConfig:
    """Host sampling settings."""

    cpu_sample_interval: float = 0.5
    disk_path: str = "/"


@dataclass(frozen=True, slots=True)
class SysobsConfig:
    """Top-level configuration container."""

    project_path: Path = field(default_factory=Path.cwd)
    store: StoreConfig = field(default_factory=StoreConfig)
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    ambient: AmbientConfig = field(default_factory=AmbientConfig)
    sample: SampleConfig = field(default_factory=SampleConfig)

    @property
    def sysobs_dir(self) -> Path:
        return self.project_path / ".sysobs"

    @property
    def config_path(self) -> Path:
        return self.sysobs_dir / "config.toml"

    @classmethod
    def load(cls, project_path: Path | None = None) -> SysobsConfig:
        """Load config with layering: TOML file -> env vars -> defaults."""
        project = Path(project_path) if project_path else Path.cwd()
        toml_path = project / ".sysobs" / "config.toml"

        toml_data: dict = {}
        if toml_path.is_file():
            with open(toml_path, "rb") as f:
                toml_data = tomllib.load(f)

        store_data = toml_data.get("store", {})
        forecast_data = toml_data.get("forecast", {})
        ambient_data = toml_data.get("ambient", {})
        sample_data = toml_data.get("sample", {})

        # Use literal defaults (slots=True prevents class-level attribute access)
        _store_defaults = StoreConfig()
        _forecast_defaults = ForecastConfig()
        _ambient_defaults = AmbientConfig()
        _sample_defaults = SampleConfig()

        store = StoreConfig(
            ttl_seconds=float(
                os.environ.get(
                    "SYSOBS_TTL_SECONDS",
                    store_data.get("ttl_seconds", _store_defaults.ttl_seconds),
                )
            ),
            max_points_per_metric=int(
                os.environ.get(
                    "SYSOBS_MAX_POINTS",
                    store_data.get(
                        "max_points_per_metric",
                        _store_defaults.max_points_per_metric,
                    ),
                )
            ),
        )

        forecast = ForecastConfig(
            exhaustion_target=float(
                os.environ.get(
                    "SYSOBS_EXHAUSTION_TARGET",
                    forecast_data.get(
                        "exhaustion_target", _forecast_defaults.exhaustion_target
                    ),
                )
            ),
            breach_threshold=float(
                os.environ.get(
                    "SYSOBS_BREACH_THRESHOLD",
                    forecast_data.get(
                        "breach_threshold", _forecast_defaults.breach_threshold
                    ),
                )
            ),
        )

        ambient = AmbientConfig(
            default_theme=os.environ.get(
                "SYSOBS_THEME",
                ambient_data.get("default_theme", _ambient_defaults.default_theme),
            ),
        )

        sample = SampleConfig(
            cpu_sample_interval=float(
                os.environ.get(
                    "SYSOBS_CPU_SAMPLE_INTERVAL",
                    sample_data.get(
                        "cpu_sample_interval", _sample_defaults.cpu_sample_interval
                    ),
                )
            ),
            disk_path=os.environ.get(
                "SYSOBS_DISK_PATH",
                sample_data.get("disk_path", _sample_defaults.disk_path),
            ),
        )

        return cls(
            project_path=project,
            store=store,
            forecast=forecast,
            ambient=ambient,
            sample=sample,
        )
