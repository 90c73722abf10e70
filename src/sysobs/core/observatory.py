"""Process-lifetime wiring of the store and every component that reads it."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sysobs.config import SysobsConfig
from sysobs.core.ambient import AmbientPayloadBuilder
from sysobs.core.events import EventLog
from sysobs.core.forecasting import ForecastingEngine
from sysobs.core.ingestion import BundleIngestor
from sysobs.core.store import Clock, MetricsStore
from sysobs.core.themes import ThemeRegistry
from sysobs.core.weather import WeatherEvaluator

logger = logging.getLogger("sysobs.observatory")


@dataclass(frozen=True, slots=True)
class Observatory:
    """One store shared by ingestion, weather, forecasting and ambient output.

    Build one at process start with :meth:`create` and close it at shutdown.
    """

    config: SysobsConfig
    store: MetricsStore
    events: EventLog
    themes: ThemeRegistry
    weather: WeatherEvaluator
    forecasting: ForecastingEngine
    ambient: AmbientPayloadBuilder
    ingestor: BundleIngestor

    @classmethod
    def create(
        cls, config: SysobsConfig | None = None, clock: Clock | None = None
    ) -> Observatory:
        config = config or SysobsConfig.load()
        store = MetricsStore.from_config(config.store, clock=clock)
        events = EventLog()
        themes = ThemeRegistry()
        weather = WeatherEvaluator(store)
        logger.debug("Observatory created (ttl=%ss)", config.store.ttl_seconds)
        return cls(
            config=config,
            store=store,
            events=events,
            themes=themes,
            weather=weather,
            forecasting=ForecastingEngine(store, config.forecast),
            ambient=AmbientPayloadBuilder(weather, themes, config.ambient.default_theme),
            ingestor=BundleIngestor(store, events),
        )

    def __enter__(self) -> Observatory:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self.store.close()
