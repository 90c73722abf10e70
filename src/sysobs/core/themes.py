"""Theme packs for the ambient UI.

Built-in themes:

- ``default`` - sun/cloud/storm with standard material colors
- ``minimal`` - text-only, monochrome, no animations, no popover metrics
- ``tech`` - terminal-style green/amber/red, no animations
"""

from __future__ import annotations

from collections.abc import Mapping

from sysobs.models.ambient import PopoverFormat, Theme, ThemeState
from sysobs.models.enums import WeatherState

DEFAULT_THEME_ID = "default"

DEFAULT_THEME = Theme(
    id="default",
    name="Default",
    states={
        WeatherState.CALM: ThemeState(icon="sun", color="#4CAF50", animation="none"),
        WeatherState.WATCH: ThemeState(icon="cloud", color="#FF9800", animation="pulse"),
        WeatherState.ACT: ThemeState(icon="storm", color="#F44336", animation="bounce"),
    },
    popover=PopoverFormat(
        headline_format="{state} — {summary}",
        show_metrics=True,
        max_metrics=4,
    ),
)

MINIMAL_THEME = Theme(
    id="minimal",
    name="Minimal",
    states={
        WeatherState.CALM: ThemeState(icon="ok", color="#808080"),
        WeatherState.WATCH: ThemeState(icon="warn", color="#808080"),
        WeatherState.ACT: ThemeState(icon="crit", color="#808080"),
    },
    popover=PopoverFormat(
        headline_format="[{state}] {summary}",
        show_metrics=False,
        max_metrics=0,
    ),
)

TECH_THEME = Theme(
    id="tech",
    name="Tech",
    states={
        WeatherState.CALM: ThemeState(icon="SYS_OK", color="#00FF00"),
        WeatherState.WATCH: ThemeState(icon="SYS_WARN", color="#FFBF00"),
        WeatherState.ACT: ThemeState(icon="SYS_CRIT", color="#FF0000"),
    },
    popover=PopoverFormat(
        headline_format=">> {state}: {summary}",
        show_metrics=True,
        max_metrics=6,
    ),
)

BUILTIN_THEMES: tuple[Theme, ...] = (DEFAULT_THEME, MINIMAL_THEME, TECH_THEME)


def apply_state(theme: Theme, state: WeatherState | str) -> ThemeState:
    """Visual triple for ``state``, falling back to the theme's calm entry."""
    try:
        key = WeatherState(state)
    except ValueError:
        return theme.states[WeatherState.CALM]
    return theme.states.get(key, theme.states[WeatherState.CALM])


def format_headline(theme: Theme, state: WeatherState | str, summary: str) -> str:
    state_text = state.value if isinstance(state, WeatherState) else str(state)
    return (
        theme.popover.headline_format
        .replace("{state}", state_text)
        .replace("{summary}", summary)
    )


class ThemeRegistry:
    """Static lookup from theme id to :class:`Theme`. Lookup never fails."""

    def __init__(self, themes: Mapping[str, Theme] | None = None) -> None:
        self._themes: dict[str, Theme] = {t.id: t for t in BUILTIN_THEMES}
        if themes:
            self._themes.update(themes)

    def get(self, theme_id: str | None) -> Theme:
        """Theme for ``theme_id``, or the default theme when unknown."""
        theme = self._themes.get(theme_id) if theme_id else None
        return theme or self._themes[DEFAULT_THEME_ID]

    def list_themes(self) -> list[str]:
        return list(self._themes)

    def all(self) -> list[Theme]:
        return list(self._themes.values())

    apply_state = staticmethod(apply_state)
    format_headline = staticmethod(format_headline)
