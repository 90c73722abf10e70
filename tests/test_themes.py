"""Tests for the theme registry."""

from sysobs.core.themes import (
    DEFAULT_THEME,
    MINIMAL_THEME,
    TECH_THEME,
    ThemeRegistry,
    apply_state,
    format_headline,
)
from sysobs.models.ambient import PopoverFormat, Theme, ThemeState
from sysobs.models.enums import WeatherState


class TestRegistry:
    def test_builtin_ids(self):
        assert ThemeRegistry().list_themes() == ["default", "minimal", "tech"]

    def test_get_known(self):
        assert ThemeRegistry().get("tech") is TECH_THEME

    def test_unknown_falls_back_to_default(self):
        assert ThemeRegistry().get("nonexistent").id == "default"

    def test_none_falls_back_to_default(self):
        assert ThemeRegistry().get(None) is DEFAULT_THEME

    def test_custom_theme(self):
        custom = Theme(
            id="mono",
            name="Mono",
            states={WeatherState.CALM: ThemeState(icon=".", color="#000")},
            popover=PopoverFormat(headline_format="{summary}"),
        )
        registry = ThemeRegistry({"mono": custom})
        assert registry.get("mono") is custom
        assert "mono" in registry.list_themes()
        assert len(registry.all()) == 4


class TestApplyState:
    def test_default_states(self):
        assert apply_state(DEFAULT_THEME, WeatherState.CALM).icon == "sun"
        assert apply_state(DEFAULT_THEME, WeatherState.WATCH).animation == "pulse"
        assert apply_state(DEFAULT_THEME, WeatherState.ACT).color == "#F44336"

    def test_accepts_string_state(self):
        assert apply_state(TECH_THEME, "act").icon == "SYS_CRIT"

    def test_invalid_state_falls_back_to_calm(self):
        assert apply_state(MINIMAL_THEME, "stormy").icon == "ok"

    def test_missing_state_falls_back_to_calm(self):
        partial = Theme(
            id="p",
            name="P",
            states={WeatherState.CALM: ThemeState(icon="c", color="#111")},
            popover=PopoverFormat(headline_format="{summary}"),
        )
        assert apply_state(partial, WeatherState.ACT).icon == "c"

    def test_registry_exposes_helpers(self):
        assert ThemeRegistry.apply_state(DEFAULT_THEME, WeatherState.WATCH).icon == "cloud"


class TestFormatHeadline:
    def test_default(self):
        out = format_headline(DEFAULT_THEME, WeatherState.WATCH, "Monitoring disk.")
        assert out == "watch — Monitoring disk."

    def test_minimal(self):
        assert format_headline(MINIMAL_THEME, "calm", "ok") == "[calm] ok"

    def test_tech(self):
        assert format_headline(TECH_THEME, WeatherState.ACT, "x") == ">> act: x"

    def test_braces_in_summary_are_literal(self):
        out = format_headline(TECH_THEME, WeatherState.CALM, "{state} {oops}")
        assert out == ">> calm: {state} {oops}"
