"""Tests for theme resolution."""

import pytest
from jsonsite.core.theme import DEFAULT_THEME, Theme, resolve_theme


class TestResolveTheme:
    """Tests for resolve_theme()."""

    def test__missing_cookie__is_light(self) -> None:
        """No cookie resolves to light."""
        assert resolve_theme(None) is Theme.LIGHT

    @pytest.mark.parametrize("value", ["blue", "", "DARK", "Light", " dark"])
    def test__invalid_value__is_light(self, value: str) -> None:
        """Anything but an exact known value resolves to light."""
        assert resolve_theme(value) is DEFAULT_THEME

    @pytest.mark.parametrize(("value", "expected"), [("light", Theme.LIGHT), ("dark", Theme.DARK)])
    def test__valid_value__is_kept(self, value: str, expected: Theme) -> None:
        """Known values resolve to themselves."""
        assert resolve_theme(value) is expected


class TestThemeToggled:
    """Tests for Theme.toggled()."""

    def test__toggle__flips_both_ways(self) -> None:
        """Toggling flips light and dark."""
        assert Theme.LIGHT.toggled() is Theme.DARK
        assert Theme.DARK.toggled() is Theme.LIGHT
