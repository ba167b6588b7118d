"""Catppuccin themes and config.yml theme selection."""

from __future__ import annotations

from typing import NamedTuple

from textual.theme import Theme

from ..models import ThemeConfig


class Palette(NamedTuple):
    base: str
    mantle: str
    surface1: str
    overlay0: str
    text: str
    blue: str
    mauve: str
    red: str
    green: str
    yellow: str


CATPPUCCIN: dict[str, Palette] = {
    "latte": Palette(
        "#eff1f5", "#e6e9ef", "#bcc0cc", "#9ca0b0", "#4c4f69",
        "#1e66f5", "#8839ef", "#d20f39", "#40a02b", "#df8e1d",
    ),
    "frappe": Palette(
        "#303446", "#292c3c", "#51576d", "#737994", "#c6d0f5",
        "#8caaee", "#ca9ee6", "#e78284", "#a6d189", "#e5c890",
    ),
    "macchiato": Palette(
        "#24273a", "#1e2030", "#494d64", "#6e738d", "#cad3f5",
        "#8aadf4", "#c6a0f6", "#ed8796", "#a6da95", "#eed49f",
    ),
    "mocha": Palette(
        "#1e1e2e", "#181825", "#45475a", "#6c7086", "#cdd6f4",
        "#89b4fa", "#cba6f7", "#f38ba8", "#a6e3a1", "#f9e2af",
    ),
}

# Theme used for mode "system": the terminal's own ANSI colors
SYSTEM_THEME = "textual-ansi"


def _build_theme(flavor: str, palette: Palette) -> Theme:
    return Theme(
        name=f"ttrak-{flavor}",
        primary=palette.blue,
        secondary=palette.mauve,
        accent=palette.blue,
        warning=palette.yellow,
        error=palette.red,
        success=palette.green,
        foreground=palette.text,
        background=palette.base,
        surface=palette.mantle,
        panel=palette.surface1,
        dark=flavor != "latte",
        variables={"text-muted": palette.overlay0},
    )


def build_themes() -> list[Theme]:
    """One registered theme per Catppuccin flavor."""
    return [_build_theme(flavor, palette) for flavor, palette in CATPPUCCIN.items()]


def theme_name(config: ThemeConfig) -> str:
    """Name of the theme to activate for the configured mode."""
    if config.mode == "system":
        return SYSTEM_THEME
    if config.mode == "catppuccin":
        return f"ttrak-{config.flavor}"
    # auto: the terminal background can't be queried, assume a dark one
    return "ttrak-mocha"
