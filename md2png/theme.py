from __future__ import annotations

from dataclasses import dataclass

from .config import RenderConfigError

RGB = tuple[int, int, int]


class ThemeError(RenderConfigError):
    pass


@dataclass(frozen=True)
class Theme:
    background: RGB
    foreground: RGB
    code_background: RGB
    quote_bar: RGB
    rule: RGB
    link: RGB
    warning: RGB


LIGHT_THEME = Theme(
    background=(0xFF, 0xFF, 0xFF),
    foreground=(0x11, 0x11, 0x11),
    code_background=(0xF5, 0xF5, 0xF7),
    quote_bar=(0xCC, 0xCC, 0xCC),
    rule=(0xDD, 0xDD, 0xDD),
    link=(0x00, 0x55, 0xCC),
    warning=(0xCC, 0x55, 0x00),
)

DARK_THEME = Theme(
    background=(0x12, 0x12, 0x14),
    foreground=(0xEE, 0xEE, 0xF0),
    code_background=(0x1E, 0x1E, 0x22),
    quote_bar=(0x44, 0x44, 0x48),
    rule=(0x33, 0x33, 0x36),
    link=(0x4A, 0x90, 0xE2),
    warning=(0xF2, 0x91, 0x5B),
)

_THEMES = {
    "": LIGHT_THEME,
    "light": LIGHT_THEME,
    "dark": DARK_THEME,
}


def theme_by_name(name: str | None) -> Theme:
    key = str(name or "").strip().lower()
    theme = _THEMES.get(key)
    if theme is None:
        raise ThemeError(f"unknown theme: {name}")
    return theme


def resolve_theme(theme: Theme | str | None) -> Theme:
    if isinstance(theme, Theme):
        return theme
    return theme_by_name(theme)
