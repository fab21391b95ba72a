"""Readability helpers derived from the theme colors."""

from __future__ import annotations

import string
from dataclasses import dataclass

from .models.document import Theme

BLACK = "#000000"
WHITE = "#FFFFFF"

CONTRAST_THRESHOLD = 0.5
# Above this a primary color is too pale to read as text on white.
ACCENT_TEXT_THRESHOLD = 0.6


def expand_hex(color: str) -> str:
    """Strip the leading ``#`` and expand ``abc`` shorthand to ``aabbcc``."""
    digits = color.strip().removeprefix("#")
    if len(digits) == 3:
        digits = "".join(char * 2 for char in digits)
    return digits


def relative_luminance(color: object) -> float:
    if not isinstance(color, str):
        return 0.0
    digits = expand_hex(color)
    if len(digits) != 6 or not all(char in string.hexdigits for char in digits):
        return 0.0
    red, green, blue = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    return (0.299 * red + 0.587 * green + 0.114 * blue) / 255


def contrast_color(color: object) -> str:
    """Text color to draw on top of a ``color`` background."""
    return BLACK if relative_luminance(color) > CONTRAST_THRESHOLD else WHITE


def safe_accent_text_color(theme: Theme) -> str:
    if relative_luminance(theme.primary_color) > ACCENT_TEXT_THRESHOLD:
        return theme.secondary_color
    return theme.primary_color


@dataclass(frozen=True)
class ThemePalette:
    primary: str
    secondary: str
    font_family: str
    primary_contrast: str
    safe_accent_text: str

    def model_dump(self) -> dict[str, object]:
        return {
            "primaryColor": self.primary,
            "secondaryColor": self.secondary,
            "fontFamily": self.font_family,
            "primaryContrastColor": self.primary_contrast,
            "safeAccentTextColor": self.safe_accent_text,
        }


def derive_palette(theme: Theme) -> ThemePalette:
    return ThemePalette(
        primary=theme.primary_color,
        secondary=theme.secondary_color,
        font_family=theme.font_family,
        primary_contrast=contrast_color(theme.primary_color),
        safe_accent_text=safe_accent_text_color(theme),
    )


__all__ = [
    "ACCENT_TEXT_THRESHOLD",
    "CONTRAST_THRESHOLD",
    "ThemePalette",
    "contrast_color",
    "derive_palette",
    "expand_hex",
    "relative_luminance",
    "safe_accent_text_color",
]
