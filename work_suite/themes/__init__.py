"""
Content themes: the preset registry and saved custom themes.
"""

from .presets import (
    FONT_PRESETS,
    PRESETS,
    css_variables,
    font_stylesheet_url,
    get_font_presets,
    get_preset,
    get_presets,
    normalize_custom_theme,
)

__all__ = [
    "FONT_PRESETS",
    "PRESETS",
    "css_variables",
    "font_stylesheet_url",
    "get_font_presets",
    "get_preset",
    "get_presets",
    "normalize_custom_theme",
]
