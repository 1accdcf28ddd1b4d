"""
Content theme presets.

Themes style rendered content (slides, notes, markdown, timeline events),
not the app chrome. Each theme has fonts, 14 colors and 5 style values and
is rendered to ``--content-*`` CSS custom properties.

Keys use the same camelCase names the editors send and receive.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Tuple

COLOR_KEYS: Tuple[str, ...] = (
    "background",
    "backgroundSolid",
    "text",
    "heading",
    "accent",
    "accentAlt",
    "muted",
    "link",
    "codeBg",
    "codeText",
    "blockquoteBorder",
    "blockquoteBg",
    "tableBorder",
    "tableHeaderBg",
)

STYLE_KEYS: Tuple[str, ...] = (
    "headingWeight",
    "headingLetterSpacing",
    "bodyLineHeight",
    "paragraphSpacing",
    "borderRadius",
)

# CSS property suffix for each theme value
CSS_VARIABLES: Tuple[Tuple[str, str, str], ...] = (
    ("fonts", "heading", "font-heading"),
    ("fonts", "body", "font-body"),
    ("fonts", "mono", "font-mono"),
    ("colors", "background", "bg"),
    ("colors", "backgroundSolid", "bg-solid"),
    ("colors", "text", "text"),
    ("colors", "heading", "heading"),
    ("colors", "accent", "accent"),
    ("colors", "accentAlt", "accent-alt"),
    ("colors", "muted", "muted"),
    ("colors", "link", "link"),
    ("colors", "codeBg", "code-bg"),
    ("colors", "codeText", "code-text"),
    ("colors", "blockquoteBorder", "blockquote-border"),
    ("colors", "blockquoteBg", "blockquote-bg"),
    ("colors", "tableBorder", "table-border"),
    ("colors", "tableHeaderBg", "table-header-bg"),
    ("styles", "headingWeight", "heading-weight"),
    ("styles", "headingLetterSpacing", "heading-letter-spacing"),
    ("styles", "bodyLineHeight", "body-line-height"),
    ("styles", "paragraphSpacing", "paragraph-spacing"),
    ("styles", "borderRadius", "border-radius"),
)

DEFAULT_FONTS = {
    "heading": "'Space Grotesk', sans-serif",
    "body": "'Inter', sans-serif",
    "mono": "'JetBrains Mono', monospace",
}

DEFAULT_STYLES = {
    "headingWeight": 700,
    "headingLetterSpacing": "-0.02em",
    "bodyLineHeight": 1.7,
    "paragraphSpacing": "1.25em",
    "borderRadius": "8px",
}


def _preset(
    name: str,
    category: str,
    description: str,
    fonts: Tuple[str, str, str],
    colors: Tuple[str, ...],
    styles: Tuple[Any, ...],
) -> Dict[str, Any]:
    return {
        "name": name,
        "category": category,
        "description": description,
        "fonts": dict(zip(("heading", "body", "mono"), fonts)),
        "colors": dict(zip(COLOR_KEYS, colors)),
        "styles": dict(zip(STYLE_KEYS, styles)),
    }


PRESETS: Dict[str, Dict[str, Any]] = {
    # Dark
    "midnight": _preset(
        "Midnight",
        "dark",
        "Deep blue-black with crisp white text",
        ("'Space Grotesk', sans-serif", "'Inter', sans-serif", "'JetBrains Mono', monospace"),
        (
            "linear-gradient(135deg, #0f0f23 0%, #1a1a3e 50%, #0d0d1a 100%)",
            "#0f0f23", "#e8e8e8", "#ffffff", "#e94560", "#ff6b6b", "#8892b0", "#64ffda",
            "rgba(255, 255, 255, 0.08)", "#e8e8e8", "#e94560", "rgba(233, 69, 96, 0.1)",
            "#2a2a4a", "rgba(255, 255, 255, 0.05)",
        ),
        (700, "-0.02em", 1.7, "1.25em", "8px"),
    ),
    "aurora": _preset(
        "Aurora",
        "dark",
        "Northern lights inspired with cyan accents",
        ("'Space Grotesk', sans-serif", "'Inter', sans-serif", "'Fira Code', monospace"),
        (
            "linear-gradient(135deg, #1a1a2e 0%, #16213e 30%, #0f3460 70%, #1a1a2e 100%)",
            "#1a1a2e", "#e0e0e0", "#64ffda", "#64ffda", "#00bfa5", "#8892b0", "#64ffda",
            "rgba(100, 255, 218, 0.1)", "#64ffda", "#64ffda", "rgba(100, 255, 218, 0.05)",
            "#2a3f5f", "rgba(100, 255, 218, 0.1)",
        ),
        (600, "-0.01em", 1.75, "1.5em", "12px"),
    ),
    "ember": _preset(
        "Ember",
        "dark",
        "Warm orange and amber tones",
        ("'Outfit', sans-serif", "'Source Sans 3', sans-serif", "'JetBrains Mono', monospace"),
        (
            "linear-gradient(135deg, #1c1917 0%, #292524 100%)",
            "#1c1917", "#fafaf9", "#fbbf24", "#f59e0b", "#fb923c", "#a8a29e", "#fbbf24",
            "rgba(251, 191, 36, 0.1)", "#fbbf24", "#f59e0b", "rgba(245, 158, 11, 0.1)",
            "#44403c", "rgba(251, 191, 36, 0.1)",
        ),
        (700, "-0.02em", 1.7, "1.25em", "10px"),
    ),
    "forest": _preset(
        "Forest",
        "dark",
        "Deep greens with natural warmth",
        ("'DM Sans', sans-serif", "'IBM Plex Sans', sans-serif", "'IBM Plex Mono', monospace"),
        (
            "linear-gradient(135deg, #1a2f1a 0%, #2d4a2d 40%, #1e3a1e 100%)",
            "#1a2f1a", "#e8f5e9", "#81c784", "#4caf50", "#66bb6a", "#a5d6a7", "#81c784",
            "rgba(76, 175, 80, 0.12)", "#a5d6a7", "#4caf50", "rgba(76, 175, 80, 0.08)",
            "#2d4a2d", "rgba(76, 175, 80, 0.1)",
        ),
        (600, "-0.01em", 1.8, "1.5em", "8px"),
    ),
    "ocean": _preset(
        "Ocean",
        "dark",
        "Deep sea blues with cyan highlights",
        ("'Plus Jakarta Sans', sans-serif", "'Inter', sans-serif", "'Fira Code', monospace"),
        (
            "linear-gradient(135deg, #0c2340 0%, #134074 40%, #13678a 100%)",
            "#0c2340", "#e0f7fa", "#4dd0e1", "#00bcd4", "#26c6da", "#80deea", "#4dd0e1",
            "rgba(77, 208, 225, 0.12)", "#80deea", "#00bcd4", "rgba(0, 188, 212, 0.08)",
            "#1a5276", "rgba(77, 208, 225, 0.1)",
        ),
        (700, "-0.02em", 1.75, "1.25em", "12px"),
    ),
    "neon": _preset(
        "Neon",
        "dark",
        "Cyberpunk vibes with hot pink and cyan",
        ("'Orbitron', sans-serif", "'Rajdhani', sans-serif", "'Share Tech Mono', monospace"),
        (
            "linear-gradient(135deg, #0a0a0a 0%, #1a0a2e 50%, #0a0a0a 100%)",
            "#0a0a0a", "#ffffff", "#ff00ff", "#00ffff", "#ff69b4", "#ff69b4", "#00ffff",
            "rgba(255, 0, 255, 0.15)", "#00ffff", "#ff00ff", "rgba(255, 0, 255, 0.1)",
            "#330033", "rgba(255, 0, 255, 0.15)",
        ),
        (700, "0.05em", 1.6, "1.25em", "4px"),
    ),
    "terminal": _preset(
        "Terminal",
        "dark",
        "Green on black, hacker aesthetic",
        ("'JetBrains Mono', monospace",) * 3,
        (
            "#0d0d0d",
            "#0d0d0d", "#33ff33", "#33ff33", "#33ff33", "#00cc00", "#1a991a", "#66ff66",
            "#1a1a1a", "#33ff33", "#33ff33", "rgba(51, 255, 51, 0.05)",
            "#1a4d1a", "rgba(51, 255, 51, 0.1)",
        ),
        (700, "0", 1.5, "1em", "0px"),
    ),
    # Light
    "paper": _preset(
        "Paper",
        "light",
        "Classic editorial with warm cream tones",
        ("'Playfair Display', serif", "'Source Serif 4', serif", "'Fira Code', monospace"),
        (
            "linear-gradient(135deg, #f5f5dc 0%, #faf8ef 50%, #f5f5dc 100%)",
            "#faf8ef", "#3d3d3d", "#1a1a1a", "#8b4513", "#a0522d", "#666666", "#8b4513",
            "rgba(139, 69, 19, 0.08)", "#8b4513", "#8b4513", "rgba(139, 69, 19, 0.05)",
            "#d4c4a8", "rgba(139, 69, 19, 0.08)",
        ),
        (700, "-0.01em", 1.85, "1.5em", "4px"),
    ),
    "minimal": _preset(
        "Minimal",
        "light",
        "Clean and simple black on white",
        ("'Inter', sans-serif", "'Inter', sans-serif", "'SF Mono', monospace"),
        (
            "#ffffff",
            "#ffffff", "#333333", "#111111", "#0066cc", "#0052a3", "#666666", "#0066cc",
            "#f4f4f4", "#333333", "#dddddd", "#f9f9f9",
            "#e5e5e5", "#f4f4f4",
        ),
        (600, "-0.02em", 1.7, "1.25em", "6px"),
    ),
    "snow": _preset(
        "Snow",
        "light",
        "Cool blue-gray tones on white",
        ("'DM Sans', sans-serif", "'IBM Plex Sans', sans-serif", "'IBM Plex Mono', monospace"),
        (
            "linear-gradient(135deg, #f0f4f8 0%, #ffffff 50%, #f0f4f8 100%)",
            "#f8fafc", "#334155", "#0f172a", "#3b82f6", "#2563eb", "#64748b", "#3b82f6",
            "#f1f5f9", "#475569", "#3b82f6", "#f8fafc",
            "#e2e8f0", "#f1f5f9",
        ),
        (700, "-0.02em", 1.75, "1.5em", "8px"),
    ),
    "rose": _preset(
        "Rosé",
        "light",
        "Soft pink accents on cream",
        ("'Fraunces', serif", "'Nunito', sans-serif", "'Fira Code', monospace"),
        (
            "linear-gradient(135deg, #fff5f5 0%, #fffafa 50%, #fff5f5 100%)",
            "#fffafa", "#4a4a4a", "#831843", "#be185d", "#db2777", "#9ca3af", "#be185d",
            "rgba(190, 24, 93, 0.08)", "#be185d", "#f472b6", "rgba(244, 114, 182, 0.08)",
            "#fce7f3", "rgba(190, 24, 93, 0.05)",
        ),
        (600, "-0.01em", 1.8, "1.5em", "12px"),
    ),
    "typewriter": _preset(
        "Typewriter",
        "light",
        "Monospace everything, vintage feel",
        ("'Courier Prime', monospace",) * 3,
        (
            "#f4f1ea",
            "#f4f1ea", "#2c2c2c", "#1a1a1a", "#c41e3a", "#a01830", "#666666", "#c41e3a",
            "#e8e4db", "#2c2c2c", "#2c2c2c", "#ebe7de",
            "#d4d0c7", "#e8e4db",
        ),
        (700, "0", 1.65, "1.5em", "0px"),
    ),
}

FONT_PRESETS: Dict[str, Dict[str, str]] = {
    "modern-sans": {
        "name": "Modern Sans",
        "heading": "'Space Grotesk', sans-serif",
        "body": "'Inter', sans-serif",
        "mono": "'JetBrains Mono', monospace",
        "googleFonts": "Space+Grotesk:wght@400;500;600;700&family=Inter:wght@400;500;600&family=JetBrains+Mono:wght@400;500",
    },
    "classic-serif": {
        "name": "Classic Serif",
        "heading": "'Playfair Display', serif",
        "body": "'Source Serif 4', serif",
        "mono": "'Fira Code', monospace",
        "googleFonts": "Playfair+Display:wght@400;500;600;700&family=Source+Serif+4:wght@400;500;600&family=Fira+Code:wght@400;500",
    },
    "editorial": {
        "name": "Editorial",
        "heading": "'Fraunces', serif",
        "body": "'Nunito', sans-serif",
        "mono": "'IBM Plex Mono', monospace",
        "googleFonts": "Fraunces:wght@400;600;700&family=Nunito:wght@400;500;600&family=IBM+Plex+Mono:wght@400;500",
    },
    "technical": {
        "name": "Technical",
        "heading": "'IBM Plex Sans', sans-serif",
        "body": "'IBM Plex Sans', sans-serif",
        "mono": "'IBM Plex Mono', monospace",
        "googleFonts": "IBM+Plex+Sans:wght@400;500;600;700&family=IBM+Plex+Mono:wght@400;500",
    },
    "geometric": {
        "name": "Geometric",
        "heading": "'DM Sans', sans-serif",
        "body": "'DM Sans', sans-serif",
        "mono": "'DM Mono', monospace",
        "googleFonts": "DM+Sans:wght@400;500;600;700&family=DM+Mono:wght@400;500",
    },
    "humanist": {
        "name": "Humanist",
        "heading": "'Outfit', sans-serif",
        "body": "'Source Sans 3', sans-serif",
        "mono": "'Source Code Pro', monospace",
        "googleFonts": "Outfit:wght@400;500;600;700&family=Source+Sans+3:wght@400;500;600&family=Source+Code+Pro:wght@400;500",
    },
}


def get_presets(category: Optional[str] = None) -> List[Dict[str, Any]]:
    """All presets with their ids, optionally only one category."""
    return [
        {"id": preset_id, **copy.deepcopy(theme)}
        for preset_id, theme in PRESETS.items()
        if category is None or theme["category"] == category
    ]


def get_preset(preset_id: str) -> Optional[Dict[str, Any]]:
    theme = PRESETS.get(preset_id)
    if theme is None:
        return None
    return {"id": preset_id, **copy.deepcopy(theme)}


def get_font_presets() -> List[Dict[str, str]]:
    return [{"id": preset_id, **preset} for preset_id, preset in FONT_PRESETS.items()]


def _first(*values: Any) -> Any:
    """First truthy value, like a chain of ``or`` over possibly missing keys."""
    for value in values:
        if value:
            return value
    return values[-1]


def normalize_custom_theme(theme: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a theme-designer payload into a complete theme.

    Designer colors may be objects like ``{"hex": "#fff", "lightness": 90}``;
    those are flattened to their hex value. Anything missing falls back to
    related colors first and then to fixed defaults.
    """
    colors: Dict[str, Any] = {}
    for key, value in (theme.get("colors") or {}).items():
        colors[key] = value["hex"] if isinstance(value, dict) and value.get("hex") else value

    c = colors.get
    normalized_colors = {
        "background": _first(c("background"), c("backgroundSolid"), "#1a1a2e"),
        "backgroundSolid": _first(c("backgroundSolid"), c("background"), "#1a1a2e"),
        "text": _first(c("text"), "#e8e8e8"),
        "heading": _first(c("heading"), c("text"), "#ffffff"),
        "accent": _first(c("accent"), "#6366f1"),
        "accentAlt": _first(c("accentAlt"), c("accent"), "#818cf8"),
        "muted": _first(c("muted"), "#8888a0"),
        "link": _first(c("link"), c("accent"), "#64ffda"),
        "codeBg": _first(c("codeBg"), "rgba(255, 255, 255, 0.08)"),
        "codeText": _first(c("codeText"), c("text"), "#e8e8e8"),
        "blockquoteBorder": _first(c("blockquoteBorder"), c("accent"), "#6366f1"),
        "blockquoteBg": _first(c("blockquoteBg"), "rgba(99, 102, 241, 0.1)"),
        "tableBorder": _first(c("tableBorder"), "#2a2a4a"),
        "tableHeaderBg": _first(c("tableHeaderBg"), "rgba(255, 255, 255, 0.05)"),
    }

    fonts = theme.get("fonts") or {}
    styles = theme.get("styles") or {}
    return {
        "name": theme.get("name") or "Custom Theme",
        "category": "custom",
        "description": "Custom theme created in Theme Designer",
        "fonts": {key: _first(fonts.get(key), default) for key, default in DEFAULT_FONTS.items()},
        "colors": normalized_colors,
        "styles": {key: _first(styles.get(key), default) for key, default in DEFAULT_STYLES.items()},
    }


def css_variables(theme: Dict[str, Any]) -> str:
    """Render a complete theme as ``--content-*`` declarations, one per line."""
    lines = []
    for group, key, suffix in CSS_VARIABLES:
        lines.append(f"--content-{suffix}: {theme[group][key]};")
    return "\n".join(lines)


def font_stylesheet_url(theme: Dict[str, Any]) -> str:
    """Google Fonts stylesheet URL covering the theme's three font families."""
    families = []
    for role in ("heading", "body", "mono"):
        family = theme["fonts"][role].replace("'", "").split(",")[0].strip()
        if family not in families:
            families.append(family)
    query = "&family=".join(f"{f.replace(' ', '+')}:wght@400;500;600;700" for f in families)
    return f"https://fonts.googleapis.com/css2?family={query}&display=swap"
