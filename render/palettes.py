"""Color palettes for tile categories and property overlays."""

from __future__ import annotations

import colorsys
import hashlib

from config_io.utils import clamp

# Untyped / empty cells
UNTYPED_COLOR = (70, 70, 80)
EMPTY_COLOR = (35, 35, 42)

# Fixed colors for the common categories; others are derived from the name
CATEGORY_COLORS: dict[str, tuple[int, int, int]] = {
    "ground": (144, 190, 109),
    "water": (65, 105, 225),
    "wall": (139, 137, 137),
    "rock": (120, 110, 100),
    "tree": (56, 118, 29),
    "bush": (80, 140, 50),
    "gravel": (190, 180, 150),
    "picket": (200, 170, 120),
    "decor": (220, 160, 200),
    "item": (255, 215, 0),
}


def category_color(category: str | None) -> tuple[int, int, int]:
    """Stable color for a category name, identical across runs."""
    if category is None:
        return UNTYPED_COLOR
    if category in CATEGORY_COLORS:
        return CATEGORY_COLORS[category]
    digest = hashlib.md5(category.encode("utf-8")).digest()
    hue = digest[0] / 255.0
    sat = 0.45 + (digest[1] / 255.0) * 0.35
    r, g, b = colorsys.hsv_to_rgb(hue, sat, 0.85)
    return (int(r * 255), int(g * 255), int(b * 255))


def height_color(height: float, lo: float = -1.0, hi: float = 2.0) -> tuple[int, int, int]:
    """Map height to blue (low) .. white (zero) .. red (high)."""
    h = clamp(height, lo, hi)
    if h < 0:
        f = h / lo if lo < 0 else 0.0
        return (int(255 * (1 - f)), int(255 * (1 - f)), 255)
    f = h / hi if hi > 0 else 0.0
    return (255, int(255 * (1 - f)), int(255 * (1 - f)))


# Overlays
COLLIDE_COLOR = (255, 60, 60)
WATER_COLOR = (50, 130, 255)
HOVER_COLOR = (255, 255, 0)

# HUD colors
HUD_BG = (30, 30, 40)
HUD_TEXT = (220, 220, 220)
HUD_TITLE = (255, 220, 100)
HUD_DIM = (140, 140, 150)

# Grid
GRID_ALPHA = 40
