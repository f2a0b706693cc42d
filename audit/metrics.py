"""Per-tileset statistics."""

from __future__ import annotations

from collections import Counter
from typing import Any

from config_io.utils import is_finite
from tileset.model import Tileset


def compute_stats(tileset: Tileset) -> dict[str, Any]:
    """Compute summary statistics for one tileset."""
    tiles = [tileset[i] for i in tileset.ids()]

    typed = [t for t in tiles if t.is_typed]
    categories = Counter(t.tag.category for t in typed)
    variants = sum(1 for t in typed if t.tag.variant is not None)

    collides = sum(1 for t in tiles if t.collides)
    water = sum(1 for t in tiles if t.is_water)
    heights = [float(t.height) for t in tiles if is_finite(t.height)]

    # Tiles with no entry at all are still part of the sheet
    described_ratio = len(tiles) / max(tileset.tilecount, 1)

    return {
        "name": tileset.name,
        "source": str(tileset.source) if tileset.source else "",
        "tilecount": tileset.tilecount,
        "columns": tileset.columns,
        "image_collection": tileset.is_image_collection,
        "described_tiles": len(tiles),
        "described_ratio": round(described_ratio, 4),
        "typed_tiles": len(typed),
        "untyped_tiles": len(tiles) - len(typed),
        "variant_tiles": variants,
        "category_count": len(categories),
        "top_category": categories.most_common(1)[0][0] if categories else "",
        "colliding_tiles": collides,
        "water_tiles": water,
        "height_tiles": len(heights),
        "height_min": round(min(heights), 3) if heights else None,
        "height_max": round(max(heights), 3) if heights else None,
        "height_mean": round(sum(heights) / len(heights), 3) if heights else None,
        "categories": dict(sorted(categories.items())),
    }
