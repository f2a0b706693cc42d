"""Per-cell property arrays laid out by grid position."""

from __future__ import annotations

import numpy as np

from config_io.utils import is_finite
from tileset.errors import TilesetLayoutError
from tileset.model import Tileset


class PropertyGrids:
    """Holds ``(rows, columns)`` arrays of the tile properties of a sheet."""

    def __init__(self, tileset: Tileset):
        if tileset.is_image_collection:
            raise TilesetLayoutError(
                f"Tileset '{tileset.name}' is an image collection and has no grid"
            )
        self.tileset = tileset
        self.w = tileset.columns
        self.h = tileset.rows

        self.described = np.zeros((self.h, self.w), dtype=bool)
        self.typed = np.zeros((self.h, self.w), dtype=bool)
        self.collides = np.zeros((self.h, self.w), dtype=bool)
        self.is_water = np.zeros((self.h, self.w), dtype=bool)
        self.height = np.full((self.h, self.w), fill_value=np.nan, dtype=np.float64)
        self.category_id = np.full((self.h, self.w), fill_value=-1, dtype=np.int16)
        self.categories: list[str] = tileset.categories()

        self._fill()

    @classmethod
    def from_tileset(cls, tileset: Tileset) -> "PropertyGrids":
        return cls(tileset)

    def _fill(self) -> None:
        cat_index = {c: i for i, c in enumerate(self.categories)}
        for tile_id in self.tileset.ids():
            if not 0 <= tile_id < self.tileset.tilecount:
                continue
            tile = self.tileset[tile_id]
            x, y = self.tileset.grid_position(tile_id)
            self.described[y, x] = True
            self.collides[y, x] = tile.collides
            self.is_water[y, x] = tile.is_water
            if is_finite(tile.height):
                self.height[y, x] = float(tile.height)
            if tile.tag is not None:
                self.typed[y, x] = True
                self.category_id[y, x] = cat_index[tile.tag.category]

    # ── Helpers ────────────────────────────────────────────────────────

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.w and 0 <= y < self.h

    def category_at(self, x: int, y: int) -> str | None:
        idx = int(self.category_id[y, x])
        return self.categories[idx] if idx >= 0 else None

    def blocked_ids(self) -> list[int]:
        """Ids of every colliding tile, row-major."""
        ys, xs = np.nonzero(self.collides)
        return sorted(int(y * self.w + x) for y, x in zip(ys, xs))

    def height_range(self) -> tuple[float, float] | None:
        if np.all(np.isnan(self.height)):
            return None
        return float(np.nanmin(self.height)), float(np.nanmax(self.height))
