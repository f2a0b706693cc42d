"""Pygame preview: tile sheet, category colors, property overlays, HUD."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

from config_io.config import Config
from render.palettes import (
    category_color, height_color,
    EMPTY_COLOR, COLLIDE_COLOR, WATER_COLOR, HOVER_COLOR,
    HUD_BG, HUD_TEXT, HUD_TITLE, HUD_DIM,
    GRID_ALPHA,
)
from tileset.model import Tileset

logger = logging.getLogger(__name__)

# Lazy import pygame so the rest of the package works without a display
_pygame = None


def _pg():
    global _pygame
    if _pygame is None:
        import pygame
        _pygame = pygame
    return _pygame


def layout_cells(tileset: Tileset) -> tuple[dict[int, tuple[int, int]], int, int]:
    """Map tile ids to preview cells. Returns ``(cells, width, height)``.

    Sheet tilesets use their real grid position; image collections are
    packed into a near-square grid in id order.
    """
    if not tileset.is_image_collection:
        cells = {
            tile_id: tileset.grid_position(tile_id)
            for tile_id in range(tileset.tilecount)
        }
        return cells, tileset.columns, tileset.rows

    ids = tileset.ids()
    cols = max(1, math.ceil(math.sqrt(len(ids))))
    rows = max(1, math.ceil(len(ids) / cols))
    cells = {tile_id: (i % cols, i // cols) for i, tile_id in enumerate(ids)}
    return cells, cols, rows


def describe_tile(tileset: Tileset, tile_id: int) -> list[str]:
    """HUD lines for one tile."""
    tile = tileset.get(tile_id)
    lines = [f"Tile {tile_id}"]
    if not tileset.is_image_collection:
        col, row = tileset.grid_position(tile_id)
        lines.append(f"Cell: ({col}, {row})")
    if tile is None:
        lines.append("(no metadata)")
        return lines
    lines.append(f"Type: {tile.type or '-'}")
    for name, value in tile.property_map().items():
        lines.append(f"  {name} = {value}")
    if tile.image is not None:
        lines.append(f"Image: {Path(tile.image.source).name}")
    return lines


class TilesetPreview:
    """Interactive window showing one tileset."""

    OVERLAY_NONE = 0
    OVERLAY_COLLIDES = 1
    OVERLAY_WATER = 2
    OVERLAY_HEIGHT = 3

    OVERLAY_NAMES = ["None", "Collides", "Water", "Height"]

    def __init__(self, config: Config, tileset: Tileset):
        pg = _pg()
        pg.init()

        self.config = config
        self.tileset = tileset
        rcfg = config.render
        self.fps = rcfg.fps
        self.hud_width = rcfg.hud_width
        self.overlay_alpha = rcfg.overlay_alpha
        self.show_grid = rcfg.show_grid
        self.cell_w = tileset.tilewidth * rcfg.scale
        self.cell_h = tileset.tileheight * rcfg.scale

        self.cells, self.grid_w, self.grid_h = layout_cells(tileset)
        self._id_at = {pos: tile_id for tile_id, pos in self.cells.items()}

        self.map_w = self.grid_w * self.cell_w
        self.map_h = self.grid_h * self.cell_h
        self.screen_w = self.map_w + self.hud_width
        self.screen_h = max(self.map_h, 320)

        self.screen = pg.display.set_mode((self.screen_w, self.screen_h))
        pg.display.set_caption(f"Tileset: {tileset.name}")
        self.clock = pg.time.Clock()
        self.font = pg.font.SysFont("monospace", 14)
        self.font_small = pg.font.SysFont("monospace", 11)

        self.overlay_mode = self.OVERLAY_NONE
        self.hover_id: int | None = None

        # Pre-render the base surface
        self._base_surface = pg.Surface((self.map_w, self.map_h))
        self._render_base()

        self._grid_surface = pg.Surface((self.map_w, self.map_h), pg.SRCALPHA)
        self._render_grid()

    # ── Base layer ─────────────────────────────────────────────────────

    def _image_path(self, source: str) -> Path:
        base = self.tileset.source.parent if self.tileset.source else Path(".")
        return base / source

    def _load_image(self, source: str) -> Any:
        """Load an image or return None if it is missing or unreadable."""
        pg = _pg()
        path = self._image_path(source)
        if not path.exists():
            return None
        try:
            return pg.image.load(str(path))
        except pg.error as exc:
            logger.warning(f"Cannot load {path}: {exc}")
            return None

    def _render_base(self) -> None:
        pg = _pg()
        self._base_surface.fill(EMPTY_COLOR)

        sheet = None
        if self.tileset.image is not None:
            sheet = self._load_image(self.tileset.image.source)

        for tile_id, (x, y) in self.cells.items():
            rect = pg.Rect(x * self.cell_w, y * self.cell_h, self.cell_w, self.cell_h)
            tile = self.tileset.get(tile_id)

            img = None
            if sheet is not None:
                src = pg.Rect(*self.tileset.pixel_rect(tile_id))
                if sheet.get_rect().contains(src):
                    img = sheet.subsurface(src)
            elif tile is not None and tile.image is not None:
                img = self._load_image(tile.image.source)

            if img is not None:
                self._base_surface.blit(pg.transform.scale(img, rect.size), rect)
            elif tile is not None:
                cat = tile.tag.category if tile.tag else None
                pg.draw.rect(self._base_surface, category_color(cat), rect)

    def _render_grid(self) -> None:
        pg = _pg()
        color = (0, 0, 0, GRID_ALPHA)
        for x in range(0, self.map_w, self.cell_w):
            pg.draw.line(self._grid_surface, color, (x, 0), (x, self.map_h))
        for y in range(0, self.map_h, self.cell_h):
            pg.draw.line(self._grid_surface, color, (0, y), (self.map_w, y))

    # ── Events ─────────────────────────────────────────────────────────

    def handle_events(self) -> bool:
        """Process pygame events. Returns False if quit requested."""
        pg = _pg()
        for event in pg.event.get():
            if event.type == pg.QUIT:
                return False
            if event.type == pg.KEYDOWN:
                if event.key == pg.K_ESCAPE:
                    return False
                if event.key == pg.K_0:
                    self.overlay_mode = self.OVERLAY_NONE
                elif event.key == pg.K_1:
                    self.overlay_mode = self.OVERLAY_COLLIDES
                elif event.key == pg.K_2:
                    self.overlay_mode = self.OVERLAY_WATER
                elif event.key == pg.K_3:
                    self.overlay_mode = self.OVERLAY_HEIGHT
                elif event.key == pg.K_g:
                    self.show_grid = not self.show_grid
            if event.type == pg.MOUSEMOTION:
                mx, my = event.pos
                self.hover_id = self._id_at.get((mx // self.cell_w, my // self.cell_h))
        return True

    # ── Drawing ────────────────────────────────────────────────────────

    def render(self) -> None:
        pg = _pg()
        self.screen.fill((0, 0, 0))
        self.screen.blit(self._base_surface, (0, 0))
        if self.show_grid:
            self.screen.blit(self._grid_surface, (0, 0))
        if self.overlay_mode != self.OVERLAY_NONE:
            self._draw_overlay()
        if self.hover_id is not None:
            x, y = self.cells[self.hover_id]
            pg.draw.rect(self.screen, HOVER_COLOR,
                         (x * self.cell_w, y * self.cell_h, self.cell_w, self.cell_h), 2)
        self._draw_hud()
        pg.display.flip()
        self.clock.tick(self.fps)

    def _draw_overlay(self) -> None:
        pg = _pg()
        surf = pg.Surface((self.map_w, self.map_h), pg.SRCALPHA)
        vcfg = self.config.validation

        for tile_id, (x, y) in self.cells.items():
            tile = self.tileset.get(tile_id)
            if tile is None:
                continue
            if self.overlay_mode == self.OVERLAY_COLLIDES and tile.collides:
                color = COLLIDE_COLOR
            elif self.overlay_mode == self.OVERLAY_WATER and tile.is_water:
                color = WATER_COLOR
            elif self.overlay_mode == self.OVERLAY_HEIGHT and tile.height is not None:
                color = height_color(tile.height, vcfg.height_min, vcfg.height_max)
            else:
                continue
            rect = pg.Rect(x * self.cell_w, y * self.cell_h, self.cell_w, self.cell_h)
            pg.draw.rect(surf, (*color, self.overlay_alpha), rect)

        self.screen.blit(surf, (0, 0))

    def _draw_hud(self) -> None:
        pg = _pg()
        hud_x = self.map_w
        pg.draw.rect(self.screen, HUD_BG, pg.Rect(hud_x, 0, self.hud_width, self.screen_h))

        y_off = 10

        def text(txt: str, color: tuple = HUD_TEXT, small: bool = False) -> None:
            nonlocal y_off
            f = self.font_small if small else self.font
            surf = f.render(txt, True, color)
            self.screen.blit(surf, (hud_x + 10, y_off))
            y_off += surf.get_height() + 2

        ts = self.tileset
        text(ts.name.upper()[:28], HUD_TITLE)
        text(f"{ts.tilewidth}x{ts.tileheight} px, {ts.tilecount} tiles", small=True)
        text(f"{len(ts.tiles)} described, {len(ts.categories())} categories", small=True)
        y_off += 6

        if self.hover_id is not None:
            for line in describe_tile(ts, self.hover_id):
                text(line[:34], small=True)

        y_off = self.screen_h - 80
        text("Overlays (keys):", HUD_DIM)
        text("0:None 1:Collides 2:Water", HUD_DIM, small=True)
        text("3:Height G:Grid ESC:Quit", HUD_DIM, small=True)
        text(f"Current: {self.OVERLAY_NAMES[self.overlay_mode]}", (200, 200, 100), small=True)

    def run(self) -> None:
        """Event loop until the window is closed."""
        try:
            while self.handle_events():
                self.render()
        finally:
            self.close()

    def close(self) -> None:
        _pg().quit()
