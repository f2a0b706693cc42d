"""Export tilesets to JSON records or to a Tiled-style Lua table."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

from config_io.config import ExportConfig
from config_io.schema import ExportFormat, ImageRecord, TileRecord, TilesetRecord
from config_io.utils import load_json, save_json, save_text
from tileset.model import ImageRef, TileDescriptor, Tileset

logger = logging.getLogger(__name__)


# ── Shared ─────────────────────────────────────────────────────────────────

def _export_tiles(tileset: Tileset, include_untyped: bool) -> list[TileDescriptor]:
    """Tiles in id order. Negative ids fit neither format and are skipped."""
    tiles = []
    for tile_id in tileset.ids():
        if tile_id < 0:
            logger.warning(f"'{tileset.name}': skipping tile with negative id {tile_id}")
            continue
        tile = tileset[tile_id]
        if not include_untyped and not tile.is_typed:
            continue
        tiles.append(tile)
    return tiles


# ── JSON ───────────────────────────────────────────────────────────────────

def _image_record(image: ImageRef | None) -> ImageRecord | None:
    if image is None:
        return None
    return ImageRecord(source=image.source, width=image.width, height=image.height)


def _json_properties(tileset: Tileset, tile: TileDescriptor) -> dict[str, Any]:
    # JSON has no spelling for inf or nan
    props = {}
    for name, value in tile.property_map().items():
        if isinstance(value, float) and not math.isfinite(value):
            logger.warning(
                f"'{tileset.name}': tile {tile.id} property '{name}' is {value}, left out of JSON"
            )
            continue
        props[name] = value
    return props


def to_record(tileset: Tileset, include_untyped: bool = True) -> TilesetRecord:
    """Convert to the pydantic record the JSON exporter writes."""
    tiles = [
        TileRecord(
            id=tile.id,
            type=tile.type,
            properties=_json_properties(tileset, tile),
            image=_image_record(tile.image),
        )
        for tile in _export_tiles(tileset, include_untyped)
    ]
    return TilesetRecord(
        name=tileset.name,
        version=tileset.version,
        tiledversion=tileset.tiledversion,
        tilewidth=tileset.tilewidth,
        tileheight=tileset.tileheight,
        tilecount=tileset.tilecount,
        columns=tileset.columns,
        image=_image_record(tileset.image),
        tiles=tiles,
    )


def to_json_dict(tileset: Tileset, include_untyped: bool = True) -> dict:
    return to_record(tileset, include_untyped).model_dump(exclude_none=True)


def export_json(tileset: Tileset, path: str | Path, cfg: ExportConfig | None = None) -> Path:
    cfg = cfg or ExportConfig()
    p = Path(path)
    save_json(to_json_dict(tileset, cfg.include_untyped), p, indent=cfg.json_indent,
              allow_nan=False)
    logger.info(f"Exported '{tileset.name}' as JSON to {p}")
    return p


def load_json_export(path: str | Path) -> TilesetRecord:
    return TilesetRecord.model_validate(load_json(path))


# ── Lua ────────────────────────────────────────────────────────────────────

_LUA_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _lua_string(text: str) -> str:
    out = []
    for ch in text:
        if ch in _LUA_ESCAPES:
            out.append(_LUA_ESCAPES[ch])
        elif ord(ch) < 32 or ord(ch) == 127:
            # Three digits so a following digit is not read as part of the escape
            out.append(f"\\{ord(ch):03d}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _lua_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "0/0"
        if math.isinf(value):
            return "math.huge" if value > 0 else "-math.huge"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if value is None:
        return "nil"
    return _lua_string(str(value))


class _QuotedKeys(dict):
    """Table whose keys are always written as ``["key"]``, as Tiled does for properties."""


def _lua_lines(value: Any, indent: str, depth: int) -> list[str]:
    """Render ``value`` as Lua; dict keys become fields, lists become arrays."""
    pad = indent * (depth + 1)
    if isinstance(value, dict):
        items = []
        for key, v in value.items():
            if key.isidentifier() and not isinstance(value, _QuotedKeys):
                label = key
            else:
                label = f"[{_lua_string(key)}]"
            sub = _lua_lines(v, indent, depth + 1)
            items.append([f"{pad}{label} = {sub[0].lstrip()}"] + sub[1:])
    elif isinstance(value, list):
        items = []
        for v in value:
            sub = _lua_lines(v, indent, depth + 1)
            items.append([f"{pad}{sub[0].lstrip()}"] + sub[1:])
    else:
        return [indent * depth + _lua_scalar(value)]

    if not items:
        return [indent * depth + "{}"]
    out = [indent * depth + "{"]
    for i, chunk in enumerate(items):
        if i < len(items) - 1:
            chunk = chunk[:-1] + [chunk[-1] + ","]
        out.extend(chunk)
    out.append(indent * depth + "}")
    return out


def _lua_table(tileset: Tileset, include_untyped: bool) -> dict:
    table: dict[str, Any] = {
        "version": tileset.version,
        "luaversion": "5.1",
        "tiledversion": tileset.tiledversion,
        "name": tileset.name,
        "tilewidth": tileset.tilewidth,
        "tileheight": tileset.tileheight,
        "spacing": tileset.spacing,
        "margin": tileset.margin,
        "columns": tileset.columns,
    }
    if tileset.image is not None:
        table["image"] = tileset.image.source
        if tileset.image.width is not None:
            table["imagewidth"] = tileset.image.width
        if tileset.image.height is not None:
            table["imageheight"] = tileset.image.height
    table["tilecount"] = tileset.tilecount

    tiles = []
    for tile in _export_tiles(tileset, include_untyped):
        entry: dict[str, Any] = {"id": tile.id}
        if tile.type:
            entry["type"] = tile.type
        props = tile.property_map()
        if props:
            entry["properties"] = _QuotedKeys(props)
        if tile.image is not None:
            entry["image"] = tile.image.source
            if tile.image.width is not None:
                entry["width"] = tile.image.width
            if tile.image.height is not None:
                entry["height"] = tile.image.height
        tiles.append(entry)
    table["tiles"] = tiles
    return table


def to_lua(tileset: Tileset, cfg: ExportConfig | None = None) -> str:
    cfg = cfg or ExportConfig()
    lines = _lua_lines(_lua_table(tileset, cfg.include_untyped), cfg.lua_indent, 0)
    return "return " + "\n".join(lines) + "\n"


def export_lua(tileset: Tileset, path: str | Path, cfg: ExportConfig | None = None) -> Path:
    p = Path(path)
    save_text(to_lua(tileset, cfg), p)
    logger.info(f"Exported '{tileset.name}' as Lua to {p}")
    return p


# ── Dispatch ───────────────────────────────────────────────────────────────

def default_export_path(tileset: Tileset, fmt: ExportFormat) -> Path:
    """Where an export lands when no output is given.

    Uses the file's own ``<editorsettings><export>`` target when its format
    matches, else ``<source stem>.<fmt>`` beside the source file.
    """
    base = tileset.source.parent if tileset.source else Path(".")
    if tileset.export is not None and tileset.export.format == fmt.value and tileset.export.target:
        return base / tileset.export.target
    stem = tileset.source.stem if tileset.source else tileset.name
    return base / f"{stem}.{fmt.value}"


def export_tileset(
    tileset: Tileset,
    path: str | Path | None = None,
    cfg: ExportConfig | None = None,
) -> Path:
    cfg = cfg or ExportConfig()
    out = Path(path) if path is not None else default_export_path(tileset, cfg.format)
    if cfg.format == ExportFormat.LUA:
        return export_lua(tileset, out, cfg)
    return export_json(tileset, out, cfg)
