"""Read Tiled ``.tsx`` tileset descriptors into :class:`Tileset` objects.

Structure problems (bad XML, wrong root, missing header numbers, non-integer
tile ids) raise :class:`TilesetParseError`. Content problems such as a
property value that does not match its declared type are kept on the model
so the validator can report every one of them at once.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Optional

from config_io.schema import PropertyType
from tileset.errors import TilesetParseError
from tileset.model import (
    ExportSettings,
    GridSettings,
    ImageRef,
    Property,
    TileDescriptor,
    Tileset,
)

logger = logging.getLogger(__name__)

_REQUIRED_INT_ATTRS = ("tilewidth", "tileheight", "tilecount", "columns")

# Smallest value each header number may take
_HEADER_MINIMUMS = {
    "tilewidth": 1,
    "tileheight": 1,
    "tilecount": 0,
    "columns": 0,
    "spacing": 0,
    "margin": 0,
}


def convert_value(prop_type: str, raw: str) -> Any:
    """Convert a raw attribute string to a Python value, or None if it does not parse."""
    if prop_type == PropertyType.BOOL.value:
        lowered = raw.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        return None
    if prop_type == PropertyType.FLOAT.value:
        try:
            return float(raw)
        except ValueError:
            return None
    if prop_type == PropertyType.INT.value:
        try:
            return int(raw)
        except ValueError:
            return None
    if prop_type == PropertyType.STRING.value:
        return raw
    # Unsupported types keep no value
    return None


def _int_attr(elem: ET.Element, name: str, source: Optional[Path], default: Optional[int] = None) -> int:
    raw = elem.get(name)
    if raw is None:
        if default is not None:
            return default
        raise TilesetParseError(f"<{elem.tag}> is missing required attribute '{name}'", source)
    try:
        return int(raw)
    except ValueError:
        raise TilesetParseError(
            f"<{elem.tag}> attribute '{name}' is not an integer: {raw!r}", source
        ) from None


def _opt_int_attr(elem: ET.Element, name: str) -> Optional[int]:
    raw = elem.get(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_image(elem: Optional[ET.Element]) -> Optional[ImageRef]:
    if elem is None:
        return None
    return ImageRef(
        source=elem.get("source", ""),
        width=_opt_int_attr(elem, "width"),
        height=_opt_int_attr(elem, "height"),
    )


def _parse_properties(elem: ET.Element) -> list[Property]:
    props_elem = elem.find("properties")
    if props_elem is None:
        return []
    props: list[Property] = []
    for prop_elem in props_elem.findall("property"):
        prop_type = prop_elem.get("type", PropertyType.STRING.value)
        # Multi-line string properties store their text as element content
        raw = prop_elem.get("value")
        if raw is None:
            raw = prop_elem.text or ""
        props.append(Property(
            name=prop_elem.get("name", ""),
            type=prop_type,
            raw=raw,
            value=convert_value(prop_type, raw),
        ))
    return props


def _parse_tile(elem: ET.Element, source: Optional[Path]) -> TileDescriptor:
    tile_id = _int_attr(elem, "id", source)
    # Tiled 1.9+ may write "class" instead of "type"
    tile_type = elem.get("type") or elem.get("class") or None
    return TileDescriptor(
        id=tile_id,
        type=tile_type,
        properties=_parse_properties(elem),
        image=_parse_image(elem.find("image")),
    )


def parse_element(root: ET.Element, source: Optional[Path] = None) -> Tileset:
    """Build a Tileset from an already-parsed ``<tileset>`` element."""
    if root.tag != "tileset":
        raise TilesetParseError(f"expected <tileset> root element, got <{root.tag}>", source)

    header = {name: _int_attr(root, name, source) for name in _REQUIRED_INT_ATTRS}
    header["spacing"] = _int_attr(root, "spacing", source, default=0)
    header["margin"] = _int_attr(root, "margin", source, default=0)
    for name, lowest in _HEADER_MINIMUMS.items():
        if header[name] < lowest:
            raise TilesetParseError(
                f"<tileset> attribute '{name}' must be at least {lowest}, got {header[name]}",
                source,
            )

    grid = None
    grid_elem = root.find("grid")
    if grid_elem is not None:
        grid = GridSettings(
            orientation=grid_elem.get("orientation", "orthogonal"),
            width=_int_attr(grid_elem, "width", source, default=1),
            height=_int_attr(grid_elem, "height", source, default=1),
        )

    export = None
    export_elem = root.find("editorsettings/export")
    if export_elem is not None:
        export = ExportSettings(
            target=export_elem.get("target", ""),
            format=export_elem.get("format", ""),
        )

    tileset = Tileset(
        name=root.get("name", source.stem if source else ""),
        version=root.get("version", ""),
        tiledversion=root.get("tiledversion", ""),
        image=_parse_image(root.find("image")),
        grid=grid,
        export=export,
        source=source,
        **header,
    )

    for tile_elem in root.findall("tile"):
        tileset.add_tile(_parse_tile(tile_elem, source))

    logger.debug(
        f"Parsed tileset '{tileset.name}': {len(tileset.tiles)} described tiles "
        f"of {tileset.tilecount}"
    )
    return tileset


def parse_tileset(text: str, source: str | Path | None = None) -> Tileset:
    """Parse tileset XML from a string."""
    src = Path(source) if source is not None else None
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise TilesetParseError(f"malformed XML: {exc}", src) from exc
    return parse_element(root, src)


def load_tileset(path: str | Path) -> Tileset:
    """Load a ``.tsx`` file from disk."""
    p = Path(path)
    try:
        tree = ET.parse(p)
    except ET.ParseError as exc:
        raise TilesetParseError(f"malformed XML: {exc}", p) from exc
    except OSError as exc:
        raise TilesetParseError(f"cannot read file: {exc.strerror}", p) from exc
    tileset = parse_element(tree.getroot(), p)
    logger.info(f"Loaded {p.name}: {len(tileset.tiles)} tiles described")
    return tileset
