"""Serialize a :class:`Tileset` back to ``.tsx`` XML."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from config_io.schema import PropertyType
from tileset.model import ImageRef, TileDescriptor, Tileset

logger = logging.getLogger(__name__)


def _image_element(image: ImageRef) -> ET.Element:
    elem = ET.Element("image")
    elem.set("source", image.source)
    if image.width is not None:
        elem.set("width", str(image.width))
    if image.height is not None:
        elem.set("height", str(image.height))
    return elem


def _tile_element(tile: TileDescriptor) -> ET.Element:
    elem = ET.Element("tile")
    elem.set("id", str(tile.id))
    if tile.type:
        elem.set("type", tile.type)
    if tile.properties:
        props_elem = ET.SubElement(elem, "properties")
        for prop in tile.properties:
            prop_elem = ET.SubElement(props_elem, "property")
            prop_elem.set("name", prop.name)
            if prop.type != PropertyType.STRING.value:
                prop_elem.set("type", prop.type)
            prop_elem.set("value", prop.raw)
    if tile.image is not None:
        elem.append(_image_element(tile.image))
    return elem


def tileset_to_xml(tileset: Tileset) -> ET.Element:
    """Build the ``<tileset>`` element, attributes in the order Tiled writes them."""
    root = ET.Element("tileset")
    if tileset.version:
        root.set("version", tileset.version)
    if tileset.tiledversion:
        root.set("tiledversion", tileset.tiledversion)
    root.set("name", tileset.name)
    root.set("tilewidth", str(tileset.tilewidth))
    root.set("tileheight", str(tileset.tileheight))
    if tileset.spacing:
        root.set("spacing", str(tileset.spacing))
    if tileset.margin:
        root.set("margin", str(tileset.margin))
    root.set("tilecount", str(tileset.tilecount))
    root.set("columns", str(tileset.columns))

    if tileset.export is not None:
        settings = ET.SubElement(root, "editorsettings")
        export = ET.SubElement(settings, "export")
        export.set("target", tileset.export.target)
        export.set("format", tileset.export.format)
    if tileset.grid is not None:
        grid = ET.SubElement(root, "grid")
        grid.set("orientation", tileset.grid.orientation)
        grid.set("width", str(tileset.grid.width))
        grid.set("height", str(tileset.grid.height))
    if tileset.image is not None:
        root.append(_image_element(tileset.image))
    for tile in tileset.tiles:
        root.append(_tile_element(tile))
    return root


def tileset_to_string(tileset: Tileset) -> str:
    root = tileset_to_xml(tileset)
    ET.indent(root, space=" ")
    body = ET.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def save_tileset(tileset: Tileset, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(tileset_to_string(tileset), encoding="utf-8")
    logger.info(f"Wrote {len(tileset.tiles)} tiles to {p}")
    return p
