"""Compare two revisions of the same tileset."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tileset.model import ImageRef, Property, TileDescriptor, Tileset

_HEADER_FIELDS = ("name", "tilewidth", "tileheight", "tilecount", "columns",
                  "version", "tiledversion")


@dataclass
class TileChange:
    tile_id: int
    old_type: str | None
    new_type: str | None
    # name -> (old value, new value); None marks an absent property.
    # Values that did not parse are shown as their raw text.
    properties: dict[str, tuple[Any, Any]] = field(default_factory=dict)
    old_image: ImageRef | None = None
    new_image: ImageRef | None = None

    @property
    def type_changed(self) -> bool:
        return self.old_type != self.new_type

    @property
    def image_changed(self) -> bool:
        return self.old_image != self.new_image

    def describe(self) -> str:
        parts = []
        if self.type_changed:
            parts.append(f"type {self.old_type!r} -> {self.new_type!r}")
        if self.image_changed:
            old_src = self.old_image.source if self.old_image else None
            new_src = self.new_image.source if self.new_image else None
            if old_src == new_src:
                parts.append(f"image {old_src!r} resized")
            else:
                parts.append(f"image {old_src!r} -> {new_src!r}")
        for name, (old, new) in sorted(self.properties.items()):
            parts.append(f"{name} {old!r} -> {new!r}")
        return f"tile {self.tile_id}: " + ", ".join(parts)


@dataclass
class TilesetDiff:
    old_name: str
    new_name: str
    added: list[int] = field(default_factory=list)
    removed: list[int] = field(default_factory=list)
    changed: list[TileChange] = field(default_factory=list)
    header: dict[str, tuple[Any, Any]] = field(default_factory=dict)
    image_changed: bool = False

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed
                    or self.header or self.image_changed)

    def summary_lines(self) -> list[str]:
        lines = [f"--- {self.old_name}", f"+++ {self.new_name}"]
        for key, (old, new) in self.header.items():
            lines.append(f"~ {key}: {old!r} -> {new!r}")
        if self.image_changed:
            lines.append("~ image changed")
        lines.extend(f"+ tile {i}" for i in self.added)
        lines.extend(f"- tile {i}" for i in self.removed)
        lines.extend(f"~ {c.describe()}" for c in self.changed)
        if self.is_empty:
            lines.append("(no differences)")
        return lines

    def to_dict(self) -> dict:
        return {
            "old": self.old_name,
            "new": self.new_name,
            "added": self.added,
            "removed": self.removed,
            "changed": [
                {"id": c.tile_id, "old_type": c.old_type, "new_type": c.new_type,
                 "properties": {k: list(v) for k, v in c.properties.items()},
                 "image_changed": c.image_changed}
                for c in self.changed
            ],
            "header": {k: list(v) for k, v in self.header.items()},
            "image_changed": self.image_changed,
        }


def _first_properties(tile: TileDescriptor) -> dict[str, Property]:
    out: dict[str, Property] = {}
    for prop in tile.properties:
        out.setdefault(prop.name, prop)
    return out


def _same_property(a: Property | None, b: Property | None) -> bool:
    if a is None or b is None:
        return a is b
    if a.type != b.type:
        return False
    if a.is_parsed and b.is_parsed:
        # "1" and "1.0" are the same float; raw equality covers nan
        return a.value == b.value or a.raw == b.raw
    return a.raw == b.raw


def _shown(prop: Property | None) -> Any:
    if prop is None:
        return None
    return prop.value if prop.is_parsed else prop.raw


def _compare_tiles(old: TileDescriptor, new: TileDescriptor) -> TileChange | None:
    old_props = _first_properties(old)
    new_props = _first_properties(new)
    prop_changes = {
        name: (_shown(old_props.get(name)), _shown(new_props.get(name)))
        for name in set(old_props) | set(new_props)
        if not _same_property(old_props.get(name), new_props.get(name))
    }
    change = TileChange(old.id, old.type, new.type, prop_changes, old.image, new.image)
    if not (change.type_changed or change.image_changed or prop_changes):
        return None
    return change


def diff_tilesets(old: Tileset, new: Tileset) -> TilesetDiff:
    """List what changed between ``old`` and ``new``."""
    old_src = str(old.source) if old.source else old.name
    new_src = str(new.source) if new.source else new.name
    diff = TilesetDiff(old_name=old_src, new_name=new_src)

    for key in _HEADER_FIELDS:
        a, b = getattr(old, key), getattr(new, key)
        if a != b:
            diff.header[key] = (a, b)
    diff.image_changed = old.image != new.image

    old_ids, new_ids = set(old.ids()), set(new.ids())
    diff.added = sorted(new_ids - old_ids)
    diff.removed = sorted(old_ids - new_ids)
    for tile_id in sorted(old_ids & new_ids):
        change = _compare_tiles(old[tile_id], new[tile_id])
        if change is not None:
            diff.changed.append(change)
    return diff
