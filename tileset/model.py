"""In-memory tileset model: header, image, and the id -> tile table."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional

from config_io.schema import PropertyType, TYPE_SEPARATOR
from tileset.errors import TileNotFoundError, TilesetLayoutError


# ── Type tags ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TypeTag:
    """Hierarchical tile type, e.g. ``npc_librarian::book``."""

    parts: tuple[str, ...]

    @classmethod
    def parse(cls, text: str) -> "TypeTag":
        return cls(tuple(text.split(TYPE_SEPARATOR)))

    @property
    def category(self) -> str:
        return self.parts[0]

    @property
    def variant(self) -> Optional[str]:
        if len(self.parts) < 2:
            return None
        return TYPE_SEPARATOR.join(self.parts[1:])

    @property
    def is_well_formed(self) -> bool:
        return all(p.strip() for p in self.parts)

    def matches(self, other: "TypeTag", include_variants: bool = True) -> bool:
        """True if ``self`` equals ``other`` or (optionally) is a variant of it."""
        if self.parts == other.parts:
            return True
        if not include_variants:
            return False
        return self.parts[:len(other.parts)] == other.parts

    def __str__(self) -> str:
        return TYPE_SEPARATOR.join(self.parts)


# ── Leaf records ───────────────────────────────────────────────────────────

@dataclass
class Property:
    name: str
    type: str = PropertyType.STRING.value
    raw: str = ""
    value: Any = None  # None when ``raw`` does not parse as ``type``

    @property
    def is_parsed(self) -> bool:
        return self.value is not None

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "value": self.value}


@dataclass
class ImageRef:
    source: str
    width: Optional[int] = None
    height: Optional[int] = None

    def to_dict(self) -> dict:
        return {"source": self.source, "width": self.width, "height": self.height}


@dataclass
class GridSettings:
    orientation: str = "orthogonal"
    width: int = 1
    height: int = 1


@dataclass
class ExportSettings:
    target: str
    format: str


# ── Tile descriptor ────────────────────────────────────────────────────────

@dataclass
class TileDescriptor:
    id: int
    type: Optional[str] = None
    properties: list[Property] = field(default_factory=list)
    image: Optional[ImageRef] = None

    @property
    def tag(self) -> Optional[TypeTag]:
        return TypeTag.parse(self.type) if self.type else None

    @property
    def is_typed(self) -> bool:
        return bool(self.type)

    def get_property(self, name: str, default: Any = None) -> Any:
        for prop in self.properties:
            if prop.name == name:
                return prop.value if prop.is_parsed else default
        return default

    def has_property(self, name: str) -> bool:
        return any(p.name == name for p in self.properties)

    def property_map(self) -> dict[str, Any]:
        """Parsed values by name. First occurrence wins on duplicates."""
        out: dict[str, Any] = {}
        for prop in self.properties:
            if prop.name not in out and prop.is_parsed:
                out[prop.name] = prop.value
        return out

    @property
    def collides(self) -> bool:
        return bool(self.get_property("collides", False))

    @property
    def is_water(self) -> bool:
        return bool(self.get_property("is_water", False))

    @property
    def height(self) -> Optional[float]:
        return self.get_property("height")

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"id": self.id}
        if self.type:
            d["type"] = self.type
        if self.properties:
            d["properties"] = self.property_map()
        if self.image is not None:
            d["image"] = self.image.to_dict()
        return d


# ── Tileset ────────────────────────────────────────────────────────────────

@dataclass
class Tileset:
    """A parsed ``.tsx`` file.

    ``tiles`` keeps document order and any duplicate ids so the validator
    can report them; lookups resolve to the first occurrence.
    """

    name: str
    tilewidth: int
    tileheight: int
    tilecount: int
    columns: int
    version: str = ""
    tiledversion: str = ""
    spacing: int = 0
    margin: int = 0
    image: Optional[ImageRef] = None
    grid: Optional[GridSettings] = None
    export: Optional[ExportSettings] = None
    tiles: list[TileDescriptor] = field(default_factory=list)
    source: Optional[Path] = None
    _index: dict[int, TileDescriptor] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.reindex()

    def reindex(self) -> None:
        self._index = {}
        for tile in self.tiles:
            self._index.setdefault(tile.id, tile)

    def add_tile(self, tile: TileDescriptor) -> None:
        self.tiles.append(tile)
        self._index.setdefault(tile.id, tile)

    # ── Lookup ─────────────────────────────────────────────────────────

    def get(self, tile_id: int) -> Optional[TileDescriptor]:
        return self._index.get(tile_id)

    def __getitem__(self, tile_id: int) -> TileDescriptor:
        tile = self._index.get(tile_id)
        if tile is None:
            raise TileNotFoundError(tile_id, self.name)
        return tile

    def __contains__(self, tile_id: object) -> bool:
        return tile_id in self._index

    def __iter__(self) -> Iterator[TileDescriptor]:
        return iter(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def ids(self) -> list[int]:
        return sorted(self._index)

    # ── Grid layout ────────────────────────────────────────────────────

    @property
    def is_image_collection(self) -> bool:
        return self.columns == 0

    @property
    def rows(self) -> int:
        if self.is_image_collection:
            return 0
        return math.ceil(self.tilecount / self.columns)

    def grid_position(self, tile_id: int) -> tuple[int, int]:
        """Return ``(col, row)`` for a tile id in a single-image tileset."""
        if self.is_image_collection:
            raise TilesetLayoutError(
                f"Tileset '{self.name}' is an image collection and has no grid"
            )
        if not 0 <= tile_id < self.tilecount:
            raise TilesetLayoutError(
                f"Tile id {tile_id} outside 0..{self.tilecount - 1} in '{self.name}'"
            )
        return tile_id % self.columns, tile_id // self.columns

    def tile_id_at(self, col: int, row: int) -> int:
        if self.is_image_collection:
            raise TilesetLayoutError(
                f"Tileset '{self.name}' is an image collection and has no grid"
            )
        if not (0 <= col < self.columns and 0 <= row < self.rows):
            raise TilesetLayoutError(f"Cell ({col}, {row}) outside the grid of '{self.name}'")
        return row * self.columns + col

    def tile_at(self, col: int, row: int) -> Optional[TileDescriptor]:
        return self.get(self.tile_id_at(col, row))

    def pixel_rect(self, tile_id: int) -> tuple[int, int, int, int]:
        """Source rectangle ``(x, y, w, h)`` of a tile inside the sheet image."""
        col, row = self.grid_position(tile_id)
        x = self.margin + col * (self.tilewidth + self.spacing)
        y = self.margin + row * (self.tileheight + self.spacing)
        return x, y, self.tilewidth, self.tileheight

    # ── Type queries ───────────────────────────────────────────────────

    def tiles_of_type(self, tag: str | TypeTag, include_variants: bool = True) -> list[TileDescriptor]:
        want = TypeTag.parse(tag) if isinstance(tag, str) else tag
        return [
            t for t in self.tiles
            if t.tag is not None and t.tag.matches(want, include_variants)
        ]

    def categories(self) -> list[str]:
        return sorted({t.tag.category for t in self.tiles if t.tag is not None})

    def typed_tiles(self) -> list[TileDescriptor]:
        return [t for t in self.tiles if t.is_typed]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "version": self.version,
            "tiledversion": self.tiledversion,
            "tilewidth": self.tilewidth,
            "tileheight": self.tileheight,
            "tilecount": self.tilecount,
            "columns": self.columns,
            "image": self.image.to_dict() if self.image else None,
            "tiles": [t.to_dict() for t in self.tiles],
        }
