"""Exception types raised while loading and querying tilesets."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tileset.validator import ValidationReport


class TilesetError(Exception):
    """Base class for all tileset errors."""


class TilesetParseError(TilesetError):
    """The file is not a structurally valid tileset descriptor."""

    def __init__(self, message: str, source: str | Path | None = None):
        self.source = str(source) if source is not None else None
        if self.source:
            message = f"{self.source}: {message}"
        super().__init__(message)


class TileNotFoundError(TilesetError, KeyError):
    def __init__(self, tile_id: int, tileset_name: str = ""):
        self.tile_id = tile_id
        self.tileset_name = tileset_name
        super().__init__(f"No tile with id {tile_id} in tileset '{tileset_name}'")

    def __str__(self) -> str:
        return self.args[0]


class TilesetLayoutError(TilesetError):
    """Grid math requested on a tileset that has no grid, or outside it."""


class TilesetValidationError(TilesetError):
    def __init__(self, report: ValidationReport):
        self.report = report
        errors = report.errors
        head = errors[0].message if errors else "validation failed"
        super().__init__(
            f"{report.tileset_name}: {len(errors)} error(s), first: {head}"
        )
