"""Load a directory of tilesets and look tiles up across all of them."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from config_io.config import LoaderConfig, ValidationConfig
from tileset.errors import TilesetError
from tileset.model import TileDescriptor, Tileset, TypeTag
from tileset.parser import load_tileset
from tileset.validator import ValidationReport, validate_tileset

logger = logging.getLogger(__name__)


class TilesetRegistry:
    """Tilesets indexed by name. Later files replace earlier ones of the same name."""

    def __init__(
        self,
        loader: LoaderConfig | None = None,
        rules: ValidationConfig | None = None,
    ):
        self.loader = loader or LoaderConfig()
        self.rules = rules or ValidationConfig()
        self._tilesets: dict[str, Tileset] = {}
        self.reports: dict[str, ValidationReport] = {}

    @classmethod
    def from_directory(
        cls,
        directory: str | Path,
        loader: LoaderConfig | None = None,
        rules: ValidationConfig | None = None,
    ) -> "TilesetRegistry":
        registry = cls(loader, rules)
        registry.load_directory(directory)
        return registry

    def load_directory(self, directory: str | Path) -> list[Tileset]:
        d = Path(directory)
        if not d.is_dir():
            raise TilesetError(f"Not a directory: {d}")
        return self.load_files(sorted(d.glob(self.loader.tileset_glob)))

    def load_files(self, paths: Iterable[str | Path]) -> list[Tileset]:
        loaded = [self.load_file(p) for p in paths]
        logger.info(f"Registry holds {len(self._tilesets)} tilesets")
        return loaded

    def load_file(self, path: str | Path) -> Tileset:
        tileset = load_tileset(path)
        report = validate_tileset(tileset, self.rules)
        if self.loader.strict:
            report.raise_for_errors()
        for issue in report.errors:
            logger.warning(f"{tileset.name}: {issue}")
        self.add(tileset, report)
        return tileset

    def add(self, tileset: Tileset, report: ValidationReport | None = None) -> None:
        if tileset.name in self._tilesets:
            prev = self._tilesets[tileset.name].source
            logger.warning(
                f"Tileset name '{tileset.name}' from {tileset.source} replaces {prev}"
            )
        self._tilesets[tileset.name] = tileset
        if report is not None:
            self.reports[tileset.name] = report

    # ── Queries ────────────────────────────────────────────────────────

    def get(self, name: str) -> Tileset:
        try:
            return self._tilesets[name]
        except KeyError:
            raise TilesetError(f"Unknown tileset: {name}") from None

    def names(self) -> list[str]:
        return sorted(self._tilesets)

    def __contains__(self, name: object) -> bool:
        return name in self._tilesets

    def __iter__(self) -> Iterator[Tileset]:
        return iter(self._tilesets.values())

    def __len__(self) -> int:
        return len(self._tilesets)

    def lookup(self, name: str, tile_id: int) -> TileDescriptor:
        return self.get(name)[tile_id]

    def find_type(self, tag: str, include_variants: bool = True) -> list[tuple[str, int]]:
        """All ``(tileset name, tile id)`` pairs carrying ``tag``."""
        want = TypeTag.parse(tag)
        hits: list[tuple[str, int]] = []
        for name in self.names():
            for tile in self._tilesets[name].tiles_of_type(want, include_variants):
                hits.append((name, tile.id))
        return hits
