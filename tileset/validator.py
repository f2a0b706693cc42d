"""Data-integrity checks for a loaded tileset."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from config_io.config import ValidationConfig
from config_io.schema import PropertyType, Severity
from tileset.errors import TilesetValidationError
from tileset.model import TileDescriptor, Tileset

logger = logging.getLogger(__name__)


@dataclass
class ValidationIssue:
    severity: Severity
    code: str
    message: str
    tile_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "tile_id": self.tile_id,
        }

    def __str__(self) -> str:
        where = f" [tile {self.tile_id}]" if self.tile_id is not None else ""
        return f"{self.severity.value}{where} {self.code}: {self.message}"


@dataclass
class ValidationReport:
    tileset_name: str
    issues: list[ValidationIssue] = field(default_factory=list)

    def add(self, severity: Severity, code: str, message: str, tile_id: Optional[int] = None) -> None:
        self.issues.append(ValidationIssue(severity, code, message, tile_id))

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def codes(self) -> list[str]:
        return [i.code for i in self.issues]

    def raise_for_errors(self) -> None:
        if not self.ok:
            raise TilesetValidationError(self)

    def to_dict(self) -> dict:
        return {
            "tileset": self.tileset_name,
            "ok": self.ok,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
        }


# ── Individual checks ──────────────────────────────────────────────────────

def _check_ids(tileset: Tileset, report: ValidationReport) -> None:
    counts = Counter(t.id for t in tileset.tiles)
    for tile_id, n in sorted(counts.items()):
        if n > 1:
            report.add(Severity.ERROR, "duplicate-id",
                       f"tile id {tile_id} appears {n} times", tile_id)
        if not 0 <= tile_id < tileset.tilecount:
            report.add(Severity.ERROR, "id-out-of-range",
                       f"tile id {tile_id} outside 0..{tileset.tilecount - 1}", tile_id)


def _check_type(tile: TileDescriptor, report: ValidationReport) -> None:
    tag = tile.tag
    if tag is not None and not tag.is_well_formed:
        report.add(Severity.ERROR, "malformed-type",
                   f"type {tile.type!r} has an empty segment", tile.id)


def _check_properties(tile: TileDescriptor, rules: ValidationConfig, report: ValidationReport) -> None:
    allowed = {t.value for t in rules.allowed_property_types}
    known = {name: t.value for name, t in rules.known_properties.items()}
    seen: set[str] = set()

    for prop in tile.properties:
        if prop.name in seen:
            report.add(Severity.ERROR, "duplicate-property",
                       f"property '{prop.name}' is declared more than once", tile.id)
        seen.add(prop.name)

        if prop.type not in allowed:
            report.add(Severity.ERROR, "bad-property-type",
                       f"property '{prop.name}' has unsupported type '{prop.type}'", tile.id)
            continue

        if not prop.is_parsed:
            report.add(Severity.ERROR, "bad-property-value",
                       f"property '{prop.name}' value {prop.raw!r} is not a valid {prop.type}",
                       tile.id)
            continue

        if prop.type == PropertyType.FLOAT.value and not math.isfinite(prop.value):
            report.add(Severity.ERROR, "non-finite",
                       f"property '{prop.name}' is not finite: {prop.raw}", tile.id)
            continue

        expected = known.get(prop.name)
        if expected is None:
            if rules.warn_unknown_properties:
                report.add(Severity.WARNING, "unknown-property",
                           f"property '{prop.name}' is not a known property", tile.id)
        elif prop.type != expected:
            report.add(Severity.ERROR, "property-type-mismatch",
                       f"property '{prop.name}' should be {expected}, got {prop.type}", tile.id)
        elif prop.name == "height" and not rules.height_min <= prop.value <= rules.height_max:
            report.add(Severity.WARNING, "height-range",
                       f"height {prop.value} outside [{rules.height_min}, {rules.height_max}]",
                       tile.id)

    if tile.properties and not tile.is_typed and rules.report_untyped_properties:
        report.add(Severity.INFO, "untyped-properties",
                   "tile has properties but no type", tile.id)


def _check_images(tileset: Tileset, rules: ValidationConfig, report: ValidationReport) -> None:
    if tileset.is_image_collection:
        for tile in tileset.tiles:
            if tile.image is None:
                report.add(Severity.ERROR, "missing-image",
                           "image-collection tile has no image", tile.id)
        return

    if tileset.image is None:
        report.add(Severity.ERROR, "missing-image", "tileset has no sheet image")
        return

    if not rules.check_tilecount:
        return
    img = tileset.image
    if img.width is None or img.height is None:
        return
    step_x = tileset.tilewidth + tileset.spacing
    step_y = tileset.tileheight + tileset.spacing
    if step_x <= 0 or step_y <= 0:
        report.add(Severity.ERROR, "bad-tile-size",
                   f"tile size {tileset.tilewidth}x{tileset.tileheight} is not positive")
        return
    cols = (img.width - 2 * tileset.margin + tileset.spacing) // step_x
    rows = (img.height - 2 * tileset.margin + tileset.spacing) // step_y
    if cols != tileset.columns:
        report.add(Severity.WARNING, "tilecount-mismatch",
                   f"image fits {cols} columns but tileset declares {tileset.columns}")
    elif cols * rows != tileset.tilecount:
        report.add(Severity.WARNING, "tilecount-mismatch",
                   f"image fits {cols * rows} tiles but tilecount is {tileset.tilecount}")


# ── Entry point ────────────────────────────────────────────────────────────

def validate_tileset(tileset: Tileset, rules: ValidationConfig | None = None) -> ValidationReport:
    """Run every check and return the collected issues."""
    rules = rules or ValidationConfig()
    report = ValidationReport(tileset_name=tileset.name)

    _check_ids(tileset, report)
    for tile in tileset.tiles:
        _check_type(tile, report)
        _check_properties(tile, rules, report)
    _check_images(tileset, rules, report)

    logger.debug(
        f"Validated '{tileset.name}': {len(report.errors)} errors, "
        f"{len(report.warnings)} warnings"
    )
    return report
