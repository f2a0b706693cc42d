"""Configuration loading and defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from config_io.schema import ExportFormat, KNOWN_PROPERTIES, PropertyType


# ── Sub-configs ────────────────────────────────────────────────────────────

class LoaderConfig(BaseModel):
    tileset_glob: str = "*.tsx"
    strict: bool = False  # raise on validation errors right after loading


class ValidationConfig(BaseModel):
    allowed_property_types: list[PropertyType] = Field(default_factory=lambda: [
        PropertyType.BOOL, PropertyType.FLOAT, PropertyType.STRING,
    ])
    known_properties: dict[str, PropertyType] = Field(
        default_factory=lambda: dict(KNOWN_PROPERTIES)
    )
    warn_unknown_properties: bool = True
    height_min: float = -1.0
    height_max: float = 2.0
    check_tilecount: bool = True
    report_untyped_properties: bool = True


class ExportConfig(BaseModel):
    format: ExportFormat = ExportFormat.JSON
    json_indent: int = 2
    include_untyped: bool = True
    lua_indent: str = "  "


class RenderConfig(BaseModel):
    scale: int = 2
    fps: int = 30
    hud_width: int = 260
    show_grid: bool = True
    overlay_alpha: int = 140


class AuditConfig(BaseModel):
    output_dir: str = "runs"
    csv_name: str = "audit_stats.csv"
    summary_name: str = "audit_summary.json"


# ── Top-level config ───────────────────────────────────────────────────

class Config(BaseModel):
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)


def load_config(path: str | Path | None = None, overrides: dict[str, Any] | None = None) -> Config:
    """Load config from YAML file, applying optional overrides."""
    data: dict[str, Any] = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}
    if overrides:
        _deep_merge(data, overrides)
    return Config(**data)


def _deep_merge(base: dict, overlay: dict) -> None:
    for k, v in overlay.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
