"""Enums and Pydantic record models for tileset data."""

from __future__ import annotations

import enum
from typing import Optional, Union

from pydantic import BaseModel, Field


# ── Enums ──────────────────────────────────────────────────────────────────

class PropertyType(str, enum.Enum):
    BOOL = "bool"
    FLOAT = "float"
    INT = "int"
    STRING = "string"


class Severity(str, enum.Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ExportFormat(str, enum.Enum):
    JSON = "json"
    LUA = "lua"


# ── Property names the game engine understands ─────────────────────────────

KNOWN_PROPERTIES: dict[str, PropertyType] = {
    "collides": PropertyType.BOOL,
    "height": PropertyType.FLOAT,
    "is_water": PropertyType.BOOL,
}

TYPE_SEPARATOR = "::"


# ── Export records (what the JSON exporter writes) ─────────────────────────

PropertyValue = Union[bool, int, float, str]


class ImageRecord(BaseModel):
    source: str
    width: Optional[int] = None
    height: Optional[int] = None


class TileRecord(BaseModel):
    id: int = Field(ge=0)
    type: Optional[str] = None
    properties: dict[str, PropertyValue] = Field(default_factory=dict)
    image: Optional[ImageRecord] = None


class TilesetRecord(BaseModel):
    name: str
    version: str = ""
    tiledversion: str = ""
    tilewidth: int = Field(gt=0)
    tileheight: int = Field(gt=0)
    tilecount: int = Field(ge=0)
    columns: int = Field(ge=0)
    image: Optional[ImageRecord] = None
    tiles: list[TileRecord] = Field(default_factory=list)
