"""Test: loading a directory of tilesets."""

import logging
import shutil
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from config_io.config import LoaderConfig
from data.tiles import TILESET_DIR, list_samples, sample_path
from tileset.errors import TileNotFoundError, TilesetError, TilesetValidationError
from tileset.registry import TilesetRegistry


def test_samples_bundled():
    assert list_samples() == ["fetch-tileset.tsx", "tiles.tsx"]
    assert sample_path("tiles") == sample_path("tiles.tsx")
    with pytest.raises(FileNotFoundError):
        sample_path("missing")


def test_load_bundled_directory():
    reg = TilesetRegistry.from_directory(TILESET_DIR)
    assert len(reg) == 2
    assert reg.names() == ["fetch-tileset", "tiles"]
    assert "tiles" in reg
    assert reg.lookup("fetch-tileset", 3).type == "npc_librarian::book"
    assert all(r.ok for r in reg.reports.values())


def test_find_type_across_tilesets():
    reg = TilesetRegistry.from_directory(TILESET_DIR)
    hits = reg.find_type("npc_wizard")
    assert hits == [("fetch-tileset", 22), ("fetch-tileset", 23)]
    assert reg.find_type("npc_wizard", include_variants=False) == []


def test_unknown_names():
    reg = TilesetRegistry.from_directory(TILESET_DIR)
    with pytest.raises(TilesetError):
        reg.get("nope")
    with pytest.raises(TileNotFoundError):
        reg.lookup("tiles", 99)


def test_not_a_directory(tmp_path):
    with pytest.raises(TilesetError):
        TilesetRegistry.from_directory(tmp_path / "missing")


def test_duplicate_name_later_wins(tmp_path, caplog):
    a = tmp_path / "a.tsx"
    b = tmp_path / "b.tsx"
    shutil.copy(sample_path("tiles"), a)
    shutil.copy(sample_path("tiles"), b)
    with caplog.at_level(logging.WARNING):
        reg = TilesetRegistry.from_directory(tmp_path)
    assert len(reg) == 1
    assert reg.get("tiles").source == b
    assert "replaces" in caplog.text


def test_strict_loader_raises(tmp_path):
    bad = tmp_path / "bad.tsx"
    bad.write_text('<tileset name="bad" tilewidth="8" tileheight="8" tilecount="1" columns="1">'
                   '<image source="b.png" width="8" height="8"/>'
                   '<tile id="0"/><tile id="0"/></tileset>')
    lenient = TilesetRegistry.from_directory(tmp_path)
    assert not lenient.reports["bad"].ok

    with pytest.raises(TilesetValidationError):
        TilesetRegistry.from_directory(tmp_path, loader=LoaderConfig(strict=True))
