"""Test: data-integrity checks on tilesets."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from config_io.config import ValidationConfig, load_config
from config_io.schema import Severity
from data.tiles import sample_path
from tileset.errors import TilesetValidationError
from tileset.model import ImageRef, Tileset
from tileset.parser import load_tileset, parse_tileset
from tileset.validator import validate_tileset


IMAGE = '<image source="m.png" width="32" height="32"/>'


def _xml(body: str, tilecount: int = 4, columns: int = 2, image: str = IMAGE) -> str:
    return (
        f'<tileset name="m" tilewidth="16" tileheight="16" '
        f'tilecount="{tilecount}" columns="{columns}">{image}{body}</tileset>'
    )


def _prop(name: str, ptype: str, value: str) -> str:
    return f'<property name="{name}" type="{ptype}" value="{value}"/>'


def _tile(tile_id: int, props: str = "", tile_type: str | None = "wall") -> str:
    t = f' type="{tile_type}"' if tile_type else ""
    inner = f"<properties>{props}</properties>" if props else ""
    return f'<tile id="{tile_id}"{t}>{inner}</tile>'


def _codes(body: str, rules: ValidationConfig | None = None, **kw) -> list[str]:
    return validate_tileset(parse_tileset(_xml(body, **kw)), rules).codes()


@pytest.mark.parametrize("name", ["fetch-tileset", "tiles"])
def test_reference_tilesets_are_clean(name):
    report = validate_tileset(load_tileset(sample_path(name)))
    assert report.ok, [str(i) for i in report.errors]
    assert report.warnings == []


def test_every_height_is_finite_in_reference_data():
    ts = load_tileset(sample_path("fetch-tileset"))
    heights = [t.height for t in ts if t.has_property("height")]
    assert len(heights) == 21
    assert all(isinstance(h, float) for h in heights)


def test_duplicate_id():
    report = validate_tileset(parse_tileset(_xml(_tile(1) + _tile(1, tile_type="rock"))))
    assert not report.ok
    dup = [i for i in report.errors if i.code == "duplicate-id"]
    assert len(dup) == 1
    assert dup[0].tile_id == 1


def test_id_out_of_range():
    assert "id-out-of-range" in _codes(_tile(4))
    assert "id-out-of-range" not in _codes(_tile(3))


def test_bad_property_value():
    assert "bad-property-value" in _codes(_tile(0, _prop("collides", "bool", "maybe")))
    assert "bad-property-value" in _codes(_tile(0, _prop("height", "float", "tall")))


def test_non_finite_height():
    assert "non-finite" in _codes(_tile(0, _prop("height", "float", "nan")))
    assert "non-finite" in _codes(_tile(0, _prop("height", "float", "inf")))


def test_unsupported_property_type():
    assert "bad-property-type" in _codes(_tile(0, _prop("tint", "color", "#ff0000")))


def test_known_property_with_wrong_type():
    assert "property-type-mismatch" in _codes(_tile(0, _prop("collides", "float", "1")))


def test_unknown_property_is_a_warning():
    report = validate_tileset(parse_tileset(_xml(_tile(0, _prop("sound", "string", "thud")))))
    assert report.ok
    assert [i.code for i in report.warnings] == ["unknown-property"]

    quiet = ValidationConfig(warn_unknown_properties=False)
    assert "unknown-property" not in _codes(_tile(0, _prop("sound", "string", "thud")), quiet)


def test_height_range_warning():
    codes = _codes(_tile(0, _prop("height", "float", "5")))
    assert "height-range" in codes
    assert "height-range" not in _codes(_tile(0, _prop("height", "float", "-0.1")))


def test_duplicate_property():
    props = _prop("collides", "bool", "true") + _prop("collides", "bool", "false")
    assert "duplicate-property" in _codes(_tile(0, props))


def test_malformed_type_tag():
    assert "malformed-type" in _codes(_tile(0, tile_type="npc::"))


def test_untyped_properties_is_info_only():
    report = validate_tileset(parse_tileset(_xml(_tile(0, _prop("collides", "bool", "true"), None))))
    assert report.ok
    info = [i for i in report.issues if i.code == "untyped-properties"]
    assert info and info[0].severity == Severity.INFO


def test_tilecount_mismatch():
    codes = _codes("", tilecount=6)
    assert "tilecount-mismatch" in codes
    codes = _codes("", columns=3)
    assert "tilecount-mismatch" in codes
    assert "tilecount-mismatch" not in _codes("")


def test_missing_sheet_image():
    assert "missing-image" in _codes(_tile(0), image="")


def test_image_collection_tile_without_image():
    body = ('<tile id="0"><image source="a.png" width="16" height="16"/></tile>'
            '<tile id="1" type="rock"/>')
    report = validate_tileset(parse_tileset(_xml(body, tilecount=2, columns=0, image="")))
    assert [(i.code, i.tile_id) for i in report.errors] == [("missing-image", 1)]


def test_raise_for_errors():
    report = validate_tileset(parse_tileset(_xml(_tile(1) + _tile(1))))
    with pytest.raises(TilesetValidationError) as exc_info:
        report.raise_for_errors()
    assert exc_info.value.report is report


def test_rules_from_config():
    config = load_config(overrides={"validation": {"height_max": 0.6}})
    report = validate_tileset(load_tileset(sample_path("fetch-tileset")), config.validation)
    assert report.ok
    flagged = {i.tile_id for i in report.warnings if i.code == "height-range"}
    assert 164 in flagged and 140 in flagged
    assert 160 not in flagged


def test_report_to_dict():
    report = validate_tileset(parse_tileset(_xml(_tile(9))))
    d = report.to_dict()
    assert d["tileset"] == "m"
    assert d["ok"] is False
    assert d["error_count"] == 1
    assert d["issues"][0]["tile_id"] == 9


def test_zero_tile_size_reported_instead_of_crashing():
    ts = Tileset(name="flat", tilewidth=0, tileheight=16, tilecount=4, columns=2,
                 image=ImageRef(source="m.png", width=32, height=32))
    report = validate_tileset(ts)
    assert report.codes() == ["bad-tile-size"]
    assert not report.ok
