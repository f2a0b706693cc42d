"""Test: CLI commands end to end (no pygame window)."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from cli import audit_tilesets, diff_tilesets, export_tileset, inspect_tiles, validate
from data.tiles import TILESET_DIR, sample_path

FETCH = str(sample_path("fetch-tileset"))
TILES = str(sample_path("tiles"))


def test_validate_bundled_directory(capsys):
    assert validate.main([str(TILESET_DIR)]) == 0
    out = capsys.readouterr().out
    assert "2/2 files passed" in out


def test_validate_reports_failure(tmp_path, capsys):
    bad = tmp_path / "bad.tsx"
    bad.write_text('<tileset name="bad" tilewidth="8" tileheight="8" tilecount="1" columns="1">'
                   '<image source="b.png" width="8" height="8"/>'
                   '<tile id="3"/></tileset>')
    assert validate.main([str(bad), FETCH]) == 1
    out = capsys.readouterr().out
    assert "FAIL" in out and "id-out-of-range" in out


def test_validate_json(capsys):
    assert validate.main(["--json", FETCH]) == 0
    reports = json.loads(capsys.readouterr().out)
    assert reports[0]["tileset"] == "fetch-tileset"
    assert reports[0]["ok"] is True


def test_validate_empty_directory(tmp_path):
    assert validate.main([str(tmp_path)]) == 2


def test_inspect_summary_and_tiles(capsys):
    assert inspect_tiles.main([FETCH]) == 0
    out = capsys.readouterr().out
    assert "Grid: 20x20 (400 tiles)" in out
    assert "npc_librarian" in out

    assert inspect_tiles.main([FETCH, "--id", "3", "--id", "140"]) == 0
    out = capsys.readouterr().out
    assert "tile 3 at (3, 0): npc_librarian::book" in out
    assert "height = 1.0" in out


def test_inspect_by_type_json(capsys):
    assert inspect_tiles.main([FETCH, "--type", "ground", "--json"]) == 0
    tiles = json.loads(capsys.readouterr().out)
    assert [t["id"] for t in tiles] == [100, 102, 104, 106, 110, 112, 114]


def test_inspect_unknown_id():
    assert inspect_tiles.main([FETCH, "--id", "11"]) == 1


def test_diff_exit_codes(capsys):
    assert diff_tilesets.main([FETCH, FETCH]) == 0
    assert diff_tilesets.main([TILES, FETCH]) == 1
    assert "columns: 0 -> 20" in capsys.readouterr().out


def test_export_lua(tmp_path):
    out = tmp_path / "fetch.lua"
    assert export_tileset.main([FETCH, "--format", "lua", "-o", str(out)]) == 0
    assert out.read_text().startswith("return {")


def test_export_json_typed_only(tmp_path):
    out = tmp_path / "fetch.json"
    assert export_tileset.main([FETCH, "-o", str(out), "--typed-only"]) == 0
    assert len(json.loads(out.read_text())["tiles"]) == 98


def test_audit_command(tmp_path, capsys):
    assert audit_tilesets.main([str(TILESET_DIR), "--output", str(tmp_path)]) == 0
    assert (tmp_path / "audit_summary.json").exists()
    assert "Files: 2 (2 ok)" in capsys.readouterr().out


def test_export_negative_id_file(tmp_path):
    src = tmp_path / "neg.tsx"
    src.write_text('<tileset name="neg" tilewidth="8" tileheight="8" tilecount="1" columns="1">'
                   '<image source="n.png" width="8" height="8"/>'
                   '<tile id="-1" type="ghost"/><tile id="0" type="rock"/></tileset>')
    out = tmp_path / "neg.json"
    assert export_tileset.main([str(src), "-o", str(out)]) == 0
    assert [t["id"] for t in json.loads(out.read_text())["tiles"]] == [0]


def test_commands_accept_verbose_flag(tmp_path, capsys):
    assert inspect_tiles.main([FETCH, "--id", "3", "-v"]) == 0
    assert diff_tilesets.main([FETCH, FETCH, "--verbose"]) == 0
    assert export_tileset.main([FETCH, "-o", str(tmp_path / "v.json"), "-v"]) == 0
    assert audit_tilesets.main([FETCH, "--output", str(tmp_path), "-v"]) == 0
