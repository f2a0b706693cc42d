"""Test: comparing tileset revisions."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from data.tiles import sample_path
from tileset.diff import diff_tilesets
from tileset.parser import load_tileset, parse_tileset


BASE = """<tileset name="rev" tilewidth="16" tileheight="16" tilecount="8" columns="4">
 <image source="rev.png" width="64" height="32"/>
 <tile id="0" type="ground::grass"/>
 <tile id="1" type="rock">
  <properties>
   <property name="collides" type="bool" value="true"/>
   <property name="height" type="float" value="0.5"/>
  </properties>
 </tile>
 <tile id="2" type="tree"/>
</tileset>"""


def test_identical_files_have_empty_diff():
    ts = load_tileset(sample_path("fetch-tileset"))
    diff = diff_tilesets(ts, load_tileset(sample_path("fetch-tileset")))
    assert diff.is_empty
    assert diff.summary_lines()[-1] == "(no differences)"


def test_added_removed_and_changed():
    new_xml = (BASE
               .replace('<tile id="2" type="tree"/>', '<tile id="5" type="bush"/>')
               .replace('value="0.5"', 'value="0.7"')
               .replace('type="ground::grass"', 'type="ground::dirt"'))
    diff = diff_tilesets(parse_tileset(BASE), parse_tileset(new_xml))

    assert diff.added == [5]
    assert diff.removed == [2]
    assert [c.tile_id for c in diff.changed] == [0, 1]
    grass, rock = diff.changed
    assert grass.type_changed
    assert grass.properties == {}
    assert not rock.type_changed
    assert rock.properties == {"height": (0.5, 0.7)}


def test_property_added_and_removed():
    new_xml = BASE.replace('<property name="collides" type="bool" value="true"/>', "")
    new_xml = new_xml.replace('<tile id="2" type="tree"/>',
                              '<tile id="2" type="tree"><properties>'
                              '<property name="collides" type="bool" value="true"/>'
                              '</properties></tile>')
    diff = diff_tilesets(parse_tileset(BASE), parse_tileset(new_xml))
    changes = {c.tile_id: c.properties for c in diff.changed}
    assert changes[1] == {"collides": (True, None)}
    assert changes[2] == {"collides": (None, True)}


def test_header_and_image_changes():
    new_xml = BASE.replace('tilecount="8"', 'tilecount="12"').replace('height="32"', 'height="48"')
    diff = diff_tilesets(parse_tileset(BASE), parse_tileset(new_xml))
    assert diff.header == {"tilecount": (8, 12)}
    assert diff.image_changed
    lines = diff.summary_lines()
    assert "~ tilecount: 8 -> 12" in lines
    assert "~ image changed" in lines


def test_two_reference_files_differ():
    diff = diff_tilesets(load_tileset(sample_path("tiles")),
                         load_tileset(sample_path("fetch-tileset")))
    assert not diff.is_empty
    assert diff.header["columns"] == (0, 20)
    d = diff.to_dict()
    assert d["header"]["tilecount"] == [19, 400]


COLLECTION = """<tileset name="col" tilewidth="16" tileheight="16" tilecount="2" columns="0">
 <grid orientation="orthogonal" width="1" height="1"/>
 <tile id="0" type="ground"><image source="a.png" width="16" height="16"/></tile>
 <tile id="1" type="wall"><image source="wall.png" width="16" height="16"/></tile>
</tileset>"""


def test_tile_image_change_is_reported():
    new_xml = COLLECTION.replace('source="a.png"', 'source="b.png"')
    diff = diff_tilesets(parse_tileset(COLLECTION), parse_tileset(new_xml))
    assert not diff.is_empty
    assert [c.tile_id for c in diff.changed] == [0]
    change = diff.changed[0]
    assert change.image_changed and not change.type_changed
    assert change.describe() == "tile 0: image 'a.png' -> 'b.png'"
    assert diff.to_dict()["changed"][0]["image_changed"] is True


def test_unparsed_property_text_change_is_reported():
    old_xml = BASE.replace('value="0.5"', 'value="high"')
    new_xml = BASE.replace('value="0.5"', 'value="higher"')
    diff = diff_tilesets(parse_tileset(old_xml), parse_tileset(new_xml))
    assert [c.properties for c in diff.changed] == [{"height": ("high", "higher")}]

    gone = BASE.replace('<property name="height" type="float" value="0.5"/>', "")
    diff = diff_tilesets(parse_tileset(old_xml), parse_tileset(gone))
    assert diff.changed[0].properties == {"height": ("high", None)}


def test_property_type_change_is_reported():
    new_xml = BASE.replace('name="height" type="float"', 'name="height" type="string"')
    diff = diff_tilesets(parse_tileset(BASE), parse_tileset(new_xml))
    assert diff.changed[0].properties == {"height": (0.5, "0.5")}


def test_equal_float_spelling_is_not_a_change():
    new_xml = BASE.replace('value="0.5"', 'value="0.50"')
    assert diff_tilesets(parse_tileset(BASE), parse_tileset(new_xml)).is_empty
