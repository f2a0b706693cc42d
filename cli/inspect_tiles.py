"""CLI command: show tileset header, categories, or individual tiles."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from audit.metrics import compute_stats
from tileset.errors import TilesetError
from tileset.parser import load_tileset


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect a Tiled tileset")
    parser.add_argument("path", type=str, help="Tileset .tsx file")
    parser.add_argument("--id", type=int, action="append", dest="ids", default=None,
                        help="Show a tile by id (repeatable)")
    parser.add_argument("--type", type=str, default=None,
                        help="List tiles of a type tag, e.g. 'ground' or 'npc_wizard::with_hat'")
    parser.add_argument("--exact", action="store_true", help="With --type, skip variants")
    parser.add_argument("--json", action="store_true", help="Print as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s: %(message)s")

    try:
        tileset = load_tileset(args.path)
        if args.ids:
            tiles = [tileset[i] for i in args.ids]
        elif args.type:
            tiles = tileset.tiles_of_type(args.type, include_variants=not args.exact)
        else:
            tiles = None
    except TilesetError as exc:
        logging.error(str(exc))
        return 1

    if tiles is None:
        stats = compute_stats(tileset)
        if args.json:
            print(json.dumps(stats, indent=2))
            return 0
        print(f"=== {tileset.name} ===")
        print(f"  Tile size: {tileset.tilewidth}x{tileset.tileheight}")
        if tileset.is_image_collection:
            print(f"  Image collection: {tileset.tilecount} tiles")
        else:
            print(f"  Grid: {tileset.columns}x{tileset.rows} ({tileset.tilecount} tiles)")
        print(f"  Described: {stats['described_tiles']} "
              f"(typed {stats['typed_tiles']}, untyped {stats['untyped_tiles']})")
        print(f"  Colliding: {stats['colliding_tiles']}  Water: {stats['water_tiles']}")
        if stats["height_tiles"]:
            print(f"  Height: {stats['height_min']} .. {stats['height_max']} "
                  f"(mean {stats['height_mean']})")
        print("  Categories:")
        for cat, n in stats["categories"].items():
            print(f"    {cat:<24} {n}")
        return 0

    if args.json:
        print(json.dumps([t.to_dict() for t in tiles], indent=2))
        return 0
    for tile in tiles:
        pos = ""
        if not tileset.is_image_collection and 0 <= tile.id < tileset.tilecount:
            pos = " at ({}, {})".format(*tileset.grid_position(tile.id))
        print(f"tile {tile.id}{pos}: {tile.type or '(untyped)'}")
        for name, value in tile.property_map().items():
            print(f"    {name} = {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
