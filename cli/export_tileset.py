"""CLI command: export a tileset to JSON or Lua."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config_io.config import load_config
from config_io.schema import ExportFormat
from tileset.errors import TilesetError
from tileset.export import export_tileset
from tileset.parser import load_tileset


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Export a Tiled tileset")
    parser.add_argument("path", type=str, help="Tileset .tsx file")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--format", type=str, default=None,
                        choices=[f.value for f in ExportFormat])
    parser.add_argument("--output", "-o", type=str, default=None,
                        help="Output file (default: the file's own export target)")
    parser.add_argument("--typed-only", action="store_true", help="Skip untyped tiles")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s: %(message)s")

    overrides: dict = {"export": {}}
    if args.format is not None:
        overrides["export"]["format"] = args.format
    if args.typed_only:
        overrides["export"]["include_untyped"] = False
    config = load_config(args.config, overrides)

    try:
        tileset = load_tileset(args.path)
        out = export_tileset(tileset, args.output, config.export)
    except TilesetError as exc:
        logging.error(str(exc))
        return 1

    print(f"Exported {tileset.name} -> {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
