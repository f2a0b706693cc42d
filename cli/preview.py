"""CLI command: open a pygame window previewing a tileset."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config_io.config import load_config
from tileset.errors import TilesetError
from tileset.parser import load_tileset


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Preview a Tiled tileset")
    parser.add_argument("path", type=str, help="Tileset .tsx file")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--scale", type=int, default=None, help="Pixel scale factor")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s: %(message)s")

    overrides = {}
    if args.scale is not None:
        overrides["render"] = {"scale": args.scale}
    config = load_config(args.config, overrides)

    try:
        tileset = load_tileset(args.path)
    except TilesetError as exc:
        logging.error(str(exc))
        return 1

    from render.pygame_renderer import TilesetPreview
    logging.info(f"Previewing {tileset.name} (keys 0-3 switch overlays)")
    TilesetPreview(config, tileset).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
