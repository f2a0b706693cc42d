"""CLI command: compare two revisions of a tileset."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tileset.diff import diff_tilesets
from tileset.errors import TilesetError
from tileset.parser import load_tileset


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Diff two Tiled tileset files")
    parser.add_argument("old", type=str)
    parser.add_argument("new", type=str)
    parser.add_argument("--json", action="store_true", help="Print the diff as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s: %(message)s")

    try:
        diff = diff_tilesets(load_tileset(args.old), load_tileset(args.new))
    except TilesetError as exc:
        logging.error(str(exc))
        return 2

    if args.json:
        print(json.dumps(diff.to_dict(), indent=2, default=str))
    else:
        print("\n".join(diff.summary_lines()))
    # Same convention as diff(1): 0 identical, 1 different
    return 0 if diff.is_empty else 1


if __name__ == "__main__":
    sys.exit(main())
