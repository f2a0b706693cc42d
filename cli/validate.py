"""CLI command: validate one or more tileset files."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config_io.config import load_config
from config_io.schema import Severity
from config_io.utils import expand_paths
from tileset.errors import TilesetParseError
from tileset.parser import load_tileset
from tileset.validator import validate_tileset


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate Tiled tileset (.tsx) files")
    parser.add_argument("paths", nargs="+", help="Tileset files or directories")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--warnings-as-errors", action="store_true",
                        help="Fail when any warning is reported")
    parser.add_argument("--json", action="store_true", help="Print reports as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s: %(message)s")

    config = load_config(args.config)
    paths = expand_paths(args.paths, config.loader.tileset_glob)
    if not paths:
        logging.error("No tileset files found")
        return 2

    failed = 0
    reports = []
    for path in paths:
        try:
            tileset = load_tileset(path)
        except TilesetParseError as exc:
            logging.error(str(exc))
            failed += 1
            continue

        report = validate_tileset(tileset, config.validation)
        reports.append(report.to_dict() | {"source": str(path)})
        bad = not report.ok or (args.warnings_as_errors and report.warnings)
        failed += int(bool(bad))

        if not args.json:
            status = "FAIL" if bad else "OK"
            print(f"{status}  {path}  ({len(report.errors)} errors, "
                  f"{len(report.warnings)} warnings)")
            for issue in report.issues:
                if issue.severity != Severity.INFO or args.verbose:
                    print(f"    {issue}")

    if args.json:
        print(json.dumps(reports, indent=2))
    else:
        print(f"\n{len(paths) - failed}/{len(paths)} files passed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
