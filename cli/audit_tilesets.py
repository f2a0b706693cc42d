"""CLI command: audit a set of tileset files."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from audit.runner import run_audit
from config_io.config import load_config
from config_io.utils import expand_paths


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Audit Tiled tileset files")
    parser.add_argument("paths", nargs="+", help="Tileset files or directories")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--output", type=str, default=None, help="Output directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s: %(message)s")

    config = load_config(args.config)
    paths = expand_paths(args.paths, config.loader.tileset_glob)
    logging.info(f"Auditing {len(paths)} files")

    summary = run_audit(paths, config, args.output)

    print("\n=== Audit Summary ===")
    print(f"  Files: {summary['num_files']} ({summary['num_ok']} ok)")
    print(f"  Errors: {summary['total_errors']}  Warnings: {summary['total_warnings']}")
    print(f"  Described tiles: {summary['total_described_tiles']}")
    if summary["failed"]:
        print(f"  Failed: {', '.join(summary['failed'])}")
    return 1 if summary["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())
