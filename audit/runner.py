"""Audit runner: validate many tileset files and write CSV + summary."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any, Iterable

from audit.metrics import compute_stats
from config_io.config import Config
from config_io.utils import ensure_dir, save_json
from tileset.errors import TilesetParseError
from tileset.parser import load_tileset
from tileset.validator import validate_tileset

logger = logging.getLogger(__name__)


def audit_file(path: str | Path, config: Config) -> dict[str, Any]:
    """Load, validate and measure one file. Parse failures become a failed row."""
    p = Path(path)
    try:
        tileset = load_tileset(p)
    except TilesetParseError as exc:
        logger.error(str(exc))
        return {"name": p.stem, "source": str(p), "ok": False,
                "error_count": 1, "warning_count": 0, "parse_error": str(exc)}

    report = validate_tileset(tileset, config.validation)
    stats = compute_stats(tileset)
    stats["ok"] = report.ok
    stats["error_count"] = len(report.errors)
    stats["warning_count"] = len(report.warnings)
    stats["issues"] = [i.to_dict() for i in report.issues]
    return stats


def run_audit(
    paths: Iterable[str | Path],
    config: Config,
    output_dir: str | Path | None = None,
) -> dict[str, Any]:
    """Audit every file and produce ``audit_stats.csv`` + ``audit_summary.json``."""
    acfg = config.audit
    out = ensure_dir(output_dir if output_dir is not None else acfg.output_dir)
    rows: list[dict] = []

    for path in paths:
        logger.info(f"Auditing {path}...")
        row = audit_file(path, config)
        rows.append(row)
        logger.info(f"  {row['name']}: {row['error_count']} errors, "
                    f"{row['warning_count']} warnings")

    # Write CSV (nested columns stay in the JSON summary only)
    csv_path = out / acfg.csv_name
    if rows:
        fieldnames: list[str] = []
        for r in rows:
            for k, v in r.items():
                if k not in fieldnames and not isinstance(v, (dict, list)):
                    fieldnames.append(k)
        with open(csv_path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(rows)
        logger.info(f"CSV written to {csv_path}")

    failed = [r["name"] for r in rows if not r["ok"]]
    summary = {
        "num_files": len(rows),
        "num_ok": len(rows) - len(failed),
        "failed": failed,
        "total_errors": sum(r["error_count"] for r in rows),
        "total_warnings": sum(r["warning_count"] for r in rows),
        "total_described_tiles": sum(r.get("described_tiles", 0) for r in rows),
        "files": rows,
    }
    summary_path = out / acfg.summary_name
    save_json(summary, summary_path)
    logger.info(f"Summary written to {summary_path}")

    return summary
