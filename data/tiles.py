"""Bundled reference tilesets."""

from __future__ import annotations

from pathlib import Path

TILESET_DIR = Path(__file__).resolve().parent / "tilesets"


def list_samples() -> list[str]:
    return sorted(p.name for p in TILESET_DIR.glob("*.tsx"))


def sample_path(name: str) -> Path:
    """Path of a bundled ``.tsx`` file; the extension is optional."""
    if not name.endswith(".tsx"):
        name += ".tsx"
    p = TILESET_DIR / name
    if not p.exists():
        raise FileNotFoundError(
            f"No bundled tileset '{name}'. Available: {', '.join(list_samples())}"
        )
    return p
