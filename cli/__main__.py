"""CLI entry point: dispatches to subcommands."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

COMMANDS = {
    "validate": "cli.validate",
    "inspect": "cli.inspect_tiles",
    "diff": "cli.diff_tilesets",
    "export": "cli.export_tileset",
    "audit": "cli.audit_tilesets",
    "preview": "cli.preview",
}

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m cli <command>")
        print(f"Commands: {', '.join(COMMANDS)}")
        sys.exit(1)

    cmd = sys.argv[1]
    if cmd not in COMMANDS:
        print(f"Unknown command: {cmd}")
        sys.exit(1)

    import importlib
    module = importlib.import_module(COMMANDS[cmd])
    sys.exit(module.main(sys.argv[2:]))
