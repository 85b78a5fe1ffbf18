#!/usr/bin/env python3
"""
Migrate legacy standard files to canonical paths.

Normalizes legacy metadata (plural type names) and renames every file to
{type}-{tier}-{process}-{slug}-{status}.md.

Usage:
    # Dry run (show what would change)
    python scripts/migrate_standards.py

    # Actually move and rewrite files
    python scripts/migrate_standards.py --apply

    # Explicit storage root (defaults to STANDARDS_DIR)
    python scripts/migrate_standards.py /srv/standards --apply
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "api"))

from config import default_config  # noqa: E402
from logging_config import configure_logging  # noqa: E402
from operations.standards_migrator import StandardsMigrator  # noqa: E402
from standards.document_store import DocumentStore  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Migrate standards to canonical paths")
    parser.add_argument("standards_dir", nargs="?", type=Path,
                        default=default_config.paths.standards_dir,
                        help="Storage root (default: STANDARDS_DIR)")
    parser.add_argument("--apply", "--run", dest="apply", action="store_true",
                        help="Write changes instead of a dry run")
    args = parser.parse_args()

    configure_logging(default_config.logging.level)
    print(f"Running migration (dryRun={not args.apply}) on {args.standards_dir}")

    if not args.standards_dir.is_dir():
        print(f"No standards directory at {args.standards_dir}")
        return 1

    actions = StandardsMigrator(DocumentStore(args.standards_dir)).run(apply=args.apply)
    if not actions:
        print("No markdown files found to migrate.")
        return 0

    for action in actions:
        print(action)
    print("Migration complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
