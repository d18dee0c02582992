import argparse
import json
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from inventoria.config import get_settings
from inventoria.core.logging import setup_logging
from inventoria.services import BackupCoordinator
from inventoria.services.export_service import (
    build_activity_workbook,
    build_inventory_workbook,
    export_filename,
)
from inventoria.store import build_store


def parse_args():
    parser = argparse.ArgumentParser(description="Export a JSON backup or xlsx reports.")
    parser.add_argument(
        "--format",
        choices=("json", "inventory", "activity"),
        default="json",
        help="json backup (default), inventory workbook or activity workbook.",
    )
    parser.add_argument("--out-dir", default=".", help="Directory for the exported file.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    store = build_store(get_settings())
    store.create_schema()
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if args.format == "json":
        snapshot = BackupCoordinator(store).export_snapshot()
        target = out_dir / export_filename("inventoria_backup", extension="json")
        target.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
    elif args.format == "inventory":
        target = out_dir / export_filename("inventory_export")
        target.write_bytes(
            build_inventory_workbook(store.items.get_all(), store.categories.get_all())
        )
    else:
        target = out_dir / export_filename("activity_export")
        target.write_bytes(
            build_activity_workbook(
                store.transactions.get_all(),
                store.items.get_all(),
                store.users.get_all(),
            )
        )
    print(f"Exported {args.format} to {target}")


if __name__ == "__main__":
    main()
