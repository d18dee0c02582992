import argparse
import json
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from inventoria.config import get_settings
from inventoria.core.errors import ImportFailedError, SnapshotRejectedError
from inventoria.core.logging import setup_logging
from inventoria.services import BackupCoordinator
from inventoria.services.backup_service import validate_snapshot
from inventoria.store import build_store


def parse_args():
    parser = argparse.ArgumentParser(
        description="Replace all data with the contents of a JSON backup."
    )
    parser.add_argument("--path", required=True, help="Path to the backup .json file.")
    parser.add_argument("--dry-run", action="store_true", help="Validate without importing.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    try:
        payload = json.loads(Path(args.path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Cannot read backup: {exc}") from exc

    try:
        if args.dry_run:
            categories, users, items = validate_snapshot(payload)
            print(
                f"Backup is valid: {len(categories)} categories, "
                f"{len(users)} users, {len(items)} items."
            )
            return
        store = build_store(get_settings())
        store.create_schema()
        result = BackupCoordinator(store).import_snapshot(payload)
    except SnapshotRejectedError as exc:
        raise SystemExit(f"Backup rejected: {exc}") from exc
    except ImportFailedError as exc:
        raise SystemExit(str(exc)) from exc

    imported = result["imported"]
    print(
        f"Import complete: {imported['categories']} categories, "
        f"{imported['users']} users, {imported['items']} items."
    )


if __name__ == "__main__":
    main()
