import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from inventoria.config import get_settings
from inventoria.core.logging import setup_logging
from inventoria.services import BackupCoordinator
from inventoria.store import build_store


def parse_args():
    parser = argparse.ArgumentParser(description="Seed default users, categories and items.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    store = build_store(get_settings())
    store.create_schema()
    if args.reset:
        store.clear_all()

    created = BackupCoordinator(store).seed_defaults()
    if not any(created.values()):
        print("Seed skipped: admin user already exists.")
        return
    print(
        f"Seed complete: {created['users']} users, "
        f"{created['categories']} categories, {created['items']} items."
    )


if __name__ == "__main__":
    main()
