"""
Invoice table maintenance.

    python manage_invoices.py migrate data/invoices.json
    python manage_invoices.py reset --yes
"""

import argparse
import json
import logging
import sys

from invoice_tracker.database import DatabaseClient
from invoice_tracker.maintenance import migrate_invoices, reset_invoices


def main(argv=None):
    parser = argparse.ArgumentParser(description="Invoice table maintenance")
    commands = parser.add_subparsers(dest="command", required=True)

    migrate = commands.add_parser("migrate", help="Load legacy JSON invoices into the table")
    migrate.add_argument("path", help="JSON file holding a list of invoices")
    migrate.add_argument("--batch-size", type=int, default=100)

    reset = commands.add_parser("reset", help="Delete every invoice")
    reset.add_argument("--yes", action="store_true", help="Confirm deleting all invoices")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    if args.command == "reset" and not args.yes:
        parser.error("reset deletes all invoices; pass --yes to confirm")

    db = DatabaseClient()
    if args.command == "migrate":
        with open(args.path, encoding="utf-8") as fh:
            rows = json.load(fh)
        result = migrate_invoices(db, rows, batch_size=args.batch_size)
        if result.skipped:
            print(f"Skipped {len(result.skipped)} incomplete invoices: {', '.join(result.skipped)}")
    else:
        result = reset_invoices(db)

    print(result.message)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
