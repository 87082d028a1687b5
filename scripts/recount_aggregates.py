from __future__ import annotations

import argparse
import logging

from sqlmodel import Session

from devrx.db.base import get_engine, init_db
from devrx.services.maintenance_service import MaintenanceService


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Recompute question/answer vote totals and tag counts "
        "from the vote and question-tag rows."
    )
    parser.add_argument("--dry-run", action="store_true", help="Report drift without writing fixes")
    parser.add_argument("--verbose", action="store_true", help="Log every corrected row")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    init_db()
    with Session(get_engine()) as session:
        corrected = MaintenanceService(session).recount_aggregates(dry_run=args.dry_run)
    prefix = "[DRY RUN] Would correct" if args.dry_run else "Corrected"
    for kind, count in corrected.items():
        print(f"{prefix} {count} {kind} row(s).")


if __name__ == "__main__":
    main()
