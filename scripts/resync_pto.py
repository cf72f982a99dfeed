"""
Resync every instructor's PTO balance for one year.

Usage: python -m scripts.resync_pto 2025
Exits with status 1 when any instructor failed.
"""
import argparse
import logging
import sys
from datetime import date

from app.core.logging import setup_logging
from app.database import SessionLocal, init_db
from app.services.pto_balance_service import BalanceSynchronizer
from app.services.pto_storage import PtoStorage

logger = logging.getLogger("scripts.resync_pto")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Recompute PTO balances from the leave ledger")
    parser.add_argument("year", type=int, nargs="?", default=date.today().year)
    args = parser.parse_args(argv)

    setup_logging()
    init_db()

    db = SessionLocal()
    try:
        outcomes = BalanceSynchronizer(PtoStorage(db)).synchronize_all(args.year)
    finally:
        db.close()

    print(f"{'ID':>5}  {'Instructor':<30} {'Used':>5} {'Left':>5}  Status")
    for o in outcomes:
        if o.succeeded:
            print(f"{o.instructor_id:>5}  {o.instructor_name:<30} {o.used_days:>5} {o.remaining_days:>5}  ok")
        else:
            print(f"{o.instructor_id:>5}  {o.instructor_name:<30} {'-':>5} {'-':>5}  FAILED: {o.error}")

    failed = sum(1 for o in outcomes if not o.succeeded)
    logger.info(f"Resync for {args.year} finished: {len(outcomes) - failed} ok, {failed} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
