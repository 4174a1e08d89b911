"""
Mark finished stays as COMPLETED.

Meant to run once a day from cron or a Kubernetes CronJob:

    python scripts/complete_stays.py            # apply
    python scripts/complete_stays.py --dry-run  # log only
    python scripts/complete_stays.py --verbose  # console logs at DEBUG
"""

import argparse

import structlog

from cottage_reservations.db.engine import engine
from cottage_reservations.db.store import SqlReservationStore
from cottage_reservations.logging_config import setup_logging
from cottage_reservations.services.completion import complete_past_stays
from cottage_reservations.utils.dates import local_today

logger = structlog.get_logger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--dry-run", action="store_true", help="Only report what would change")
    parser.add_argument("--verbose", action="store_true", help="Human-readable DEBUG logs")
    args = parser.parse_args()
    setup_logging("DEBUG" if args.verbose else None)

    today = local_today()
    logger.info("completion_job_started", today=today.isoformat(), dry_run=args.dry_run)

    try:
        count = complete_past_stays(SqlReservationStore(engine), today, dry_run=args.dry_run)
    except Exception:
        logger.exception("completion_job_failed")
        raise

    logger.info("completion_job_finished", completed=count)


if __name__ == "__main__":
    main()
