#!/usr/bin/env python3
"""
Vote Tally Audit Script

Recomputes every review's upvotes_count / downvotes_count from its vote
rows and reports reviews whose cached counters disagree.

Usage:
    # From project root with venv activated:
    python scripts/audit_tallies.py

    # With Docker:
    docker-compose exec api python scripts/audit_tallies.py

    # Options:
    python scripts/audit_tallies.py --only-mismatched   # Skip consistent reviews
    python scripts/audit_tallies.py --repair            # Rewrite drifted counters

Exit status is 1 when mismatches remain (useful as a CI/cron check).
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.database import SessionLocal
from app.services.reconciliation import audit_all_tallies, repair_tally
from app.services.review_store import ReviewStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def audit_tallies(repair: bool = False, only_mismatched: bool = False) -> int:
    """
    Audit all review tallies.

    Args:
        repair: Overwrite mismatching counters with the recomputed values
        only_mismatched: Only log reviews with mismatches

    Returns:
        Number of reviews still mismatched after the run
    """
    logger.info("Starting tally audit...")
    db = SessionLocal()

    try:
        store = ReviewStore(db)
        summary = audit_all_tallies(store, only_mismatched=only_mismatched)

        for report in summary.reports:
            if report.is_consistent:
                logger.info(
                    f"Review {report.review_id}: up={report.stored.up} down={report.stored.down} OK"
                )
                continue
            for mismatch in report.mismatches:
                logger.warning(
                    f"Review {report.review_id}: {mismatch.field} stored={mismatch.stored} "
                    f"computed={mismatch.computed}"
                )

        remaining = summary.mismatched_reviews
        if repair and remaining:
            repaired = sum(
                1 for report in summary.reports
                if repair_tally(store, report)
            )
            remaining -= repaired
            logger.info(f"Repaired {repaired} review tallies")

        logger.info("=" * 50)
        logger.info("Audit complete!")
        logger.info(f"Reviews audited: {summary.total_reviews}")
        logger.info(f"Mismatched: {summary.mismatched_reviews}")
        logger.info(f"Still mismatched: {remaining}")
        return remaining

    finally:
        db.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Audit cached vote counters against the vote rows"
    )
    parser.add_argument(
        "--repair",
        action="store_true",
        help="Rewrite counters that disagree with the vote rows"
    )
    parser.add_argument(
        "--only-mismatched",
        action="store_true",
        help="Only report reviews whose counters disagree"
    )

    args = parser.parse_args()

    remaining = audit_tallies(repair=args.repair, only_mismatched=args.only_mismatched)
    sys.exit(1 if remaining else 0)


if __name__ == "__main__":
    main()
