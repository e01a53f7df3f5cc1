"""Recompute aggregate vote counts from vote records.

Every question's and answer's ``vote_count`` should equal the signed sum of
its vote records (+1 per up vote, -1 per down vote). This script finds and
repairs rows where the stored aggregate has drifted.

Usage:
    cd backend
    python recount_votes.py

    # Dry-run (report drift without writing to DB):
    python recount_votes.py --dry-run
"""

import argparse
import asyncio
import os
import sys
import time

# ---------------------------------------------------------------------------
# Ensure the backend package is importable when running from the backend dir
# ---------------------------------------------------------------------------
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from stackit.db.session import async_session_factory
from stackit.services.vote_service import VoteService


async def recount_all(dry_run: bool = False) -> int:
    """Run the recount in a single transaction.

    Returns:
        Number of rows whose vote_count was (or would be) corrected
    """
    print("=" * 70)
    print("StackIt - Vote Count Recalculation")
    print(f"Mode : {'DRY RUN (no DB writes)' if dry_run else 'LIVE (writing to DB)'}")
    print("=" * 70)

    started = time.monotonic()
    async with async_session_factory() as session:
        service = VoteService(session)
        corrected = await service.recount_vote_totals(dry_run=dry_run)
        if dry_run:
            await session.rollback()
        else:
            await session.commit()

    print(f"Rows with drifted counts : {corrected}")
    print(f"Time elapsed             : {time.monotonic() - started:.1f}s")
    print()
    if dry_run:
        print("[DRY RUN] No changes were written to the database.")
    elif corrected:
        print("Database updated successfully.")
    else:
        print("All vote counts already match their vote records.")
    return corrected


def main() -> None:
    """Parse CLI arguments and run the recount job."""
    parser = argparse.ArgumentParser(
        description="Recompute question and answer vote counts from vote records.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Report drift but do NOT write corrections to the database.",
    )
    args = parser.parse_args()

    asyncio.run(recount_all(dry_run=args.dry_run))


if __name__ == "__main__":
    main()
