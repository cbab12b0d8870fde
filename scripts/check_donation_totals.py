#!/usr/bin/env python3
"""
Report users whose total_donations disagrees with their donation rows,
and optionally rebuild every total.

Needed after donation rows were changed with raw SQL, which bypasses the
application's recomputation.

Usage:
    python scripts/check_donation_totals.py [--fix]
"""
import sys
import os
import argparse
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import sessionmaker
from app.database.database import engine
from app.core.exceptions import AggregateRecomputationFailure
from app.services.donation_totals import find_total_mismatches, rebuild_all_donation_totals

def main():
    parser = argparse.ArgumentParser(description="Check users.total_donations against donation rows")
    parser.add_argument("--fix", action="store_true", help="Rebuild every user's total")
    args = parser.parse_args()

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()

    try:
        mismatches = find_total_mismatches(db)
        if not mismatches:
            print("✅ All donation totals are consistent")
            return

        print(f"⚠️  {len(mismatches)} user(s) out of sync:")
        for user_id, stored, actual in mismatches:
            print(f"  user {user_id}: stored {stored}, actual {actual}")

        if not args.fix:
            print("\nRun with --fix to rebuild totals")
            sys.exit(1)

        updated = rebuild_all_donation_totals(db)
        db.commit()
        print(f"\n✅ Rebuilt totals for {updated} user(s)")

    except AggregateRecomputationFailure as e:
        print(f"❌ {e.message}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()

if __name__ == "__main__":
    main()
