#!/usr/bin/env python3
"""
Import participants, and optionally their donations, from the legacy CSVs.

Plaintext passwords are hashed with bcrypt; existing bcrypt hashes are kept.
Rows whose email already exists are skipped. The TotalDonations column is
ignored: totals are rebuilt from donation rows.

With --donations, the donations CSV is imported after the participants so its
ParticipantEmail column resolves to the new accounts.

Usage:
    python scripts/import_participants_csv.py [csv_path] [--donations donations_csv] [--dry-run]
"""
import sys
import os
import argparse
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import sessionmaker
from app.core.config import settings
from app.database.database import engine, init_db
from app.services.participant_import import import_donations, import_participants

def print_report(report):
    print(f"\nRows read:      {report.rows}")
    print(f"Imported:       {report.imported}")
    print(f"Skipped:        {report.skipped}")
    print(f"Failed:         {report.failed}")
    for error in report.errors:
        print(f"  ✗ {error}")

def main():
    parser = argparse.ArgumentParser(description="Import participants from CSV")
    parser.add_argument("csv_path", nargs="?", default=settings.PARTICIPANT_CSV_PATH)
    parser.add_argument("--donations", metavar="CSV", help="Donations CSV to import after the participants")
    parser.add_argument("--dry-run", action="store_true", help="Report what would be imported without writing")
    args = parser.parse_args()

    for path in filter(None, (args.csv_path, args.donations)):
        if not os.path.exists(path):
            print(f"❌ File not found: {path}")
            sys.exit(1)

    init_db()
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()

    try:
        print(f"{'=' * 60}")
        print(f"Importing participants from {args.csv_path}{' (dry run)' if args.dry_run else ''}")
        print(f"{'=' * 60}")

        reports = [import_participants(db, args.csv_path, dry_run=args.dry_run)]
        print_report(reports[0])

        if args.donations:
            print(f"\nImporting donations from {args.donations}")
            reports.append(import_donations(db, args.donations, dry_run=args.dry_run))
            print_report(reports[-1])

        if any(report.failed for report in reports):
            sys.exit(1)
    finally:
        db.close()

if __name__ == "__main__":
    main()
