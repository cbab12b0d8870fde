#!/usr/bin/env python3
"""
Load sample users, milestones, events, programs and donations.
Safe to run more than once; existing rows are left alone.

Usage: python scripts/seed_database.py
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import sessionmaker
from app.database.database import engine, init_db
from app.core.exceptions import ParticipantDataError
from app.services.seed import seed_database

def main():
    init_db()

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()

    try:
        counts = seed_database(db)
        print("✅ Seed complete")
        for table, added in counts.items():
            print(f"  {table:<22} +{added}")
        if counts["users"]:
            print("\n🔑 Sample passwords: admin123 (admin), participant123 (participants)")
            print("⚠️  Change them before exposing this database!")
    except ParticipantDataError as e:
        print(f"❌ Seeding failed: {e.message}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()

if __name__ == "__main__":
    main()
