#!/usr/bin/env python3
"""
Delete a participant account.

Registrations, surveys, program enrollments and milestones are removed with
the account. Donations are kept as anonymous gifts.

Usage:
    python scripts/delete_participant.py <user_id>
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker
from app.database.database import engine
from app.core.exceptions import ParticipantDataError
from app.models import Donation, EventRegistration, ParticipantMilestone, ProgramEnrollment, Survey
from app.services.users import delete_user, get_user

def _count(db, model, user_id):
    return db.execute(select(func.count(model.id)).where(model.user_id == user_id)).scalar_one()

def delete_participant(user_id: int):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()

    try:
        user = get_user(db, user_id)

        print(f"{'=' * 60}")
        print(f"Deleting user ID {user.id}: {user.name} ({user.email})")
        print(f"{'=' * 60}")
        print(f"Registrations to delete:  {_count(db, EventRegistration, user_id)}")
        print(f"Surveys to delete:        {_count(db, Survey, user_id)}")
        print(f"Enrollments to delete:    {_count(db, ProgramEnrollment, user_id)}")
        print(f"Milestones to delete:     {_count(db, ParticipantMilestone, user_id)}")
        print(f"Donations to anonymize:   {_count(db, Donation, user_id)}")

        confirm = input("\nType 'DELETE' to confirm: ")
        if confirm != "DELETE":
            print("❌ Aborted")
            return

        delete_user(db, user_id)
        print(f"\n✅ Deleted user ID {user_id}")

    except ParticipantDataError as e:
        print(f"❌ Error deleting user: {e.message}")
        db.rollback()
    finally:
        db.close()

if __name__ == "__main__":
    if len(sys.argv) != 2 or not sys.argv[1].isdigit():
        print("Usage: python scripts/delete_participant.py <user_id>")
        sys.exit(1)
    delete_participant(int(sys.argv[1]))
