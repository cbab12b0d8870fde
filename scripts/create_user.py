#!/usr/bin/env python3
"""
Interactively create a participant or admin account
Usage: python scripts/create_user.py
"""
import sys
import os
import getpass
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import sessionmaker
from app.database.database import engine
from app.core.exceptions import ParticipantDataError
from app.models.user import UserRole
from app.services.users import create_user

def prompt_user():
    email = input("Email: ").strip()
    name = input("Full name: ").strip()
    password = getpass.getpass("Password: ")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        print("❌ Passwords do not match")
        sys.exit(1)
    role = input("Role [participant/admin] (participant): ").strip().lower() or UserRole.PARTICIPANT.value
    return email, name, password, role

def main():
    email, name, password, role = prompt_user()

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()

    try:
        user = create_user(db, email=email, name=name, password=password, role=role)
        print(f"✅ Created {user.role.value} account {user.email} (id={user.id})")
    except ParticipantDataError as e:
        print(f"❌ Could not create user: {e.message}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()

if __name__ == "__main__":
    main()
