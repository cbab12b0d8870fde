#!/usr/bin/env python3
"""
Production script to create the initial admin user
Usage: python scripts/create_admin_user.py [email] [name]

The password is read from ADMIN_PASSWORD or prompted for.
"""
import sys
import os
import getpass
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import sessionmaker
from app.database.database import engine, init_db
from app.core.exceptions import ParticipantDataError
from app.models.user import UserRole
from app.services.users import create_user, get_user_by_email

DEFAULT_ADMIN_EMAIL = "admin@ellarises.org"

def create_admin_user(email: str = DEFAULT_ADMIN_EMAIL, name: str = "Admin User"):
    """Create the initial admin user for production setup."""
    init_db()

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()

    try:
        if get_user_by_email(db, email):
            print(f"✅ Admin user {email} already exists")
            return

        password = os.environ.get("ADMIN_PASSWORD") or getpass.getpass("Admin password: ")
        create_user(db, email=email, name=name, password=password, role=UserRole.ADMIN)
        print("✅ Admin user created successfully!")
        print(f"📧 Email: {email}")

    except ParticipantDataError as e:
        print(f"❌ Error creating admin user: {e.message}")
        db.rollback()
    finally:
        db.close()

if __name__ == "__main__":
    create_admin_user(*sys.argv[1:3])
