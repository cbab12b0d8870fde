"""Pytest configuration and fixtures."""
import os

# Must be set before app settings are imported
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.database.database import Base, configure_engine, get_db
from app.models.user import UserRole
from app.services.users import create_user

PASSWORD = "participant123"


@pytest.fixture(scope="session")
def require_db():
    """Skip tests that need a real database when DATABASE_URL is not set."""
    if not os.getenv("DATABASE_URL"):
        pytest.skip("DATABASE_URL not set; skipping integration test")


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with foreign keys enforced."""
    engine = configure_engine(
        create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return create_user(db, email="jane.doe@example.com", name="Jane Doe", password=PASSWORD)


@pytest.fixture
def other_user(db):
    return create_user(db, email="sarah.johnson@example.com", name="Sarah Johnson", password=PASSWORD)


@pytest.fixture
def admin(db):
    return create_user(
        db, email="admin@ellarises.org", name="Admin User", password="admin-password", role=UserRole.ADMIN
    )


@pytest.fixture
def client(db):
    from app.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
