"""Account creation, login and administration."""
from decimal import Decimal

import pytest

from app.core.exceptions import AuthenticationError, ConstraintViolation, RecordNotFound
from app.core.security import verify_password
from app.models.user import UserRole
from app.services import users as user_service

PASSWORD = "participant123"


def test_create_user_defaults(db):
    user = user_service.create_user(db, email="  Emily.Chen@Example.com ", name="Emily Chen", password=PASSWORD)

    assert user.email == "emily.chen@example.com"
    assert user.role == UserRole.PARTICIPANT
    assert Decimal(user.total_donations) == Decimal("0")
    assert user.login_count == 0
    assert user.password_hash != PASSWORD
    assert verify_password(PASSWORD, user.password_hash)


def test_create_user_needs_exactly_one_credential(db):
    with pytest.raises(ConstraintViolation):
        user_service.create_user(db, email="a@example.com", name="A")
    with pytest.raises(ConstraintViolation):
        user_service.create_user(db, email="a@example.com", name="A", password=PASSWORD, password_hash="$2b$x")


def test_short_password_rejected(db):
    with pytest.raises(ConstraintViolation):
        user_service.create_user(db, email="a@example.com", name="A", password="short")


def test_unknown_profile_field_rejected(db):
    with pytest.raises(ConstraintViolation):
        user_service.create_user(db, email="a@example.com", name="A", password=PASSWORD, total_donations=500)


def test_authenticate_counts_logins(db, user):
    user_service.authenticate(db, "jane.doe@example.com", PASSWORD)
    logged_in = user_service.authenticate(db, "JANE.DOE@example.com", PASSWORD)
    assert logged_in.login_count == 2


def test_authenticate_rejects_bad_credentials(db, user):
    with pytest.raises(AuthenticationError):
        user_service.authenticate(db, "jane.doe@example.com", "wrong-password")
    with pytest.raises(AuthenticationError):
        user_service.authenticate(db, "nobody@example.com", PASSWORD)

    db.expire_all()
    assert user_service.get_user(db, user.id).login_count == 0


def test_change_password(db, user):
    user_service.change_password(db, user.id, "a-new-password")
    user_service.authenticate(db, "jane.doe@example.com", "a-new-password")
    with pytest.raises(AuthenticationError):
        user_service.authenticate(db, "jane.doe@example.com", PASSWORD)


def test_update_profile_only_touches_profile_fields(db, user):
    updated = user_service.update_profile(db, user.id, city="Provo", state="UT")
    assert (updated.city, updated.state) == ("Provo", "UT")

    with pytest.raises(ConstraintViolation):
        user_service.update_profile(db, user.id, role="admin")


def test_set_role(db, user):
    assert user_service.set_role(db, user.id, UserRole.ADMIN).is_admin


def test_search(db, user, other_user, admin):
    assert [u.id for u in user_service.list_users(db, search="sarah")] == [other_user.id]
    assert [u.id for u in user_service.list_users(db, search="EXAMPLE.COM")] == [user.id, other_user.id]
    assert [u.id for u in user_service.list_users(db, role=UserRole.ADMIN)] == [admin.id]


def test_delete_missing_user(db):
    with pytest.raises(RecordNotFound):
        user_service.delete_user(db, 404)
