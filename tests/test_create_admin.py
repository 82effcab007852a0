"""
Tests for the admin bootstrap script.
"""
import pytest

from conftest import TestSessionLocal
from mockhire.db.models.user import User, UserRole
from mockhire.services import ledger_service
from scripts import create_admin as create_admin_script


@pytest.fixture(autouse=True)
def use_test_sessions(db, monkeypatch):
    monkeypatch.setattr(create_admin_script, "SessionLocal", TestSessionLocal)


def test_create_new_admin_with_points(db):
    assert create_admin_script.create_admin("Root@Example.com", "testpass123", initial_points=50)

    user = db.query(User).filter(User.email == "root@example.com").one()
    assert user.role == UserRole.ADMIN
    assert ledger_service.get_balance(db, user.id) == 50


def test_promote_existing_user(db, candidate):
    assert create_admin_script.create_admin(candidate.email)

    db.expire_all()
    assert db.query(User).filter(User.id == candidate.id).one().role == UserRole.ADMIN


def test_missing_user_without_password(db):
    assert create_admin_script.create_admin("nobody@example.com") is False
    assert db.query(User).count() == 0


def test_promote_matches_email_case_insensitively(db, candidate):
    assert create_admin_script.create_admin("Candidate@Example.COM")

    db.expire_all()
    users = db.query(User).all()
    assert len(users) == 1
    assert users[0].role == UserRole.ADMIN
