from __future__ import annotations

import pytest

from license_tracker.core.enums import Role
from license_tracker.core.exceptions import AuthenticationError
from license_tracker.users.model import User
from license_tracker.users.service import AuthService, SessionUser

from fakes import InMemoryUsers, make_user


def test_authenticate_returns_session_user_without_password(users_repo):
    auth = AuthService(users_repo)

    s_user = auth.authenticate("manager@example.com", "password")

    assert s_user == SessionUser(user_id=2, name="Sarah Manager", email="manager@example.com", role=Role.MANAGER)
    assert "password" not in s_user.to_session()
    assert "password_hash" not in s_user.to_session()


def test_authenticate_ignores_email_case_and_whitespace(users_repo):
    auth = AuthService(users_repo)

    assert auth.authenticate("  Driver@Example.com ", "password").user_id == 1


def test_wrong_password_raises(users_repo):
    auth = AuthService(users_repo)

    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        auth.authenticate("driver@example.com", "wrong")


def test_unknown_email_raises(users_repo):
    with pytest.raises(AuthenticationError):
        AuthService(users_repo).authenticate("nobody@example.com", "password")


def test_inactive_user_cannot_sign_in():
    repo = InMemoryUsers([make_user(9, "Gone", "gone@example.com", Role.DRIVER, is_active=False)])

    with pytest.raises(AuthenticationError):
        AuthService(repo).authenticate("gone@example.com", "password")


def test_placeholder_hash_is_treated_as_wrong_password():
    repo = InMemoryUsers(
        [User(user_id=5, name="X", email="x@example.com", password_hash="CHANGE_ME", role=Role.ADMIN)]
    )

    with pytest.raises(AuthenticationError):
        AuthService(repo).authenticate("x@example.com", "CHANGE_ME")


def test_session_round_trip():
    s_user = SessionUser(user_id=3, name="Admin User", email="admin@example.com", role=Role.ADMIN)

    assert SessionUser.from_session(s_user.to_session()) == s_user
