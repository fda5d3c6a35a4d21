from __future__ import annotations

from datetime import datetime

import pytest

from license_tracker.container import assemble
from license_tracker.core.enums import Role
from license_tracker.users.service import SessionUser

from fakes import InMemoryDrivers, InMemoryLicenses, InMemoryNotifications, InMemoryUsers, make_user


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 30, 0)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            make_user(1, "John Driver", "driver@example.com", Role.DRIVER),
            make_user(2, "Sarah Manager", "manager@example.com", Role.MANAGER),
            make_user(3, "Admin User", "admin@example.com", Role.ADMIN),
        ]
    )


@pytest.fixture
def drivers_repo() -> InMemoryDrivers:
    return InMemoryDrivers()


@pytest.fixture
def licenses_repo() -> InMemoryLicenses:
    return InMemoryLicenses()


@pytest.fixture
def notifications_repo() -> InMemoryNotifications:
    return InMemoryNotifications()


@pytest.fixture
def container(users_repo, drivers_repo, licenses_repo, notifications_repo):
    return assemble(
        users_repo=users_repo,
        drivers_repo=drivers_repo,
        licenses_repo=licenses_repo,
        notifications_repo=notifications_repo,
    )


@pytest.fixture
def driver_user() -> SessionUser:
    return SessionUser(user_id=1, name="John Driver", email="driver@example.com", role=Role.DRIVER)


@pytest.fixture
def manager_user() -> SessionUser:
    return SessionUser(user_id=2, name="Sarah Manager", email="manager@example.com", role=Role.MANAGER)


@pytest.fixture
def admin_user() -> SessionUser:
    return SessionUser(user_id=3, name="Admin User", email="admin@example.com", role=Role.ADMIN)
