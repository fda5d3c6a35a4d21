from __future__ import annotations

from dataclasses import dataclass

from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .drivers.mysql_driver_repository import MySQLDriverRepository
from .drivers.repository import DriverRepository
from .drivers.service import DriverService
from .licenses.mysql_license_repository import MySQLLicenseRepository
from .licenses.repository import LicenseRepository
from .licenses.service import LicenseService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    drivers_repo: DriverRepository
    licenses_repo: LicenseRepository
    notifications_repo: NotificationRepository

    auth_service: AuthService
    driver_service: DriverService
    license_service: LicenseService
    notification_service: NotificationService
    dashboard_service: DashboardService


def assemble(
    *,
    users_repo: UserRepository,
    drivers_repo: DriverRepository,
    licenses_repo: LicenseRepository,
    notifications_repo: NotificationRepository,
) -> Container:
    """Wire services on top of the given repositories."""

    auth_service = AuthService(users_repo)
    notification_service = NotificationService(notifications_repo)
    driver_service = DriverService(drivers_repo, licenses_repo, users_repo)
    license_service = LicenseService(licenses_repo, users_repo, notification_service)
    dashboard_service = DashboardService(license_service, driver_service)

    return Container(
        users_repo=users_repo,
        drivers_repo=drivers_repo,
        licenses_repo=licenses_repo,
        notifications_repo=notifications_repo,
        auth_service=auth_service,
        driver_service=driver_service,
        license_service=license_service,
        notification_service=notification_service,
        dashboard_service=dashboard_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        users_repo=MySQLUserRepository(conn),
        drivers_repo=MySQLDriverRepository(conn),
        licenses_repo=MySQLLicenseRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
    )
