from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional, Sequence

from ..common.datetime_utils import days_until, is_expired, is_within_days, now_utc
from ..common.validators import require_date, require_non_empty, require_penalty_points
from ..core.constants import DASHBOARD_EXPIRY_DAYS, HIGH_PENALTY_THRESHOLD, NEAR_EXPIRY_DAYS
from ..core.enums import LicenseStatus, NotificationType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from ..users.service import SessionUser
from .model import License
from .repository import LicenseRepository

logger = logging.getLogger(__name__)

ALL = "all"


@dataclass(frozen=True)
class LicenseRowUI:
    """A license plus the flags the templates colour by."""

    license: License
    days_until_expiry: int
    is_expiring: bool
    is_expired: bool
    is_high_penalty: bool


class LicenseService:
    """Use cases around license submissions: submit, review, and derived lists."""

    def __init__(
        self,
        licenses: LicenseRepository,
        users: UserRepository,
        notifications: NotificationService,
    ):
        self._licenses = licenses
        self._users = users
        self._notifications = notifications

    def _manager_ids(self) -> list[int]:
        return [u.user_id for u in self._users.list_by_role(Role.MANAGER)]

    def submit_license(
        self,
        *,
        current_user: SessionUser,
        license_type: str,
        license_number: str,
        expiry_date: Any,
        penalty_points: Any,
        now: Optional[datetime] = None,
    ) -> int:
        if current_user.role != Role.DRIVER:
            raise AuthorizationError("Only drivers can submit license details")

        license_type = require_non_empty(license_type, "License type")
        license_number = require_non_empty(license_number, "License number")
        expiry = require_date(expiry_date, "Expiry date")
        points = require_penalty_points(penalty_points)

        now = now or now_utc()
        license_id = self._licenses.create(
            driver_id=current_user.user_id,
            driver_name=current_user.name,
            license_type=license_type,
            license_number=license_number,
            expiry_date=expiry,
            penalty_points=points,
            created_at=now,
        )
        logger.info("License %s submitted by user %s", license_id, current_user.user_id)

        managers = self._manager_ids()
        self._notifications.notify_many(
            user_ids=managers,
            message=f"New license submission from {current_user.name} requires approval",
            type=NotificationType.INFO,
            now=now,
        )
        if points >= HIGH_PENALTY_THRESHOLD:
            self._notifications.notify_many(
                user_ids=managers,
                message=f"Driver {current_user.name} has {points} penalty points",
                type=NotificationType.WARNING,
                now=now,
            )
        return license_id

    def update_license_status(
        self,
        *,
        current_role: Role,
        license_id: int,
        status: LicenseStatus,
        now: Optional[datetime] = None,
    ) -> License:
        if current_role != Role.MANAGER:
            raise AuthorizationError("Only managers can review license submissions")
        if status not in (LicenseStatus.APPROVED, LicenseStatus.REJECTED):
            raise ValidationError("A license can only be approved or rejected")

        lic = self._licenses.get_by_id(int(license_id))
        if not lic:
            raise NotFoundError("License not found")
        if lic.status != LicenseStatus.PENDING:
            raise ValidationError("This license has already been reviewed")

        now = now or now_utc()
        if not self._licenses.decide(license_id=lic.license_id, status=status, updated_at=now):
            raise ValidationError("This license has already been reviewed")

        if lic.driver_id is not None:
            self._notifications.notify(
                user_id=lic.driver_id,
                message=f"Your license has been {status.value}",
                type=NotificationType.SUCCESS if status == LicenseStatus.APPROVED else NotificationType.ERROR,
                now=now,
            )

        logger.info("License %s %s", lic.license_id, status.value)
        return self._licenses.get_by_id(lic.license_id) or lic

    def approve(self, *, current_role: Role, license_id: int, now: Optional[datetime] = None) -> License:
        return self.update_license_status(
            current_role=current_role, license_id=license_id, status=LicenseStatus.APPROVED, now=now
        )

    def reject(self, *, current_role: Role, license_id: int, now: Optional[datetime] = None) -> License:
        return self.update_license_status(
            current_role=current_role, license_id=license_id, status=LicenseStatus.REJECTED, now=now
        )

    def pending_licenses(self, *, search: str = "", license_type: str = ALL) -> Sequence[License]:
        lt = (license_type or "").strip()
        return self._licenses.list_licenses(
            status=LicenseStatus.PENDING,
            term=(search or "").strip() or None,
            license_type=None if not lt or lt == ALL else lt,
        )

    def pending_license_types(self) -> Sequence[str]:
        return list(self._licenses.list_license_types(status=LicenseStatus.PENDING))

    def driver_licenses(self, *, driver_id: int) -> Sequence[License]:
        return self._licenses.list_licenses(driver_id=int(driver_id))

    def has_pending(self, *, driver_id: int) -> bool:
        return bool(self._licenses.list_licenses(driver_id=int(driver_id), status=LicenseStatus.PENDING, limit=1))

    def licenses_near_expiry(self, *, today: Optional[date] = None, days: int = NEAR_EXPIRY_DAYS) -> Sequence[License]:
        today = today or date.today()
        return self._licenses.list_licenses(expiry_from=today, expiry_to=today + timedelta(days=int(days)))

    def count_near_expiry(self, *, today: Optional[date] = None, days: int = NEAR_EXPIRY_DAYS) -> int:
        today = today or date.today()
        return self._licenses.count(expiry_from=today, expiry_to=today + timedelta(days=int(days)))

    def count_expired(self, *, today: Optional[date] = None) -> int:
        today = today or date.today()
        return self._licenses.count(expiry_to=today - timedelta(days=1))

    def high_penalty_licenses(self) -> Sequence[License]:
        return self._licenses.list_licenses(min_points=HIGH_PENALTY_THRESHOLD)

    def count(self, *, status: Optional[LicenseStatus] = None) -> int:
        return self._licenses.count(status=status)

    @staticmethod
    def to_row(lic: License, *, today: date, expiry_days: int = DASHBOARD_EXPIRY_DAYS) -> LicenseRowUI:
        return LicenseRowUI(
            license=lic,
            days_until_expiry=days_until(lic.expiry_date, today),
            is_expiring=is_within_days(lic.expiry_date, today, expiry_days),
            is_expired=is_expired(lic.expiry_date, today),
            is_high_penalty=lic.penalty_points >= HIGH_PENALTY_THRESHOLD,
        )
