from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from ..common.datetime_utils import days_until, is_expired, is_within_days, now_utc
from ..common.validators import (
    require_date,
    require_email,
    require_max_length,
    require_min_length,
    require_non_empty,
    require_penalty_points,
)
from ..core.constants import (
    DEFAULT_LICENSE_IMAGE,
    DRIVERS_PAGE_SIZE,
    HIGH_PENALTY_THRESHOLD,
    MAX_PENALTY_POINTS,
    NEAR_EXPIRY_DAYS,
)
from ..core.enums import DriverStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..licenses.model import License
from ..licenses.repository import LicenseRepository
from ..users.repository import UserRepository
from ..users.service import SessionUser
from .model import Driver, DriverPage, NewDriver, PointsReport
from .repository import DriverRepository

logger = logging.getLogger(__name__)

ALL = "all"


def is_high_penalty(points: int) -> bool:
    return int(points) >= HIGH_PENALTY_THRESHOLD


def is_near_expiry(expiry: date, today: date, days: int = NEAR_EXPIRY_DAYS) -> bool:
    return is_within_days(expiry, today, days)


def _parse_status(value: Any) -> DriverStatus:
    if isinstance(value, DriverStatus):
        return value
    try:
        return DriverStatus(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError("Status must be active, suspended or inactive")


def _optional_text(value: Any) -> Optional[str]:
    text = str(value or "").strip()
    return text or None


# Field name -> validator returning the cleaned value.
_RULES: Dict[str, Callable[[Any], Any]] = {
    "name": lambda v: require_min_length(v, "Name", 2),
    "email": lambda v: require_email(v),
    "phone": lambda v: require_min_length(v, "Phone number", 7),
    "address": lambda v: require_min_length(v, "Address", 5),
    "license_number": lambda v: require_min_length(v, "License number", 3),
    "license_type": lambda v: require_non_empty(v, "License type"),
    "license_expiry_date": lambda v: require_date(v, "Expiry date"),
    "penalty_points": lambda v: require_penalty_points(v),
    "employee_id": lambda v: require_min_length(v, "Employee ID", 2),
    "department": lambda v: require_non_empty(v, "Department"),
    "status": _parse_status,
    "image_url": _optional_text,
    "license_image_url": _optional_text,
    "notes": _optional_text,
}

_REQUIRED = (
    "name",
    "email",
    "phone",
    "address",
    "license_number",
    "license_type",
    "license_expiry_date",
    "penalty_points",
    "employee_id",
    "department",
    "status",
)


class DriverService:
    """Use case: manage the driver roster (admin) and self-reported points (driver)."""

    def __init__(
        self,
        drivers: DriverRepository,
        licenses: Optional[LicenseRepository] = None,
        users: Optional[UserRepository] = None,
        *,
        page_size: int = DRIVERS_PAGE_SIZE,
    ):
        self._drivers = drivers
        self._licenses = licenses
        self._users = users
        self._page_size = int(page_size)

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can manage drivers")

    @staticmethod
    def clean(data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
        """Validate driver form data; with partial=True only the given fields are checked."""

        out: Dict[str, Any] = {}
        for key, value in data.items():
            rule = _RULES.get(key)
            if rule is None:
                continue
            out[key] = rule(value)

        if not partial:
            for key in _REQUIRED:
                if key not in out:
                    out[key] = _RULES[key](data.get(key))
        return out

    def add_driver(self, *, current_role: Role, data: Mapping[str, Any], now: Optional[datetime] = None) -> int:
        self._require_admin(current_role)

        payload = dict(data)
        payload.setdefault("status", DriverStatus.ACTIVE.value)
        cleaned = self.clean(payload)
        cleaned["license_image_url"] = cleaned.get("license_image_url") or DEFAULT_LICENSE_IMAGE

        new_driver = NewDriver(
            name=cleaned["name"],
            email=cleaned["email"],
            phone=cleaned["phone"],
            address=cleaned["address"],
            license_number=cleaned["license_number"],
            license_type=cleaned["license_type"],
            license_expiry_date=cleaned["license_expiry_date"],
            penalty_points=cleaned["penalty_points"],
            employee_id=cleaned["employee_id"],
            department=cleaned["department"],
            status=cleaned["status"],
            image_url=cleaned.get("image_url"),
            license_image_url=cleaned["license_image_url"],
            notes=cleaned.get("notes"),
        )
        driver_id = self._drivers.create(new_driver, created_at=now or now_utc())
        logger.info("Driver %s added (id=%s)", new_driver.name, driver_id)
        return driver_id

    def update_driver(self, *, current_role: Role, driver_id: int, data: Mapping[str, Any]) -> Driver:
        self._require_admin(current_role)

        if not self._drivers.get_by_id(int(driver_id)):
            raise NotFoundError("Driver not found")

        changes = self.clean(data, partial=True)
        if "license_image_url" in changes and not changes["license_image_url"]:
            changes["license_image_url"] = DEFAULT_LICENSE_IMAGE

        if not self._drivers.update(int(driver_id), changes):
            raise NotFoundError("Driver not found")

        driver = self.get_driver(int(driver_id))
        logger.info("Driver %s updated (id=%s, fields=%s)", driver.name, driver_id, sorted(changes))
        return driver

    def delete_driver(self, *, current_role: Role, driver_id: int) -> Driver:
        self._require_admin(current_role)

        driver = self._drivers.get_by_id(int(driver_id))
        if not driver:
            raise NotFoundError("Driver not found")
        if not self._drivers.delete_by_id(int(driver_id)):
            raise NotFoundError("Driver not found")

        logger.info("Driver %s deleted (id=%s)", driver.name, driver_id)
        return driver

    def get_driver(self, driver_id: int) -> Driver:
        driver = self._drivers.get_by_id(int(driver_id))
        if not driver:
            raise NotFoundError("Driver not found")
        return driver

    def list_departments(self) -> Sequence[str]:
        return sorted(set(self._drivers.list_departments()))

    def list_drivers(
        self,
        *,
        search: str = "",
        department: str = ALL,
        status: str = ALL,
        page: int = 1,
    ) -> DriverPage:
        term = (search or "").strip() or None
        dept = (department or "").strip()
        dept_filter = None if not dept or dept == ALL else dept

        status_s = (status or "").strip().lower()
        status_filter = None if not status_s or status_s == ALL else _parse_status(status_s)

        total = self._drivers.count(term=term, department=dept_filter, status=status_filter)
        total_pages = max(1, math.ceil(total / self._page_size))
        try:
            page = int(page)
        except (TypeError, ValueError):
            page = 1
        page = min(max(1, page), total_pages)

        items = self._drivers.search(
            term=term,
            department=dept_filter,
            status=status_filter,
            limit=self._page_size,
            offset=(page - 1) * self._page_size,
        )
        return DriverPage(
            items=list(items),
            page=page,
            total_pages=total_pages,
            total=total,
            departments=self.list_departments(),
        )

    def count_active(self) -> int:
        return self._drivers.count(status=DriverStatus.ACTIVE)

    def driver_licenses(self, driver: Driver) -> Sequence[License]:
        """License submissions that belong to a roster entry.

        Matched through the account sharing the driver's email, plus any
        submission filed under the driver's name.
        """

        if self._licenses is None:
            return []

        found: Dict[int, License] = {}
        if self._users is not None:
            account = self._users.get_by_email(driver.email)
            if account:
                for lic in self._licenses.list_licenses(driver_id=account.user_id):
                    found[lic.license_id] = lic

        name = driver.name.strip().lower()
        for lic in self._licenses.list_licenses(term=driver.name):
            if lic.driver_name.strip().lower() == name:
                found[lic.license_id] = lic

        return sorted(found.values(), key=lambda lic: (lic.created_at, lic.license_id), reverse=True)

    def report_penalty_points(
        self,
        *,
        current_user: SessionUser,
        points: Any,
        reason: str,
        today: Optional[date] = None,
    ) -> PointsReport:
        if current_user.role != Role.DRIVER:
            raise AuthorizationError("Only drivers can report penalty points")

        points = require_penalty_points(points, "Points", min_value=1)
        reason = require_min_length(reason, "Reason", 3)
        require_max_length(reason, "Reason", 500)

        driver = self._drivers.get_by_email(current_user.email) if current_user.email else None
        if not driver:
            raise NotFoundError("Driver record not found for your account")

        today = today or date.today()
        line = f"{today.isoformat()}: {points} points added - {reason}"

        before = self._drivers.add_penalty_points(driver.driver_id, points, line, cap=MAX_PENALTY_POINTS)
        updated = self._drivers.get_by_id(driver.driver_id) if before is not None else None
        if updated is None:
            raise NotFoundError("Driver record not found for your account")

        exceeded = before + points > MAX_PENALTY_POINTS
        total = updated.penalty_points
        logger.info(
            "Driver %s reported %s points (total=%s, exceeded=%s)", driver.driver_id, points, total, exceeded
        )

        return PointsReport(
            driver_id=driver.driver_id,
            points_added=points,
            total_points=total,
            exceeded_limit=exceeded,
            high_risk=is_high_penalty(total),
        )

    @staticmethod
    def expiry_info(driver: Driver, today: Optional[date] = None) -> dict:
        today = today or date.today()
        return {
            "days_until_expiry": days_until(driver.license_expiry_date, today),
            "near_expiry": is_near_expiry(driver.license_expiry_date, today),
            "expired": is_expired(driver.license_expiry_date, today),
            "high_penalty": is_high_penalty(driver.penalty_points),
        }
