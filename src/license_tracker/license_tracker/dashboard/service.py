from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..core.constants import DASHBOARD_EXPIRY_DAYS
from ..core.enums import LicenseStatus, Role
from ..drivers.service import DriverService
from ..licenses.model import License
from ..licenses.service import LicenseRowUI, LicenseService
from ..users.service import SessionUser


@dataclass(frozen=True)
class DashboardView:
    role: Role
    total_licenses: int = 0
    pending_count: int = 0
    expiring_count: int = 0
    expired_count: int = 0
    active_drivers: int = 0
    high_penalty: Sequence[License] = field(default_factory=list)
    my_licenses: Sequence[LicenseRowUI] = field(default_factory=list)
    expiry_days: int = DASHBOARD_EXPIRY_DAYS


class DashboardService:
    """Read-only aggregation for the landing page after sign in."""

    def __init__(self, licenses: LicenseService, drivers: DriverService, *, expiry_days: int = DASHBOARD_EXPIRY_DAYS):
        self._licenses = licenses
        self._drivers = drivers
        self._expiry_days = int(expiry_days)

    def build(self, *, current_user: SessionUser, today: Optional[date] = None) -> DashboardView:
        today = today or date.today()

        if current_user.role == Role.DRIVER:
            rows = [
                LicenseService.to_row(lic, today=today, expiry_days=self._expiry_days)
                for lic in self._licenses.driver_licenses(driver_id=current_user.user_id)
            ]
            return DashboardView(
                role=current_user.role,
                total_licenses=len(rows),
                pending_count=sum(1 for r in rows if r.license.status == LicenseStatus.PENDING),
                expiring_count=sum(1 for r in rows if r.is_expiring),
                expired_count=sum(1 for r in rows if r.is_expired),
                my_licenses=rows,
                expiry_days=self._expiry_days,
            )

        return DashboardView(
            role=current_user.role,
            total_licenses=self._licenses.count(),
            pending_count=self._licenses.count(status=LicenseStatus.PENDING),
            expiring_count=self._licenses.count_near_expiry(today=today, days=self._expiry_days),
            expired_count=self._licenses.count_expired(today=today),
            active_drivers=self._drivers.count_active(),
            high_penalty=list(self._licenses.high_penalty_licenses()),
            expiry_days=self._expiry_days,
        )
