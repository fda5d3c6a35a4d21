from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LicenseStatus
from .model import License


class LicenseRepository(Protocol):
    def create(
        self,
        *,
        driver_id: Optional[int],
        driver_name: str,
        license_type: str,
        license_number: str,
        expiry_date: date,
        penalty_points: int,
        created_at: datetime,
    ) -> int:
        """Insert a pending submission and return its id."""

        raise NotImplementedError

    def get_by_id(self, license_id: int) -> Optional[License]:
        raise NotImplementedError

    def list_licenses(
        self,
        *,
        status: Optional[LicenseStatus] = None,
        driver_id: Optional[int] = None,
        license_type: Optional[str] = None,
        term: Optional[str] = None,
        expiry_from: Optional[date] = None,
        expiry_to: Optional[date] = None,
        min_points: Optional[int] = None,
        limit: int = 500,
    ) -> Sequence[License]:
        """Filtered listing, newest submission first.

        `term` matches driver name or license number (case-insensitive substring),
        `expiry_from`/`expiry_to` are inclusive bounds.
        """

        raise NotImplementedError

    def list_license_types(self, *, status: Optional[LicenseStatus] = None) -> Sequence[str]:
        raise NotImplementedError

    def decide(self, *, license_id: int, status: LicenseStatus, updated_at: datetime) -> bool:
        """Move a pending license to `status`; False when it is not pending (or missing)."""

        raise NotImplementedError

    def count(
        self,
        *,
        status: Optional[LicenseStatus] = None,
        expiry_from: Optional[date] = None,
        expiry_to: Optional[date] = None,
    ) -> int:
        raise NotImplementedError
