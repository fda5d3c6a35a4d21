from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LicenseStatus


@dataclass(frozen=True)
class License:
    license_id: int
    driver_id: Optional[int]
    driver_name: str
    license_type: str
    license_number: str
    expiry_date: date
    penalty_points: int
    status: LicenseStatus
    created_at: datetime
    updated_at: datetime
