from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import DriverStatus


@dataclass(frozen=True)
class Driver:
    driver_id: int
    name: str
    email: str
    phone: str
    address: str
    license_number: str
    license_type: str
    license_expiry_date: date
    penalty_points: int
    employee_id: str
    department: str
    status: DriverStatus
    created_at: datetime
    image_url: Optional[str] = None
    license_image_url: Optional[str] = None
    notes: Optional[str] = None

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in self.name.split() if part).upper()


@dataclass(frozen=True)
class DriverPage:
    """One page of the filtered driver roster."""

    items: Sequence[Driver]
    page: int
    total_pages: int
    total: int
    departments: Sequence[str] = field(default_factory=list)

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


@dataclass(frozen=True)
class PointsReport:
    driver_id: int
    points_added: int
    total_points: int
    exceeded_limit: bool
    high_risk: bool


@dataclass(frozen=True)
class NewDriver:
    """Validated input for a roster entry (everything but id and created_at)."""

    name: str
    email: str
    phone: str
    address: str
    license_number: str
    license_type: str
    license_expiry_date: date
    penalty_points: int
    employee_id: str
    department: str
    status: DriverStatus
    image_url: Optional[str] = None
    license_image_url: Optional[str] = None
    notes: Optional[str] = None
