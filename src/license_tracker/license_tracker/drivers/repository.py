from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import DriverStatus
from .model import Driver, NewDriver


class DriverRepository(Protocol):
    def get_by_id(self, driver_id: int) -> Optional[Driver]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Driver]:
        raise NotImplementedError

    def create(self, driver: NewDriver, *, created_at: datetime) -> int:
        raise NotImplementedError

    def update(self, driver_id: int, changes: Mapping[str, Any]) -> bool:
        """Apply a partial update; keys are Driver field names."""

        raise NotImplementedError

    def add_penalty_points(self, driver_id: int, points: int, note_line: str, *, cap: int) -> Optional[int]:
        """Add points (capped) and append a note line in one step.

        Returns the points held before the change, or None for an unknown driver.
        """

        raise NotImplementedError

    def delete_by_id(self, driver_id: int) -> bool:
        raise NotImplementedError

    def search(
        self,
        *,
        term: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[DriverStatus] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Driver]:
        raise NotImplementedError

    def count(
        self,
        *,
        term: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[DriverStatus] = None,
    ) -> int:
        raise NotImplementedError

    def list_departments(self) -> Sequence[str]:
        raise NotImplementedError
