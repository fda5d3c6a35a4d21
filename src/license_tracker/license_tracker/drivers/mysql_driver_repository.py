from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..core.enums import DriverStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern
from .model import Driver, NewDriver
from .repository import DriverRepository

_COLUMNS = (
    "driver_id, name, email, phone, address, license_number, license_type, license_expiry_date, "
    "penalty_points, employee_id, department, status, image_url, license_image_url, notes, created_at"
)

# Driver fields that may be changed through update().
_UPDATABLE = {
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
    "image_url",
    "license_image_url",
    "notes",
}


def _to_driver(row: Dict[str, Any]) -> Driver:
    return Driver(
        driver_id=int(row["driver_id"]),
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        address=row["address"],
        license_number=row["license_number"],
        license_type=row["license_type"],
        license_expiry_date=row["license_expiry_date"],
        penalty_points=int(row["penalty_points"]),
        employee_id=row["employee_id"],
        department=row["department"],
        status=DriverStatus(row["status"]),
        created_at=row["created_at"],
        image_url=row.get("image_url"),
        license_image_url=row.get("license_image_url"),
        notes=row.get("notes"),
    )


def _where(
    term: Optional[str], department: Optional[str], status: Optional[DriverStatus]
) -> Tuple[str, list]:
    clauses = ["1=1"]
    params: list[object] = []

    if term:
        pattern = like_pattern(term)
        clauses.append(
            "(LOWER(name) LIKE %s OR LOWER(email) LIKE %s OR LOWER(license_number) LIKE %s OR LOWER(employee_id) LIKE %s)"
        )
        params.extend([pattern] * 4)
    if department:
        clauses.append("department=%s")
        params.append(department)
    if status is not None:
        clauses.append("status=%s")
        params.append(status.value)

    return " AND ".join(clauses), params


class MySQLDriverRepository(DriverRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, driver_id: int) -> Optional[Driver]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM drivers WHERE driver_id=%s", (int(driver_id),))
            row = fetchone(cur)
            return _to_driver(row) if row else None

    def get_by_email(self, email: str) -> Optional[Driver]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM drivers WHERE LOWER(email)=%s ORDER BY driver_id LIMIT 1",
                (email.strip().lower(),),
            )
            row = fetchone(cur)
            return _to_driver(row) if row else None

    def create(self, driver: NewDriver, *, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO drivers(
                    name, email, phone, address, license_number, license_type, license_expiry_date,
                    penalty_points, employee_id, department, status, image_url, license_image_url,
                    notes, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    driver.name,
                    driver.email,
                    driver.phone,
                    driver.address,
                    driver.license_number,
                    driver.license_type,
                    driver.license_expiry_date,
                    int(driver.penalty_points),
                    driver.employee_id,
                    driver.department,
                    driver.status.value,
                    driver.image_url,
                    driver.license_image_url,
                    driver.notes,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def update(self, driver_id: int, changes: Mapping[str, Any]) -> bool:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported driver fields: {sorted(unknown)}")
        if not changes:
            return self.get_by_id(driver_id) is not None

        assignments = ", ".join(f"{col}=%s" for col in changes)
        params = [v.value if isinstance(v, DriverStatus) else v for v in changes.values()]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT driver_id FROM drivers WHERE driver_id=%s", (int(driver_id),))
            if not fetchone(cur):
                return False
            cur.execute(
                f"UPDATE drivers SET {assignments} WHERE driver_id=%s",
                tuple(params + [int(driver_id)]),
            )
            return True

    def add_penalty_points(self, driver_id: int, points: int, note_line: str, *, cap: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT penalty_points FROM drivers WHERE driver_id=%s FOR UPDATE", (int(driver_id),))
            row = fetchone(cur)
            if not row:
                return None
            cur.execute(
                """
                UPDATE drivers
                SET penalty_points = LEAST(penalty_points + %s, %s),
                    notes = IF(notes IS NULL OR notes = '', %s, CONCAT(notes, '\n\n', %s))
                WHERE driver_id=%s
                """,
                (int(points), int(cap), note_line, note_line, int(driver_id)),
            )
            return int(row["penalty_points"])

    def delete_by_id(self, driver_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM drivers WHERE driver_id=%s", (int(driver_id),))
            return cur.rowcount > 0

    def search(
        self,
        *,
        term: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[DriverStatus] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Driver]:
        where, params = _where(term, department, status)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM drivers
                WHERE {where}
                ORDER BY driver_id
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_driver(r) for r in fetchall(cur)]

    def count(
        self,
        *,
        term: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[DriverStatus] = None,
    ) -> int:
        where, params = _where(term, department, status)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM drivers WHERE {where}", tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def list_departments(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT department FROM drivers ORDER BY department")
            return [r["department"] for r in fetchall(cur)]
