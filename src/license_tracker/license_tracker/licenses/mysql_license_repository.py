from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LicenseStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern
from .model import License
from .repository import LicenseRepository

_COLUMNS = (
    "license_id, driver_id, driver_name, license_type, license_number, expiry_date, "
    "penalty_points, status, created_at, updated_at"
)


def _to_license(row: Dict[str, Any]) -> License:
    return License(
        license_id=int(row["license_id"]),
        driver_id=int(row["driver_id"]) if row.get("driver_id") is not None else None,
        driver_name=row["driver_name"],
        license_type=row["license_type"],
        license_number=row["license_number"],
        expiry_date=row["expiry_date"],
        penalty_points=int(row["penalty_points"]),
        status=LicenseStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class MySQLLicenseRepository(LicenseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO licenses(
                    driver_id, driver_name, license_type, license_number, expiry_date,
                    penalty_points, status, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    driver_id,
                    driver_name,
                    license_type,
                    license_number,
                    expiry_date,
                    int(penalty_points),
                    LicenseStatus.PENDING.value,
                    created_at,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, license_id: int) -> Optional[License]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM licenses WHERE license_id=%s", (int(license_id),))
            row = fetchone(cur)
            return _to_license(row) if row else None

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
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if driver_id is not None:
            clauses.append("driver_id=%s")
            params.append(int(driver_id))
        if license_type:
            clauses.append("license_type=%s")
            params.append(license_type)
        if term:
            pattern = like_pattern(term)
            clauses.append("(LOWER(driver_name) LIKE %s OR LOWER(license_number) LIKE %s)")
            params.extend([pattern, pattern])
        if expiry_from is not None:
            clauses.append("expiry_date>=%s")
            params.append(expiry_from)
        if expiry_to is not None:
            clauses.append("expiry_date<=%s")
            params.append(expiry_to)
        if min_points is not None:
            clauses.append("penalty_points>=%s")
            params.append(int(min_points))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM licenses
                WHERE {where}
                ORDER BY created_at DESC, license_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_license(r) for r in fetchall(cur)]

    def list_license_types(self, *, status: Optional[LicenseStatus] = None) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute("SELECT DISTINCT license_type FROM licenses ORDER BY license_type")
            else:
                cur.execute(
                    "SELECT DISTINCT license_type FROM licenses WHERE status=%s ORDER BY license_type",
                    (status.value,),
                )
            return [r["license_type"] for r in fetchall(cur)]

    def decide(self, *, license_id: int, status: LicenseStatus, updated_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE licenses
                SET status=%s, updated_at=%s
                WHERE license_id=%s AND status=%s
                """,
                (status.value, updated_at, int(license_id), LicenseStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def count(
        self,
        *,
        status: Optional[LicenseStatus] = None,
        expiry_from: Optional[date] = None,
        expiry_to: Optional[date] = None,
    ) -> int:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if expiry_from is not None:
            clauses.append("expiry_date>=%s")
            params.append(expiry_from)
        if expiry_to is not None:
            clauses.append("expiry_date<=%s")
            params.append(expiry_to)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM licenses WHERE {where}", tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
