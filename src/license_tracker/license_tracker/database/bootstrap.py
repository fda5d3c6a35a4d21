from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_utc
from . import fixtures
from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)


def _connect(target: DBConfig, *, with_database: bool = True):
    return DatabaseConnection(target).connect(with_database=with_database)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to %s@%s/%s", target.user, target.host, target.database)


def _is_empty(cur, table: str) -> bool:
    cur.execute(f"SELECT COUNT(*) AS n FROM {table}")
    return int(cur.fetchone()["n"]) == 0


def seed_fixtures(db_config: dict, *, now: Optional[datetime] = None) -> list[str]:
    """Insert demo fixtures into every empty table; returns the tables seeded.

    Tables that already hold data are left alone, so restarting never
    overwrites what users changed.
    """

    target = DBConfig.from_dict(db_config)
    now = now or now_utc()
    seeded: list[str] = []

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        if _is_empty(cur, "users"):
            password_hash = generate_password_hash(fixtures.DEMO_PASSWORD)
            for u in fixtures.USERS:
                cur.execute(
                    "INSERT INTO users(name, email, password_hash, role, is_active) VALUES(%s,%s,%s,%s,1)",
                    (u["name"], u["email"], password_hash, u["role"]),
                )
            seeded.append("users")

        cur.execute("SELECT user_id, email FROM users")
        user_ids = {row["email"].lower(): int(row["user_id"]) for row in cur.fetchall()}

        if _is_empty(cur, "drivers"):
            for d in fixtures.drivers(now):
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
                        d["name"],
                        d["email"],
                        d["phone"],
                        d["address"],
                        d["license_number"],
                        d["license_type"],
                        d["license_expiry_date"],
                        d["penalty_points"],
                        d["employee_id"],
                        d["department"],
                        d["status"],
                        d.get("image_url"),
                        fixtures.default_license_image(d),
                        d.get("notes"),
                        d["created_at"],
                    ),
                )
            seeded.append("drivers")

        if _is_empty(cur, "licenses"):
            for lic in fixtures.licenses(now):
                email = lic["driver_email"]
                cur.execute(
                    """
                    INSERT INTO licenses(
                        driver_id, driver_name, license_type, license_number, expiry_date,
                        penalty_points, status, created_at, updated_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        user_ids.get(email.lower()) if email else None,
                        lic["driver_name"],
                        lic["license_type"],
                        lic["license_number"],
                        lic["expiry_date"],
                        lic["penalty_points"],
                        lic["status"],
                        lic["created_at"],
                        lic["updated_at"],
                    ),
                )
            seeded.append("licenses")

        if _is_empty(cur, "notifications"):
            for n in fixtures.notifications(now):
                user_id = user_ids.get(n["email"].lower())
                if user_id is None:
                    continue
                cur.execute(
                    "INSERT INTO notifications(user_id, message, type, is_read, created_at) VALUES(%s,%s,%s,%s,%s)",
                    (user_id, n["message"], n["type"], int(n["read"]), n["created_at"]),
                )
            seeded.append("notifications")

        conn.commit()
    finally:
        conn.close()

    logger.info("Seeded tables: %s", ", ".join(seeded) or "none (all tables already populated)")
    return seeded


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
