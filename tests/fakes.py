from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any, Mapping, Optional

from werkzeug.security import generate_password_hash

from license_tracker.core.enums import DriverStatus, LicenseStatus, NotificationType, Role
from license_tracker.drivers.model import Driver, NewDriver
from license_tracker.licenses.model import License
from license_tracker.notifications.model import Notification
from license_tracker.users.model import User


class InMemoryUsers:
    def __init__(self, users=()):
        self._users: dict[int, User] = {u.user_id: u for u in users}

    def add(self, user: User) -> User:
        self._users[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        key = email.strip().lower()
        return next((u for u in self._users.values() if u.email.lower() == key), None)

    def list_by_role(self, role: Role):
        return [u for u in sorted(self._users.values(), key=lambda u: u.user_id) if u.role == role and u.is_active]


class InMemoryDrivers:
    def __init__(self):
        self._drivers: dict[int, Driver] = {}
        self._next_id = 1

    def create(self, driver: NewDriver, *, created_at: datetime) -> int:
        driver_id = self._next_id
        self._next_id += 1
        self._drivers[driver_id] = Driver(driver_id=driver_id, created_at=created_at, **vars(driver))
        return driver_id

    def get_by_id(self, driver_id: int) -> Optional[Driver]:
        return self._drivers.get(int(driver_id))

    def get_by_email(self, email: str) -> Optional[Driver]:
        key = email.strip().lower()
        return next((d for d in self._drivers.values() if d.email.lower() == key), None)

    def update(self, driver_id: int, changes: Mapping[str, Any]) -> bool:
        current = self._drivers.get(int(driver_id))
        if current is None:
            return False
        self._drivers[int(driver_id)] = replace(current, **dict(changes))
        return True

    def add_penalty_points(self, driver_id: int, points: int, note_line: str, *, cap: int) -> Optional[int]:
        current = self._drivers.get(int(driver_id))
        if current is None:
            return None
        notes = f"{current.notes}\n\n{note_line}" if current.notes else note_line
        self._drivers[int(driver_id)] = replace(
            current, penalty_points=min(current.penalty_points + int(points), cap), notes=notes
        )
        return current.penalty_points

    def delete_by_id(self, driver_id: int) -> bool:
        return self._drivers.pop(int(driver_id), None) is not None

    def _filtered(self, term, department, status):
        items = sorted(self._drivers.values(), key=lambda d: d.driver_id)
        if term:
            t = term.lower()
            items = [
                d
                for d in items
                if t in d.name.lower()
                or t in d.email.lower()
                or t in d.license_number.lower()
                or t in d.employee_id.lower()
            ]
        if department:
            items = [d for d in items if d.department == department]
        if status is not None:
            items = [d for d in items if d.status == status]
        return items

    def search(self, *, term=None, department=None, status=None, limit=200, offset=0):
        return self._filtered(term, department, status)[offset : offset + limit]

    def count(self, *, term=None, department=None, status=None) -> int:
        return len(self._filtered(term, department, status))

    def list_departments(self):
        return sorted({d.department for d in self._drivers.values()})


class InMemoryLicenses:
    def __init__(self):
        self._licenses: dict[int, License] = {}
        self._next_id = 1

    def create(self, *, driver_id, driver_name, license_type, license_number, expiry_date, penalty_points, created_at):
        return self.add(
            driver_id=driver_id,
            driver_name=driver_name,
            license_type=license_type,
            license_number=license_number,
            expiry_date=expiry_date,
            penalty_points=penalty_points,
            created_at=created_at,
        ).license_id

    def add(
        self,
        *,
        driver_id: Optional[int],
        driver_name: str,
        license_type: str = "Car",
        license_number: str = "D00000000",
        expiry_date: date = date(2030, 1, 1),
        penalty_points: int = 0,
        status: LicenseStatus = LicenseStatus.PENDING,
        created_at: datetime = datetime(2026, 1, 1, 9, 0),
    ) -> License:
        lic = License(
            license_id=self._next_id,
            driver_id=driver_id,
            driver_name=driver_name,
            license_type=license_type,
            license_number=license_number,
            expiry_date=expiry_date,
            penalty_points=penalty_points,
            status=status,
            created_at=created_at,
            updated_at=created_at,
        )
        self._licenses[lic.license_id] = lic
        self._next_id += 1
        return lic

    def get_by_id(self, license_id: int) -> Optional[License]:
        return self._licenses.get(int(license_id))

    def list_licenses(
        self,
        *,
        status=None,
        driver_id=None,
        license_type=None,
        term=None,
        expiry_from=None,
        expiry_to=None,
        min_points=None,
        limit=500,
    ):
        items = list(self._licenses.values())
        if status is not None:
            items = [lic for lic in items if lic.status == status]
        if driver_id is not None:
            items = [lic for lic in items if lic.driver_id == int(driver_id)]
        if license_type:
            items = [lic for lic in items if lic.license_type == license_type]
        if term:
            t = term.lower()
            items = [lic for lic in items if t in lic.driver_name.lower() or t in lic.license_number.lower()]
        if expiry_from is not None:
            items = [lic for lic in items if lic.expiry_date >= expiry_from]
        if expiry_to is not None:
            items = [lic for lic in items if lic.expiry_date <= expiry_to]
        if min_points is not None:
            items = [lic for lic in items if lic.penalty_points >= min_points]
        items.sort(key=lambda lic: (lic.created_at, lic.license_id), reverse=True)
        return items[:limit]

    def list_license_types(self, *, status=None):
        return sorted({lic.license_type for lic in self.list_licenses(status=status)})

    def decide(self, *, license_id, status, updated_at) -> bool:
        lic = self._licenses.get(int(license_id))
        if not lic or lic.status != LicenseStatus.PENDING:
            return False
        self._licenses[lic.license_id] = replace(lic, status=status, updated_at=updated_at)
        return True

    def count(self, *, status=None, expiry_from=None, expiry_to=None) -> int:
        return len(self.list_licenses(status=status, expiry_from=expiry_from, expiry_to=expiry_to, limit=10**6))


class InMemoryNotifications:
    def __init__(self):
        self._items: dict[int, Notification] = {}
        self._next_id = 1

    def create(self, *, user_id: int, message: str, type: NotificationType, created_at: datetime) -> int:
        nid = self._next_id
        self._next_id += 1
        self._items[nid] = Notification(
            notification_id=nid,
            user_id=int(user_id),
            message=message,
            type=type,
            read=False,
            created_at=created_at,
        )
        return nid

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        return self._items.get(int(notification_id))

    def list_for_user(self, user_id: int, *, limit: int = 200):
        items = [n for n in self._items.values() if n.user_id == int(user_id)]
        items.sort(key=lambda n: (n.created_at, n.notification_id), reverse=True)
        return items[:limit]

    def mark_read(self, notification_id: int) -> bool:
        n = self._items.get(int(notification_id))
        if not n:
            return False
        self._items[n.notification_id] = replace(n, read=True)
        return True

    def delete_for_user(self, user_id: int) -> int:
        doomed = [nid for nid, n in self._items.items() if n.user_id == int(user_id)]
        for nid in doomed:
            del self._items[nid]
        return len(doomed)

    def count_unread(self, user_id: int) -> int:
        return sum(1 for n in self._items.values() if n.user_id == int(user_id) and not n.read)

    def all(self):
        return list(self._items.values())


_PASSWORD_HASH = generate_password_hash("password")


def make_user(user_id: int, name: str, email: str, role: Role, *, is_active: bool = True) -> User:
    return User(
        user_id=user_id,
        name=name,
        email=email,
        password_hash=_PASSWORD_HASH,
        role=role,
        is_active=is_active,
    )


def driver_form(**overrides) -> dict:
    data = {
        "name": "John Smith",
        "email": "john.smith@example.com",
        "phone": "085-123-4567",
        "address": "123 Main Street, Cork",
        "license_number": "CK12345678",
        "license_type": "Class B",
        "license_expiry_date": "2027-06-15",
        "penalty_points": "2",
        "employee_id": "EMP001",
        "department": "Waste Management",
        "status": DriverStatus.ACTIVE.value,
        "notes": "",
    }
    data.update(overrides)
    return data
