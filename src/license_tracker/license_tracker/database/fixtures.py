"""Demo data loaded into empty tables on first start.

Relative dates are computed from `today`/`now` so the near-expiry and
pending views always have something to show.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.constants import DEFAULT_LICENSE_IMAGE

DEMO_PASSWORD = "password"

USERS = [
    {"name": "John Driver", "email": "driver@example.com", "role": "driver"},
    {"name": "Sarah Manager", "email": "manager@example.com", "role": "manager"},
    {"name": "Admin User", "email": "admin@example.com", "role": "admin"},
]


def drivers(now: datetime) -> list[dict]:
    return [
        {
            "name": "John Smith",
            "email": "john.smith@example.com",
            "phone": "085-123-4567",
            "address": "123 Main Street, Cork",
            "license_number": "CK12345678",
            "license_type": "Class B",
            "license_expiry_date": date(2025, 6, 15),
            "penalty_points": 2,
            "employee_id": "EMP001",
            "department": "Waste Management",
            "status": "active",
            "image_url": "https://randomuser.me/api/portraits/men/1.jpg",
            "notes": "Experienced driver with good safety record",
            "created_at": datetime(2022, 4, 10, 9, 0),
        },
        {
            "name": "Sarah O'Connor",
            "email": "sarah.oconnor@example.com",
            "phone": "086-234-5678",
            "address": "45 High Street, Cork",
            "license_number": "CK23456789",
            "license_type": "Class C",
            "license_expiry_date": date(2024, 9, 20),
            "penalty_points": 4,
            "employee_id": "EMP002",
            "department": "Parks and Recreation",
            "status": "active",
            "image_url": "https://randomuser.me/api/portraits/women/2.jpg",
            "notes": "Specialist in heavy machinery operation",
            "created_at": datetime(2021, 8, 15, 14, 30),
        },
        {
            "name": "Michael Ryan",
            "email": "michael.ryan@example.com",
            "phone": "087-345-6789",
            "address": "78 River View, Cork",
            "license_number": "CK34567890",
            "license_type": "Class D",
            "license_expiry_date": date(2023, 12, 5),
            "penalty_points": 8,
            "employee_id": "EMP003",
            "department": "Road Maintenance",
            "status": "suspended",
            "image_url": "https://randomuser.me/api/portraits/men/3.jpg",
            "notes": "Recent traffic violation, under review",
            "created_at": datetime(2022, 1, 18, 10, 15),
        },
        {
            "name": "Emma Murphy",
            "email": "emma.murphy@example.com",
            "phone": "085-456-7890",
            "address": "12 Oak Avenue, Cork",
            "license_number": "CK45678901",
            "license_type": "Class B",
            "license_expiry_date": date(2025, 3, 28),
            "penalty_points": 0,
            "employee_id": "EMP004",
            "department": "Water Services",
            "status": "active",
            "image_url": "https://randomuser.me/api/portraits/women/4.jpg",
            "notes": "Perfect driving record",
            "created_at": datetime(2022, 6, 22, 8, 45),
        },
        # Roster entry for the demo driver account, so self-reported points have a target.
        {
            "name": "John Driver",
            "email": "driver@example.com",
            "phone": "083-555-0100",
            "address": "9 Quay Street, Cork",
            "license_number": "D12345678",
            "license_type": "Car",
            "license_expiry_date": (now + timedelta(days=420)).date(),
            "penalty_points": 3,
            "employee_id": "EMP005",
            "department": "Waste Management",
            "status": "active",
            "image_url": None,
            "notes": None,
            "created_at": datetime(2023, 6, 15, 10, 30),
        },
    ]


def licenses(now: datetime) -> list[dict]:
    """`driver_email` links a submission to a user account (None for roster-only drivers)."""

    today = now.date()

    def in_days(n: int) -> date:
        return today + timedelta(days=n)

    def ago(n: int) -> datetime:
        return now - timedelta(days=n)

    rows = [
        ("driver@example.com", "John Driver", "Car", "D12345678", date(2024, 12, 25), 3, "approved",
         datetime(2023, 6, 15, 10, 30), datetime(2023, 6, 15, 14, 45)),
        (None, "Mike Smith", "Truck", "T98765432", date(2024, 8, 10), 8, "approved",
         datetime(2023, 5, 20, 9, 15), datetime(2023, 5, 21, 11, 30)),
        (None, "Lisa Jones", "Bus", "B55443322", in_days(60), 2, "pending",
         datetime(2023, 6, 28, 16, 20), datetime(2023, 6, 28, 16, 20)),
        (None, "Sarah Connor", "Motorcycle", "M12345678", in_days(120), 0, "pending", ago(2), ago(2)),
        (None, "Robert Chen", "Commercial", "C87654321", in_days(180), 1, "pending", ago(3), ago(3)),
        (None, "Emily Rivera", "HGV", "H55566677", in_days(90), 3, "pending", ago(1), ago(1)),
        (None, "David Kim", "PSV", "P33344455", in_days(150), 0, "pending", ago(4), ago(4)),
        (None, "Karen Williams", "HGV", "H98765432", in_days(200), 2, "pending", ago(1), ago(1)),
        (None, "James Wilson", "Car", "C44556677", in_days(300), 1, "pending", ago(2), ago(2)),
    ]
    keys = (
        "driver_email",
        "driver_name",
        "license_type",
        "license_number",
        "expiry_date",
        "penalty_points",
        "status",
        "created_at",
        "updated_at",
    )
    return [dict(zip(keys, row)) for row in rows]


def notifications(now: datetime) -> list[dict]:
    def ago(n: int) -> datetime:
        return now - timedelta(days=n)

    manager = "manager@example.com"
    return [
        {"email": manager, "message": "New license submission requires your approval", "type": "info",
         "read": False, "created_at": datetime(2023, 6, 28, 16, 25)},
        {"email": "driver@example.com", "message": "Your license is approved", "type": "success",
         "read": True, "created_at": datetime(2023, 6, 15, 15, 0)},
        {"email": manager, "message": "Driver Mike Smith has 8 penalty points", "type": "warning",
         "read": False, "created_at": datetime(2023, 5, 21, 11, 35)},
        {"email": manager, "message": "New license submission from Sarah Connor requires approval",
         "type": "info", "read": False, "created_at": ago(2)},
        {"email": manager, "message": "New license submission from Robert Chen requires approval",
         "type": "info", "read": False, "created_at": ago(3)},
        {"email": manager, "message": "New license submission from Emily Rivera requires approval",
         "type": "info", "read": False, "created_at": ago(1)},
        {"email": manager, "message": "New license submission from David Kim requires approval",
         "type": "info", "read": False, "created_at": ago(4)},
    ]


def default_license_image(row: dict) -> str:
    return row.get("license_image_url") or DEFAULT_LICENSE_IMAGE
