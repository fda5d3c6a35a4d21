from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    DRIVER = "driver"
    MANAGER = "manager"
    ADMIN = "admin"


class DriverStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


class LicenseStatus(str, Enum):
    """Review state of a license submission (pending -> approved/rejected)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"
