"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7

MAX_PENALTY_POINTS = 12
HIGH_PENALTY_THRESHOLD = 7

NEAR_EXPIRY_DAYS = 90
DASHBOARD_EXPIRY_DAYS = 30

DRIVERS_PAGE_SIZE = 8

DEFAULT_LICENSE_IMAGE = (
    "https://res.cloudinary.com/dfjv35kht/image/upload/v1742397639/Driver_licence_number_ezde8n.png"
)
