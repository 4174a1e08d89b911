import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS")
if not ALLOWED_ORIGINS_RAW:
    raise ValueError("ALLOWED_ORIGINS must be set in the environment")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in ALLOWED_ORIGINS_RAW.split(",")
]

# Status given to new bookings. Both count as blocking for overlap checks.
DEFAULT_RESERVATION_STATUS = os.getenv("DEFAULT_RESERVATION_STATUS", "PENDING").upper()
if DEFAULT_RESERVATION_STATUS not in ("PENDING", "CONFIRMED"):
    raise ValueError("DEFAULT_RESERVATION_STATUS must be PENDING or CONFIRMED")

# Calendar used to decide what "today" is for past-date checks
BOOKING_TIMEZONE = os.getenv("BOOKING_TIMEZONE", "UTC")

try:
    DB_TIMEOUT_SECONDS = float(os.getenv("DB_TIMEOUT_SECONDS", "5"))
    ROOM_LOCK_TIMEOUT_SECONDS = float(os.getenv("ROOM_LOCK_TIMEOUT_SECONDS", "5"))
except ValueError as exc:
    raise ValueError("DB_TIMEOUT_SECONDS and ROOM_LOCK_TIMEOUT_SECONDS must be numbers") from exc

AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "false").lower() == "true"
SEED_ROOMS = os.getenv("SEED_ROOMS", "false").lower() == "true"

MAX_GUESTS_PER_RESERVATION = 20
NOTES_MAX_LENGTH = 500
