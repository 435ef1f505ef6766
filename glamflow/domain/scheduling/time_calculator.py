"""Fixed daily slot grid and slot label parsing"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

logger = logging.getLogger(__name__)

SLOT_FORMAT = "%I:%M %p"  # '09:00 AM'

TIME_SLOTS = (
    "09:00 AM",
    "10:00 AM",
    "11:00 AM",
    "12:00 PM",  # Lunch
    "01:00 PM",
    "02:00 PM",
    "03:00 PM",
    "04:00 PM",
    "05:00 PM",
)
LUNCH_SLOT = "12:00 PM"

# Client self-booking window, in days from today
BOOKING_WINDOW_DAYS = 30


def parse_time(value: str) -> Optional[time]:
    """Parse '09:00 AM', '9:00 AM' or '09:00' into a time"""
    if not value:
        return None
    value = value.strip().upper()
    for fmt in (SLOT_FORMAT, "%H:%M"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    logger.debug(f"Failed to parse time format: {value}")
    return None


def normalize_slot(value: str) -> Optional[str]:
    """Map any accepted time spelling onto its grid label, None if off-grid"""
    parsed = parse_time(value)
    if parsed is None:
        return None
    label = parsed.strftime(SLOT_FORMAT)
    return label if label in TIME_SLOTS else None


def is_lunch(slot: str) -> bool:
    return slot == LUNCH_SLOT


def parse_date(value: str) -> Optional[date]:
    """Parse 'YYYY-MM-DD', None if malformed"""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def normalize_date(value: str) -> Optional[str]:
    """Map any accepted date spelling onto 'YYYY-MM-DD', None if malformed"""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def booking_dates(today: date, days: int = BOOKING_WINDOW_DAYS) -> list[str]:
    return [(today + timedelta(days=i)).isoformat() for i in range(days)]
