"""Client service - booking history keyed by phone number"""

import logging
from datetime import date
from typing import Callable

from ...models import Appointment, AppointmentStatus
from ...sync import MirrorState

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, mirror: MirrorState, today: Callable[[], date] = date.today):
        self.mirror = mirror
        self.today = today

    def get_history(self, phone: str) -> tuple[list[Appointment], list[Appointment]]:
        """(upcoming, past) for one phone, each newest date first.

        Upcoming means today or later and not cancelled; everything else is past.
        """
        bookings = sorted(
            (a for a in self.mirror.appointments if a.clientPhone == phone),
            key=lambda a: a.date,
            reverse=True,
        )
        today = self.today().isoformat()
        upcoming = [
            a for a in bookings if a.date >= today and a.status != AppointmentStatus.CANCELLED
        ]
        past = [a for a in bookings if a not in upcoming]
        logger.debug(f"📋 History for {phone}: {len(upcoming)} upcoming, {len(past)} past")
        return upcoming, past
