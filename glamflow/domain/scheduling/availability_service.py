"""
Slot availability over the mirrored appointment book.

Slots are atomic: a booking holds exactly one slot whatever the service
duration. Availability is scoped by staff and date only, never by service.
"""

import logging
from collections.abc import Iterable

from ...models import Appointment, AppointmentStatus
from ...sync import MirrorState
from .schemas import SlotAvailability, SlotState
from .time_calculator import TIME_SLOTS, is_lunch

logger = logging.getLogger(__name__)


def booked_slots(appointments: Iterable[Appointment], staff_id: str, day: str) -> set[str]:
    """Slot labels held by non-cancelled appointments for this staff and date"""
    return {
        a.time
        for a in appointments
        if a.date == day and a.staffId == staff_id and a.status != AppointmentStatus.CANCELLED
    }


def compute_availability(
    appointments: Iterable[Appointment], staff_id: str, day: str
) -> list[SlotAvailability]:
    taken = booked_slots(appointments, staff_id, day)
    grid = []
    for slot in TIME_SLOTS:
        if is_lunch(slot):
            state = SlotState.BLOCKED
        elif slot in taken:
            state = SlotState.BOOKED
        else:
            state = SlotState.AVAILABLE
        grid.append(SlotAvailability(time=slot, state=state))
    return grid


class AvailabilityService:
    """Availability reads against the live mirror"""

    def __init__(self, mirror: MirrorState):
        self.mirror = mirror

    def get_day(self, staff_id: str, day: str) -> list[SlotAvailability]:
        return compute_availability(self.mirror.appointments, staff_id, day)

    def slot_state(self, staff_id: str, day: str, slot: str) -> SlotState:
        for entry in self.get_day(staff_id, day):
            if entry.time == slot:
                return entry.state
        return SlotState.BLOCKED
