"""Appointment status transitions"""

import logging

from ...errors import InvalidTransitionError
from ...models import AppointmentStatus

logger = logging.getLogger(__name__)

# RESCHEDULED is a declared status that nothing transitions into yet
VALID_TRANSITIONS: dict[AppointmentStatus, set[AppointmentStatus]] = {
    AppointmentStatus.PENDING: {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CONFIRMED: {AppointmentStatus.CANCELLED},
    AppointmentStatus.RESCHEDULED: set(),
    AppointmentStatus.CANCELLED: set(),  # Terminal state
}


def validate_status_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    """
    Check an appointment status change against the transition table

    Appointment statuses: PENDING → CONFIRMED → CANCELLED, PENDING → CANCELLED

    Returns:
        bool: True if the transition is allowed
    """
    return new in VALID_TRANSITIONS.get(current, set())


def ensure_transition(appointment_id: str, current: AppointmentStatus, new: AppointmentStatus):
    if not validate_status_transition(current, new):
        logger.warning(
            f"⚠️ Rejected status change for {appointment_id}: {current.value} → {new.value}"
        )
        raise InvalidTransitionError(
            f"Cannot change status from {current.value} to {new.value}"
        )
