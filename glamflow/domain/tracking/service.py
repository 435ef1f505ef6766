"""
Booking lookup by booking id, payment reference code or phone number.

The local mirror is searched first since it may already hold the booking;
the remote store is authoritative and is queried only when the mirror has no
match (it may be stale or not yet populated).
"""

import logging
from collections.abc import Iterable
from typing import Optional

from ...errors import AppointmentNotFoundError
from ...models import Appointment
from ...sync import MirrorState
from ..bookings.repository import AppointmentRepository
from .schemas import LookupSource

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Booking not found. Please check your Reference ID."


def most_recent(candidates: Iterable[Appointment]) -> Optional[Appointment]:
    """A phone number is shared across bookings; the latest date wins"""
    ordered = sorted(candidates, key=lambda a: a.date, reverse=True)
    return ordered[0] if ordered else None


def find_local(appointments: list[Appointment], key: str) -> Optional[Appointment]:
    folded = key.lower()
    for appointment in appointments:
        if appointment.id.lower() == folded:
            return appointment
    for appointment in appointments:
        if appointment.referenceCode and appointment.referenceCode.lower() == folded:
            return appointment
    return most_recent(a for a in appointments if a.clientPhone == key)


class LookupResolver:
    def __init__(self, mirror: MirrorState, repo: AppointmentRepository):
        self.mirror = mirror
        self.repo = repo

    async def resolve(self, key: str) -> tuple[Appointment, LookupSource]:
        """Return the best match and where it came from.

        Raises AppointmentNotFoundError when every key misses, or
        StoreUnavailableError when a remote query itself failed.
        """
        key = key.strip()
        if not key:
            raise AppointmentNotFoundError(NOT_FOUND_MESSAGE)

        local = find_local(self.mirror.appointments, key)
        if local:
            logger.debug(f"🔍 Lookup {key} resolved from mirror")
            return local, LookupSource.LOCAL

        logger.info(f"🔍 Lookup {key} not in mirror, querying store")
        remote = await self.find_remote(key)
        if remote:
            return remote, LookupSource.REMOTE

        raise AppointmentNotFoundError(NOT_FOUND_MESSAGE)

    async def find_remote(self, key: str) -> Optional[Appointment]:
        upper = key.upper()

        by_id = await self.repo.get(upper)
        if by_id:
            return by_id

        by_reference = await self.repo.find_by("referenceCode", upper)
        if by_reference:
            return by_reference[0]

        return most_recent(await self.repo.find_by("clientPhone", key))
