"""
Local mirror of the watched record store resources.

Every push is a full snapshot and replaces what was held before. Services and
staff keep their previous content when a push arrives empty; the appointment
book accepts an empty push. Errors never clear mirrored data.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Union

from pydantic import ValidationError

from ..constants import DEFAULT_PROMO, DEFAULT_SERVICES, DEFAULT_STAFF, UNKNOWN_LABEL
from ..models import Appointment, Promo, Service, SiteSettings, Staff

logger = logging.getLogger(__name__)

Snapshot = Union[list[dict], Optional[dict]]
MirrorListener = Callable[["Resource"], None]


class Resource(str, Enum):
    APPOINTMENTS = "appointments"
    SERVICES = "services"
    STAFF = "staff"
    SITE_SETTINGS = "siteSettings"
    PROMO = "promo"


def _parse_all(model, docs: list[dict], resource: "Resource") -> list:
    parsed = []
    for doc in docs:
        try:
            parsed.append(model.model_validate(doc))
        except ValidationError as e:
            logger.warning(
                f"⚠️ Skipping malformed {resource.value} document {doc.get('id')}: "
                f"{e.error_count()} error(s)"
            )
    return parsed


class MirrorState:
    """In-memory copy of appointments, services, staff, site settings and promo"""

    def __init__(
        self,
        services: Optional[list[Service]] = None,
        staff: Optional[list[Staff]] = None,
    ):
        self.appointments: list[Appointment] = []
        self.services: list[Service] = list(DEFAULT_SERVICES if services is None else services)
        self.staff: list[Staff] = list(DEFAULT_STAFF if staff is None else staff)
        self.site_settings = SiteSettings()
        self.promo: Promo = DEFAULT_PROMO.model_copy()
        self.received: set[Resource] = set()
        self._failed: dict[Resource, str] = {}
        self._listeners: list[MirrorListener] = []

    @property
    def connected(self) -> bool:
        return not self._failed

    @property
    def failures(self) -> dict[str, str]:
        return {resource.value: reason for resource, reason in self._failed.items()}

    def apply(self, resource: Resource, snapshot: Snapshot) -> bool:
        """Replace the mirror of one resource; returns False when the push was rejected"""
        if resource is Resource.APPOINTMENTS:
            self.appointments = _parse_all(Appointment, snapshot or [], resource)
        elif resource in (Resource.SERVICES, Resource.STAFF):
            model = Service if resource is Resource.SERVICES else Staff
            items = _parse_all(model, snapshot or [], resource)
            if not items:
                logger.warning(f"⚠️ Ignoring empty {resource.value} snapshot, keeping previous")
                return False
            setattr(self, resource.value, items)
        elif resource is Resource.SITE_SETTINGS:
            if snapshot is None:
                return False
            try:
                self.site_settings = SiteSettings.model_validate(snapshot)
            except ValidationError as e:
                logger.warning(f"⚠️ Ignoring malformed site settings: {e.error_count()} error(s)")
                return False
        elif resource is Resource.PROMO:
            if snapshot is None:
                return False
            self.promo = Promo(message=snapshot.get("message"))

        self.received.add(resource)
        if self._failed.pop(resource, None) is not None:
            logger.info(f"✅ {resource.value} feed recovered")
        self._notify(resource)
        return True

    def mark_failed(self, resource: Resource, error: Exception) -> None:
        """Record a feed failure; mirrored data stays as last known good"""
        self._failed[resource] = str(error)
        logger.error(f"❌ {resource.value} feed failed, keeping last known state: {error}")
        self._notify(resource)

    def subscribe(self, listener: MirrorListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, resource: Resource) -> None:
        for listener in list(self._listeners):
            try:
                listener(resource)
            except Exception as e:
                logger.error(f"❌ Mirror listener failed for {resource.value}: {e}")

    # Read helpers -------------------------------------------------------

    def get_service(self, service_id: str) -> Optional[Service]:
        return next((s for s in self.services if s.id == service_id), None)

    def get_staff(self, staff_id: str) -> Optional[Staff]:
        return next((s for s in self.staff if s.id == staff_id), None)

    def get_appointment(self, appointment_id: str) -> Optional[Appointment]:
        return next((a for a in self.appointments if a.id == appointment_id), None)

    def service_name(self, service_id: str) -> str:
        service = self.get_service(service_id)
        return service.name if service else UNKNOWN_LABEL

    def staff_name(self, staff_id: str) -> str:
        member = self.get_staff(staff_id)
        return member.name if member else UNKNOWN_LABEL
