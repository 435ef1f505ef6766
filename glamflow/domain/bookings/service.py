"""Booking service - appointment lifecycle rules"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

from ...errors import (
    AppointmentNotFoundError,
    BookingClosedError,
    BookingValidationError,
    SlotUnavailableError,
)
from ...models import Appointment, AppointmentStatus, PaymentMethod, Service, Staff
from ...services.concierge_service import ConciergeService, confirmation_fallback
from ...sync import MirrorState
from ..scheduling.availability_service import AvailabilityService
from ..scheduling.schemas import SlotState
from ..scheduling.time_calculator import is_lunch, normalize_date, normalize_slot, parse_time
from .identifiers import generate_block_id, generate_booking_id
from .repository import AppointmentRepository
from .schemas import (
    AppointmentResponse,
    BlockCreate,
    BookingCreate,
    DashboardStats,
    DayStat,
    FeedbackCreate,
)
from .state_machine import ensure_transition

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def render_appointment(mirror: MirrorState, appointment: Appointment) -> AppointmentResponse:
    """Appointment plus service and staff display names"""
    return AppointmentResponse(
        **appointment.model_dump(),
        serviceName=mirror.service_name(appointment.serviceId),
        staffName=mirror.staff_name(appointment.staffId),
    )


class BookingService:
    """Service layer for booking business logic"""

    def __init__(
        self,
        mirror: MirrorState,
        repo: AppointmentRepository,
        concierge: Optional[ConciergeService] = None,
        today: Callable[[], date] = date.today,
    ):
        self.mirror = mirror
        self.repo = repo
        self.concierge = concierge
        self.today = today
        self.availability = AvailabilityService(mirror)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_booking(self, data: BookingCreate) -> tuple[Appointment, str]:
        """Client self-booking: validate selections, reserve the slot, write PENDING"""
        if not self.mirror.site_settings.accepts_bookings:
            logger.info("🚫 Booking attempt while bookings are closed")
            raise BookingClosedError("Online booking is currently unavailable.")

        service = self._require_service(data.serviceId)
        staff = self._require_staff(data.staffId)
        day = self._require_date(data.date)
        slot = self._require_open_slot(staff.id, day, data.time)
        name = (data.clientName or "").strip()
        if not name:
            raise BookingValidationError("Please enter your name")
        reference = (data.referenceCode or "").strip()
        if data.paymentMethod != PaymentMethod.CASH and not reference:
            raise BookingValidationError("Please enter your payment reference code")

        appointment = Appointment(
            id=generate_booking_id(),
            clientName=name,
            clientPhone=data.clientPhone,
            clientEmail=data.clientEmail or "",
            serviceId=service.id,
            staffId=staff.id,
            date=day,
            time=slot,
            status=AppointmentStatus.PENDING,
            paymentMethod=data.paymentMethod,
            referenceCode=reference or None,
            paymentProof=data.paymentProof or None,
            totalAmount=service.price,
            createdAt=utc_now_iso(),
        )

        logger.info(f"📥 Booking {appointment.id}: {service.id} with {staff.id} on {day} {slot}")
        await self.repo.reserve(appointment)
        logger.info(f"✅ Booking {appointment.id} saved")

        if self.concierge is not None:
            message = await self.concierge.booking_confirmation(
                appointment, service.name, staff.name
            )
        else:
            message = confirmation_fallback(appointment, service.name)
        return appointment, message

    async def create_block(self, data: BlockCreate) -> Appointment:
        """Admin block / walk-in: CONFIRMED, zero amount, placeholder contact"""
        staff = self._require_staff(data.staffId)
        day = self._require_date(data.date)
        slot = self._require_open_slot(staff.id, day, data.time)

        appointment = Appointment(
            id=generate_block_id(),
            clientName=data.clientName.strip() or "Walk-in / Blocked",
            clientPhone=data.clientPhone,
            clientEmail="",
            serviceId=data.serviceId,
            staffId=staff.id,
            date=day,
            time=slot,
            status=AppointmentStatus.CONFIRMED,
            paymentMethod=PaymentMethod.CASH,
            referenceCode=None,
            note=(data.note or "").strip() or None,
            totalAmount=0,
            createdAt=utc_now_iso(),
        )

        await self.repo.reserve(appointment)
        logger.info(f"✅ Block {appointment.id} holds {staff.id} {day} {slot}")
        return appointment

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def change_status(
        self, appointment_id: str, new_status: AppointmentStatus
    ) -> Appointment:
        """Apply a validated status transition"""
        appointment = await self._require_appointment(appointment_id)
        ensure_transition(appointment.id, appointment.status, new_status)

        await self.repo.update_fields(appointment.id, {"status": new_status.value})
        logger.info(
            f"✅ Appointment {appointment.id}: {appointment.status.value} → {new_status.value}"
        )
        return appointment.model_copy(update={"status": new_status})

    async def delete_appointment(self, appointment_id: str) -> dict:
        await self._require_appointment(appointment_id)
        await self.repo.delete(appointment_id)
        logger.info(f"🗑️ Appointment {appointment_id} deleted")
        return {"message": "Appointment deleted"}

    async def attach_feedback(self, appointment_id: str, data: FeedbackCreate) -> Appointment:
        """Rating and feedback, only once the appointment date has passed"""
        appointment = await self._require_appointment(appointment_id)
        if appointment.clientPhone != data.clientPhone.strip():
            raise AppointmentNotFoundError("Appointment not found")
        if appointment.calendar_date >= self.today():
            raise BookingValidationError("Feedback opens after your appointment date")

        fields = {"rating": data.rating}
        if data.feedback is not None:
            fields["feedback"] = data.feedback.strip()
        await self.repo.update_fields(appointment.id, fields)
        logger.info(f"⭐ Feedback on {appointment.id}: {data.rating}/5")
        return appointment.model_copy(update=fields)

    # ------------------------------------------------------------------
    # Admin views
    # ------------------------------------------------------------------

    def get_day_view(self, day: str) -> list[Appointment]:
        return sorted(
            (a for a in self.mirror.appointments if a.date == day),
            key=lambda a: parse_time(a.time) or time.max,
        )

    def get_stats(self) -> DashboardStats:
        live = [a for a in self.mirror.appointments if a.status != AppointmentStatus.CANCELLED]

        chart = []
        today = self.today()
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            day_str = day.isoformat()
            day_apps = [a for a in live if a.date == day_str]
            chart.append(
                DayStat(
                    date=day_str,
                    name=day.strftime("%a"),
                    revenue=sum(a.totalAmount for a in day_apps),
                    bookings=len(day_apps),
                )
            )

        return DashboardStats(
            totalRevenue=sum(a.totalAmount for a in live),
            pendingCount=sum(
                1 for a in self.mirror.appointments if a.status == AppointmentStatus.PENDING
            ),
            confirmedCount=sum(
                1 for a in self.mirror.appointments if a.status == AppointmentStatus.CONFIRMED
            ),
            chart=chart,
            connected=self.mirror.connected,
        )

    def to_response(self, appointment: Appointment) -> AppointmentResponse:
        return render_appointment(self.mirror, appointment)

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _require_service(self, service_id: Optional[str]) -> Service:
        if not service_id:
            raise BookingValidationError("Please select a service")
        service = self.mirror.get_service(service_id)
        if not service:
            raise BookingValidationError(f"Unknown service: {service_id}")
        return service

    def _require_staff(self, staff_id: Optional[str]) -> Staff:
        if not staff_id:
            raise BookingValidationError("Please select a staff member")
        staff = self.mirror.get_staff(staff_id)
        if not staff:
            raise BookingValidationError(f"Unknown staff member: {staff_id}")
        return staff

    @staticmethod
    def _require_date(value: Optional[str]) -> str:
        day = normalize_date(value)
        if day is None:
            raise BookingValidationError("Please select a valid date (YYYY-MM-DD)")
        return day

    def _require_open_slot(self, staff_id: str, day: str, value: Optional[str]) -> str:
        if not value:
            raise BookingValidationError("Please select a time slot")
        slot = normalize_slot(value)
        if slot is None:
            raise BookingValidationError(f"{value} is not a bookable time slot")
        if is_lunch(slot):
            raise SlotUnavailableError(f"{slot} is reserved for lunch")
        if self.availability.slot_state(staff_id, day, slot) == SlotState.BOOKED:
            raise SlotUnavailableError(
                "The selected time slot is already booked. Please choose a different time."
            )
        return slot

    async def _require_appointment(self, appointment_id: str) -> Appointment:
        appointment = await self.repo.get(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError("Appointment not found")
        return appointment
