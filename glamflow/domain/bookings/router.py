"""Booking router - FastAPI endpoints for client bookings and admin management"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ...auth import require_admin
from ...dependencies import get_concierge, get_mirror, get_store
from ...rate_limiter import create_rate_limiter
from ...services.concierge_service import ConciergeService
from ...store.base import RecordStore
from ...sync import MirrorState
from ..scheduling.time_calculator import normalize_date
from .repository import AppointmentRepository
from .schemas import (
    AppointmentResponse,
    BlockCreate,
    BookingConfirmation,
    BookingCreate,
    DashboardStats,
    FeedbackCreate,
    StatusUpdate,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])
admin_router = APIRouter(
    prefix="/admin/bookings", tags=["Admin Bookings"], dependencies=[Depends(require_admin)]
)

rate_limit_bookings = create_rate_limiter(limit=10, window_seconds=60, key_prefix="bookings")


def get_booking_service(
    mirror: MirrorState = Depends(get_mirror),
    store: RecordStore = Depends(get_store),
    concierge: ConciergeService = Depends(get_concierge),
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(mirror, AppointmentRepository(store), concierge)


# ============================================================================
# CLIENT ENDPOINTS
# ============================================================================


@router.post("", response_model=BookingConfirmation, status_code=201)
async def create_booking(
    data: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    _: None = Depends(rate_limit_bookings),
):
    """Create a PENDING booking for the selected service, staff and slot"""
    appointment, message = await service.create_booking(data)
    return BookingConfirmation(
        appointment=service.to_response(appointment), confirmationMessage=message
    )


@router.post("/{appointment_id}/feedback", response_model=AppointmentResponse)
async def submit_feedback(
    appointment_id: str,
    data: FeedbackCreate,
    service: BookingService = Depends(get_booking_service),
    _: None = Depends(rate_limit_bookings),
):
    """Rate a past appointment"""
    appointment = await service.attach_feedback(appointment_id, data)
    return service.to_response(appointment)


# ============================================================================
# ADMIN ENDPOINTS
# ============================================================================


@admin_router.get("", response_model=list[AppointmentResponse])
async def get_day_view(
    date: str = Query(..., description="YYYY-MM-DD"),
    service: BookingService = Depends(get_booking_service),
):
    """Appointments on one date, sorted by slot"""
    day = normalize_date(date)
    if day is None:
        raise HTTPException(status_code=400, detail="Invalid date format. Expected YYYY-MM-DD")
    return [service.to_response(a) for a in service.get_day_view(day)]


@admin_router.get("/stats", response_model=DashboardStats)
async def get_stats(service: BookingService = Depends(get_booking_service)):
    """Revenue, status counts and the last 7 days"""
    return service.get_stats()


@admin_router.post("/blocks", response_model=AppointmentResponse, status_code=201)
async def create_block(data: BlockCreate, service: BookingService = Depends(get_booking_service)):
    """Block a slot or record a walk-in"""
    appointment = await service.create_block(data)
    return service.to_response(appointment)


@admin_router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_status(
    appointment_id: str,
    data: StatusUpdate,
    service: BookingService = Depends(get_booking_service),
):
    appointment = await service.change_status(appointment_id, data.status)
    return service.to_response(appointment)


@admin_router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: str, service: BookingService = Depends(get_booking_service)
):
    return await service.delete_appointment(appointment_id)
