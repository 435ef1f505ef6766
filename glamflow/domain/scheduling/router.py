"""Scheduling router - public slot availability"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from ...dependencies import get_mirror
from ...sync import MirrorState
from .availability_service import AvailabilityService
from .schemas import DayAvailabilityResponse
from .time_calculator import LUNCH_SLOT, TIME_SLOTS, booking_dates, normalize_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/availability", tags=["Availability"])


def get_availability_service(mirror: MirrorState = Depends(get_mirror)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(mirror)


@router.get("", response_model=DayAvailabilityResponse)
async def get_day_availability(
    staff_id: str = Query(...),
    date: str = Query(..., description="YYYY-MM-DD"),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Slot grid for one staff member on one date"""
    day = normalize_date(date)
    if day is None:
        raise HTTPException(status_code=400, detail="Invalid date format. Expected YYYY-MM-DD")

    return DayAvailabilityResponse(
        staffId=staff_id, date=day, slots=service.get_day(staff_id, day)
    )


@router.get("/grid")
async def get_slot_grid():
    """The fixed daily slots and the bookable date window"""
    return {
        "slots": list(TIME_SLOTS),
        "lunchSlot": LUNCH_SLOT,
        "dates": booking_dates(date.today()),
    }
