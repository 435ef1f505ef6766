"""Tracking router - public booking lookup"""

import logging

from fastapi import APIRouter, Depends

from ...dependencies import get_mirror, get_store
from ...rate_limiter import create_rate_limiter
from ...store.base import RecordStore
from ...sync import MirrorState
from ..bookings.repository import AppointmentRepository
from ..bookings.service import render_appointment
from .schemas import TrackingResult
from .service import LookupResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tracking", tags=["Tracking"])

rate_limit_tracking = create_rate_limiter(limit=30, window_seconds=60, key_prefix="tracking")


def get_lookup_resolver(
    mirror: MirrorState = Depends(get_mirror), store: RecordStore = Depends(get_store)
) -> LookupResolver:
    """Dependency injection for LookupResolver"""
    return LookupResolver(mirror, AppointmentRepository(store))


@router.get("/{key}", response_model=TrackingResult)
async def track_booking(
    key: str,
    resolver: LookupResolver = Depends(get_lookup_resolver),
    _: None = Depends(rate_limit_tracking),
):
    """Find a booking by id, payment reference or phone number"""
    appointment, source = await resolver.resolve(key)
    return TrackingResult(
        appointment=render_appointment(resolver.mirror, appointment),
        source=source,
    )
