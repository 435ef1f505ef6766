"""Client router - client portal booking history"""

import logging

from fastapi import APIRouter, Depends

from ...dependencies import get_mirror
from ...rate_limiter import create_rate_limiter
from ...sync import MirrorState
from ..bookings.service import render_appointment
from .schemas import ClientHistoryResponse
from .service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings/portal", tags=["Clients"])

rate_limit_portal = create_rate_limiter(limit=30, window_seconds=60, key_prefix="portal")


def get_client_service(mirror: MirrorState = Depends(get_mirror)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(mirror)


@router.get("/{phone}", response_model=ClientHistoryResponse)
async def get_client_history(
    phone: str,
    service: ClientService = Depends(get_client_service),
    _: None = Depends(rate_limit_portal),
):
    """Upcoming and past bookings for a phone number"""
    phone = phone.strip()
    upcoming, past = service.get_history(phone)
    return ClientHistoryResponse(
        clientPhone=phone,
        upcoming=[render_appointment(service.mirror, a) for a in upcoming],
        past=[render_appointment(service.mirror, a) for a in past],
    )
