"""Client domain schemas"""

from pydantic import BaseModel

from ..bookings.schemas import AppointmentResponse


class ClientHistoryResponse(BaseModel):
    clientPhone: str
    upcoming: list[AppointmentResponse]
    past: list[AppointmentResponse]
