"""Tracking domain schemas"""

from enum import Enum

from pydantic import BaseModel

from ..bookings.schemas import AppointmentResponse


class LookupSource(str, Enum):
    LOCAL = "Local Cache"
    REMOTE = "Cloud Database"


class TrackingResult(BaseModel):
    appointment: AppointmentResponse
    source: LookupSource
