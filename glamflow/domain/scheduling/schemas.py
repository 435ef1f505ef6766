"""Scheduling domain schemas"""

from enum import Enum

from pydantic import BaseModel


class SlotState(str, Enum):
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    BLOCKED = "BLOCKED"


class SlotAvailability(BaseModel):
    time: str
    state: SlotState


class DayAvailabilityResponse(BaseModel):
    staffId: str
    date: str
    slots: list[SlotAvailability]
