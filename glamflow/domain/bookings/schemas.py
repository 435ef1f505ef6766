"""Booking domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import Appointment, AppointmentStatus, PaymentMethod
from ...shared.validators import validate_email, validate_phone


class BookingCreate(BaseModel):
    """Client self-booking submission.

    Selections are optional at the schema level so a missing service, staff,
    slot or name is reported by the booking rules with a specific message.
    """

    serviceId: Optional[str] = None
    staffId: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    clientName: Optional[str] = None
    clientPhone: str
    clientEmail: Optional[str] = None
    paymentMethod: PaymentMethod = PaymentMethod.GCASH
    referenceCode: Optional[str] = None
    paymentProof: Optional[str] = None

    @field_validator("clientPhone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("clientEmail")
    @classmethod
    def check_email(cls, v):
        if v:
            return validate_email(v)
        return v


class BlockCreate(BaseModel):
    """Admin block / walk-in reservation"""

    staffId: str
    date: str
    time: str
    serviceId: str = ""
    clientName: str = "Walk-in / Blocked"
    clientPhone: str = "N/A"
    note: Optional[str] = Field(None, max_length=500)


class StatusUpdate(BaseModel):
    status: AppointmentStatus


class FeedbackCreate(BaseModel):
    clientPhone: str
    rating: int = Field(..., ge=1, le=5)
    feedback: Optional[str] = Field(None, max_length=2000)


class AppointmentResponse(Appointment):
    """Appointment with display names resolved from the mirror"""

    serviceName: str
    staffName: str


class BookingConfirmation(BaseModel):
    appointment: AppointmentResponse
    confirmationMessage: str


class DayStat(BaseModel):
    date: str
    name: str
    revenue: float
    bookings: int


class DashboardStats(BaseModel):
    totalRevenue: float
    pendingCount: int
    confirmedCount: int
    chart: list[DayStat]
    connected: bool
