"""
Record store document models.

Field names match the stored documents (camelCase), the same way the public
form schemas accept camelCase payloads.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    RESCHEDULED = "RESCHEDULED"  # reserved, no transition leads here
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    GCASH = "GCASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    CASH = "CASH"


class Service(BaseModel):
    id: str
    name: str
    duration: int = Field(..., ge=0, description="Duration in minutes")
    price: float = Field(..., ge=0)
    category: str = ""
    image: str = ""


class Staff(BaseModel):
    id: str
    name: str
    role: str = ""
    rating: float = 0.0
    avatar: str = ""


class Appointment(BaseModel):
    id: str
    clientName: str
    clientPhone: str = ""
    clientEmail: str = ""
    serviceId: str
    staffId: str
    date: str = Field(..., description="ISO calendar date, YYYY-MM-DD")
    time: str = Field(..., description="Slot label, e.g. '09:00 AM'")
    status: AppointmentStatus = AppointmentStatus.PENDING
    paymentMethod: PaymentMethod = PaymentMethod.CASH
    referenceCode: Optional[str] = None
    paymentProof: Optional[str] = None
    totalAmount: float = 0.0
    createdAt: str
    rating: Optional[int] = Field(None, ge=1, le=5)
    feedback: Optional[str] = None
    notified: Optional[bool] = None
    note: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return datetime.date.fromisoformat(v).isoformat()

    @property
    def calendar_date(self) -> datetime.date:
        return datetime.date.fromisoformat(self.date)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class SiteSettings(BaseModel):
    """Singleton site configuration; every field has a safe default"""

    siteName: str = "GlamFlow"
    heroTitle: str = "Elevate your\ninner glow."
    heroSubtitle: str = (
        "Experience the fusion of Filipino hospitality and advanced Google AI. "
        "Your personalized beauty journey starts here."
    )
    aboutTitle: str = "AI Look Analysis"
    aboutContent: str = (
        "Upload a photo to let our Gemini Vision AI analyze your unique features "
        "and recommend the perfect treatment."
    )
    footerText: str = (
        "Premium beauty and wellness standards in Manila. Powered by intelligent booking systems."
    )
    contactEmail: str = "concierge@glamflow.ph"
    contactPhone: str = "+63 917 123 4567"
    whatsappNumber: str = "639171234567"
    bookingButtonText: str = "Book Appointment"
    footerTreatments: str = "Hair Styling\nSpa & Massage\nFacial Care\nNail Art"
    footerBookings: str = "My Account\nGift Cards"
    primaryColor: str = "#4285F4"
    gcashQr: Optional[str] = None
    bankQr: Optional[str] = None
    gcashName: Optional[str] = None
    bankName: Optional[str] = None
    bookingOpen: bool = True
    maintenanceMode: bool = False

    @property
    def accepts_bookings(self) -> bool:
        return self.bookingOpen and not self.maintenanceMode


class Promo(BaseModel):
    message: Optional[str] = None
