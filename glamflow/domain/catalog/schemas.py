"""Catalog domain schemas"""

from typing import Optional

from pydantic import BaseModel, Field

from ...models import SiteSettings


class SiteSettingsResponse(SiteSettings):
    acceptingBookings: bool


class PromoUpdate(BaseModel):
    """None or blank clears the banner"""

    message: Optional[str] = Field(None, max_length=500)
