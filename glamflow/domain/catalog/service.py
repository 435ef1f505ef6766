"""Catalog service - mirrored services, staff, site settings and promo"""

import asyncio
import logging
from typing import Optional

from ...config import STORE_TIMEOUT_SECONDS
from ...errors import StoreUnavailableError
from ...models import Promo
from ...store import CONFIG, PROMO_DOC
from ...store.base import RecordStore, RecordStoreError
from ...sync import MirrorState
from .schemas import SiteSettingsResponse

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(
        self, mirror: MirrorState, store: RecordStore, timeout: float = STORE_TIMEOUT_SECONDS
    ):
        self.mirror = mirror
        self.store = store
        self.timeout = timeout

    def get_settings(self) -> SiteSettingsResponse:
        settings = self.mirror.site_settings
        return SiteSettingsResponse(
            **settings.model_dump(), acceptingBookings=settings.accepts_bookings
        )

    async def set_promo(self, message: Optional[str]) -> Promo:
        """Replace the promo banner; the mirror picks it up from the next push"""
        promo = Promo(message=(message or "").strip() or None)
        try:
            await asyncio.wait_for(
                self.store.set_document(CONFIG, PROMO_DOC, promo.model_dump()),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, RecordStoreError) as e:
            logger.error(f"❌ Failed to save promo: {e or type(e).__name__}")
            raise StoreUnavailableError(
                "Could not save to the database. Please check your connection and try again."
            ) from e

        logger.info(f"📢 Promo {'updated' if promo.message else 'cleared'}")
        return promo
