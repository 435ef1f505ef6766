"""Record store clients"""

import logging

from ..config import STORE_BACKEND
from .base import (
    DocumentMissingError,
    RecordStore,
    RecordStoreError,
    SlotTakenError,
)
from .memory import InMemoryRecordStore

logger = logging.getLogger(__name__)

# Remote collection / document names
APPOINTMENTS = "appointments"
SERVICES = "services"
STAFF = "staff"
CONFIG = "config"
SITE_SETTINGS_DOC = "siteSettings"
PROMO_DOC = "promo"


def create_record_store(backend: str = STORE_BACKEND) -> RecordStore:
    """Build the configured record store client"""
    if backend == "memory":
        logger.info("📦 Using in-memory record store")
        return InMemoryRecordStore()

    from .firestore import FirestoreRecordStore

    logger.info("📦 Using Firestore record store")
    return FirestoreRecordStore()


__all__ = [
    "APPOINTMENTS",
    "CONFIG",
    "PROMO_DOC",
    "SERVICES",
    "SITE_SETTINGS_DOC",
    "STAFF",
    "DocumentMissingError",
    "InMemoryRecordStore",
    "RecordStore",
    "RecordStoreError",
    "SlotTakenError",
    "create_record_store",
]
