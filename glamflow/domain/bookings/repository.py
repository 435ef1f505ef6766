"""Appointment repository - record store operations with timeouts and write retries"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from pydantic import ValidationError

from ...config import STORE_RETRY_BACKOFF_SECONDS, STORE_TIMEOUT_SECONDS, STORE_WRITE_RETRIES
from ...errors import AppointmentNotFoundError, SlotUnavailableError, StoreUnavailableError
from ...models import Appointment, AppointmentStatus
from ...store import APPOINTMENTS
from ...store.base import DocumentMissingError, RecordStore, RecordStoreError, SlotTakenError

logger = logging.getLogger(__name__)

SLOT_FIELDS = ("staffId", "date", "time")
RELEASED_STATUSES = (AppointmentStatus.CANCELLED.value,)


class AppointmentRepository:
    """Repository for appointment documents in the remote store"""

    def __init__(
        self,
        store: RecordStore,
        timeout: float = STORE_TIMEOUT_SECONDS,
        retries: int = STORE_WRITE_RETRIES,
        backoff: float = STORE_RETRY_BACKOFF_SECONDS,
    ):
        self.store = store
        self.timeout = timeout
        self.retries = max(1, retries)
        self.backoff = backoff

    # Writes ------------------------------------------------------------

    async def reserve(self, appointment: Appointment) -> None:
        """Create-or-replace the appointment only if its slot is free"""
        try:
            await self._write(
                f"reserve {appointment.id}",
                lambda: self.store.create_if_slot_free(
                    APPOINTMENTS,
                    appointment.id,
                    appointment.to_document(),
                    SLOT_FIELDS,
                    RELEASED_STATUSES,
                ),
            )
        except SlotTakenError as e:
            logger.warning(
                f"⚠️ Slot {appointment.staffId} {appointment.date} {appointment.time} "
                f"already held by {e.holder_id}"
            )
            raise SlotUnavailableError(
                "The selected time slot was just booked. Please choose a different time."
            ) from e

    async def update_fields(self, appointment_id: str, fields: dict) -> None:
        try:
            await self._write(
                f"update {appointment_id}",
                lambda: self.store.update_document(APPOINTMENTS, appointment_id, fields),
            )
        except DocumentMissingError as e:
            raise AppointmentNotFoundError("Appointment not found") from e

    async def delete(self, appointment_id: str) -> None:
        await self._write(
            f"delete {appointment_id}",
            lambda: self.store.delete_document(APPOINTMENTS, appointment_id),
        )

    # Reads -------------------------------------------------------------

    async def get(self, appointment_id: str) -> Optional[Appointment]:
        doc = await self._read(
            f"get {appointment_id}",
            lambda: self.store.get_document(APPOINTMENTS, appointment_id),
        )
        return self._parse(doc) if doc else None

    async def find_by(self, field: str, value: Any) -> list[Appointment]:
        docs = await self._read(
            f"query {field}", lambda: self.store.query(APPOINTMENTS, field, value)
        )
        parsed = [self._parse(d) for d in docs]
        return [a for a in parsed if a is not None]

    # Internals ---------------------------------------------------------

    @staticmethod
    def _parse(doc: dict) -> Optional[Appointment]:
        try:
            return Appointment.model_validate(doc)
        except ValidationError as e:
            logger.warning(f"⚠️ Malformed appointment {doc.get('id')}: {e.error_count()} error(s)")
            return None

    async def _read(self, label: str, call: Callable[[], Awaitable]):
        try:
            return await asyncio.wait_for(call(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"❌ Store {label} timed out after {self.timeout}s")
            raise StoreUnavailableError("Unable to connect to database. Please try again.") from e
        except RecordStoreError as e:
            logger.error(f"❌ Store {label} failed: {e}")
            raise StoreUnavailableError("Unable to connect to database. Please try again.") from e

    async def _write(self, label: str, call: Callable[[], Awaitable]):
        """Run a write with a timeout, retrying transient failures with backoff"""
        last_error: Optional[Exception] = None
        for attempt in range(1, self.retries + 1):
            try:
                return await asyncio.wait_for(call(), timeout=self.timeout)
            except (SlotTakenError, DocumentMissingError):
                raise
            except (asyncio.TimeoutError, RecordStoreError) as e:
                last_error = e
                logger.warning(
                    f"⚠️ Store {label} failed (attempt {attempt}/{self.retries}): "
                    f"{e or type(e).__name__}"
                )
                if attempt < self.retries:
                    await asyncio.sleep(self.backoff * (2 ** (attempt - 1)))

        logger.error(f"❌ Store {label} gave up after {self.retries} attempts")
        raise StoreUnavailableError(
            "Could not save to the database. Please check your connection and try again."
        ) from last_error
