"""
Record store contract consumed by the sync layer and the booking repository.

Documents travel as plain dicts using the stored (camelCase) field names.
Every document returned by a read carries its document key under "id".
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

CollectionCallback = Callable[[list[dict]], None]
DocumentCallback = Callable[[Optional[dict]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class RecordStoreError(Exception):
    """Connectivity / permission failure talking to the store"""


class DocumentMissingError(RecordStoreError):
    """Field update targeted a document that does not exist"""


class SlotTakenError(Exception):
    """Conditional create refused: another live document holds the slot"""

    def __init__(self, holder_id: str):
        super().__init__(f"Slot already held by {holder_id}")
        self.holder_id = holder_id


class RecordStore(ABC):
    """Read / write / watch capability over named collections"""

    @abstractmethod
    def watch_collection(
        self, collection: str, on_snapshot: CollectionCallback, on_error: ErrorCallback
    ) -> Unsubscribe:
        """Stream the full content of a collection on every change.

        The current content is delivered once right after registration.
        Callbacks may fire on a thread owned by the store client.
        """

    @abstractmethod
    def watch_document(
        self, collection: str, doc_id: str, on_snapshot: DocumentCallback, on_error: ErrorCallback
    ) -> Unsubscribe:
        """Stream a single document; None is pushed while it does not exist"""

    @abstractmethod
    async def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def query(self, collection: str, field: str, value: Any) -> list[dict]:
        """Documents whose field equals value exactly"""

    @abstractmethod
    async def set_document(self, collection: str, doc_id: str, data: dict) -> None:
        """Create-or-replace keyed by doc_id"""

    @abstractmethod
    async def update_document(self, collection: str, doc_id: str, fields: dict) -> None:
        """Merge fields into an existing document, DocumentMissingError if absent"""

    @abstractmethod
    async def delete_document(self, collection: str, doc_id: str) -> None:
        ...

    @abstractmethod
    async def create_if_slot_free(
        self,
        collection: str,
        doc_id: str,
        data: dict,
        slot_fields: tuple[str, ...],
        released_statuses: tuple[str, ...],
    ) -> None:
        """Atomically write data unless another document shares slot_fields.

        Documents whose "status" is in released_statuses do not hold a slot.
        A document with the same doc_id is replaced, never treated as a conflict.
        Raises SlotTakenError when the slot is held.
        """

    def close(self) -> None:
        """Release client resources"""

    def check_watches(self) -> None:
        """Report watches whose stream ended silently through their on_error"""
