"""
In-process record store.

Mirrors the Firestore contract closely enough for local runs and tests:
watchers get the current content on registration and a full snapshot after
every write touching their collection or document.
"""

import copy
import logging
from threading import RLock
from typing import Any, Optional

from .base import (
    CollectionCallback,
    DocumentCallback,
    DocumentMissingError,
    ErrorCallback,
    RecordStore,
    RecordStoreError,
    SlotTakenError,
    Unsubscribe,
)

logger = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    def __init__(self, seed: Optional[dict[str, dict[str, dict]]] = None):
        self._lock = RLock()
        self._collections: dict[str, dict[str, dict]] = {}
        self._collection_watchers: dict[str, list[tuple[CollectionCallback, ErrorCallback]]] = {}
        self._document_watchers: dict[
            tuple[str, str], list[tuple[DocumentCallback, ErrorCallback]]
        ] = {}
        self.offline = False
        for collection, docs in (seed or {}).items():
            self._collections[collection] = {
                doc_id: {**copy.deepcopy(data), "id": doc_id} for doc_id, data in docs.items()
            }

    # ------------------------------------------------------------------
    # Watches
    # ------------------------------------------------------------------

    def watch_collection(
        self, collection: str, on_snapshot: CollectionCallback, on_error: ErrorCallback
    ) -> Unsubscribe:
        entry = (on_snapshot, on_error)
        with self._lock:
            self._collection_watchers.setdefault(collection, []).append(entry)
            snapshot = self._collection_snapshot(collection)
        on_snapshot(snapshot)

        def unsubscribe():
            with self._lock:
                watchers = self._collection_watchers.get(collection, [])
                if entry in watchers:
                    watchers.remove(entry)

        return unsubscribe

    def watch_document(
        self, collection: str, doc_id: str, on_snapshot: DocumentCallback, on_error: ErrorCallback
    ) -> Unsubscribe:
        key = (collection, doc_id)
        entry = (on_snapshot, on_error)
        with self._lock:
            self._document_watchers.setdefault(key, []).append(entry)
            snapshot = self._document_snapshot(collection, doc_id)
        on_snapshot(snapshot)

        def unsubscribe():
            with self._lock:
                watchers = self._document_watchers.get(key, [])
                if entry in watchers:
                    watchers.remove(entry)

        return unsubscribe

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        self._check_online()
        with self._lock:
            return self._document_snapshot(collection, doc_id)

    async def query(self, collection: str, field: str, value: Any) -> list[dict]:
        self._check_online()
        with self._lock:
            return [
                doc for doc in self._collection_snapshot(collection) if doc.get(field) == value
            ]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def set_document(self, collection: str, doc_id: str, data: dict) -> None:
        self._check_online()
        with self._lock:
            self._put(collection, doc_id, data)
        self._notify(collection, doc_id)

    async def update_document(self, collection: str, doc_id: str, fields: dict) -> None:
        self._check_online()
        with self._lock:
            docs = self._collections.get(collection, {})
            if doc_id not in docs:
                raise DocumentMissingError(f"{collection}/{doc_id} does not exist")
            docs[doc_id].update(copy.deepcopy(fields))
        self._notify(collection, doc_id)

    async def delete_document(self, collection: str, doc_id: str) -> None:
        self._check_online()
        with self._lock:
            self._collections.get(collection, {}).pop(doc_id, None)
        self._notify(collection, doc_id)

    async def create_if_slot_free(
        self,
        collection: str,
        doc_id: str,
        data: dict,
        slot_fields: tuple[str, ...],
        released_statuses: tuple[str, ...],
    ) -> None:
        self._check_online()
        with self._lock:
            for existing_id, doc in self._collections.get(collection, {}).items():
                if existing_id == doc_id or doc.get("status") in released_statuses:
                    continue
                if all(doc.get(f) == data.get(f) for f in slot_fields):
                    raise SlotTakenError(existing_id)
            self._put(collection, doc_id, data)
        self._notify(collection, doc_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_online(self) -> None:
        if self.offline:
            raise RecordStoreError("Record store is offline")

    def _put(self, collection: str, doc_id: str, data: dict) -> None:
        self._collections.setdefault(collection, {})[doc_id] = {
            **copy.deepcopy(data),
            "id": doc_id,
        }

    def _collection_snapshot(self, collection: str) -> list[dict]:
        return [copy.deepcopy(doc) for doc in self._collections.get(collection, {}).values()]

    def _document_snapshot(self, collection: str, doc_id: str) -> Optional[dict]:
        doc = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def _notify(self, collection: str, doc_id: str) -> None:
        with self._lock:
            collection_watchers = list(self._collection_watchers.get(collection, []))
            document_watchers = list(self._document_watchers.get((collection, doc_id), []))
            snapshot = self._collection_snapshot(collection)
            document = self._document_snapshot(collection, doc_id)

        for on_snapshot, _on_error in collection_watchers:
            on_snapshot(copy.deepcopy(snapshot))
        for on_snapshot, _on_error in document_watchers:
            on_snapshot(copy.deepcopy(document))
        logger.debug(f"📡 Pushed {collection}/{doc_id} to {len(collection_watchers) + len(document_watchers)} watchers")
