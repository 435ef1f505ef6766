"""
Firestore-backed record store (firebase_admin).

The Admin SDK is blocking: one-shot calls run in a worker thread, and
snapshot listeners call back on the SDK's own watch threads.
"""

import asyncio
import logging
import threading
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from ..config import FIREBASE_PROJECT_ID, GOOGLE_APPLICATION_CREDENTIALS
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


def init_firebase_app() -> firebase_admin.App:
    """Initialize Firebase Admin SDK (only once)"""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    try:
        if GOOGLE_APPLICATION_CREDENTIALS:
            cred = credentials.Certificate(GOOGLE_APPLICATION_CREDENTIALS)
        else:
            cred = credentials.ApplicationDefault()
        app = firebase_admin.initialize_app(cred, {"projectId": FIREBASE_PROJECT_ID})
        logger.info("Firebase Admin initialized with service credentials")
    except Exception:
        # Initialize without credentials (emulator / limited functionality)
        app = firebase_admin.initialize_app(options={"projectId": FIREBASE_PROJECT_ID})
        logger.info("Firebase Admin initialized with project ID only")
    return app


def _to_dict(snapshot) -> dict:
    return {**(snapshot.to_dict() or {}), "id": snapshot.id}


def reserve_slot(
    transaction,
    collection_ref,
    doc_id: str,
    data: dict,
    slot_fields: tuple[str, ...],
    released_statuses: tuple[str, ...],
) -> None:
    """Write data inside the transaction unless a live document holds its slot"""
    query = collection_ref
    for field in slot_fields:
        query = query.where(filter=FieldFilter(field, "==", data.get(field)))
    for doc in transaction.get(query):
        if doc.id == doc_id:
            continue
        if (doc.to_dict() or {}).get("status") in released_statuses:
            continue
        raise SlotTakenError(doc.id)
    transaction.set(collection_ref.document(doc_id), data)


class _WatchRegistration:
    """One standing listener; reopened when the SDK closes its stream"""

    def __init__(self, label: str, open_watch, on_error: ErrorCallback):
        self.label = label
        self.open_watch = open_watch
        self.on_error = on_error
        self.watch = None
        self.cancelled = False


class FirestoreRecordStore(RecordStore):
    def __init__(self, client=None):
        if client is None:
            client = firestore.client(app=init_firebase_app())
        self._db = client
        self._lock = threading.Lock()
        self._registrations: list[_WatchRegistration] = []

    def watch_collection(
        self, collection: str, on_snapshot: CollectionCallback, on_error: ErrorCallback
    ) -> Unsubscribe:
        def _callback(docs, _changes, _read_time):
            on_snapshot([_to_dict(d) for d in docs])

        return self._register(
            _WatchRegistration(
                f"collection {collection}",
                lambda: self._db.collection(collection).on_snapshot(_callback),
                on_error,
            )
        )

    def watch_document(
        self, collection: str, doc_id: str, on_snapshot: DocumentCallback, on_error: ErrorCallback
    ) -> Unsubscribe:
        def _callback(docs, _changes, _read_time):
            existing = [d for d in docs if d.exists]
            on_snapshot(_to_dict(existing[0]) if existing else None)

        return self._register(
            _WatchRegistration(
                f"document {collection}/{doc_id}",
                lambda: self._db.collection(collection).document(doc_id).on_snapshot(_callback),
                on_error,
            )
        )

    def check_watches(self) -> None:
        """Report and reopen listeners whose stream the SDK closed.

        The Admin SDK gives snapshot listeners no error callback: a stream that
        fails for good is closed internally and only `Watch.is_active` turns
        False. Each dead listener is reported once through its on_error, then
        reopened so its first snapshot restores the feed.
        """
        with self._lock:
            registrations = list(self._registrations)

        for reg in registrations:
            watch = reg.watch
            if watch is not None and watch.is_active:
                continue
            if watch is not None:
                logger.error(f"❌ Firestore watch on {reg.label} closed")
                reg.watch = None
                reg.on_error(RecordStoreError(f"Watch on {reg.label} closed"))
            self._open(reg)

    async def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        def _get():
            try:
                ref = self._db.collection(collection).document(doc_id)
            except ValueError as e:
                # Keys containing "/" do not name a document
                logger.debug(f"Invalid document key {doc_id!r}: {e}")
                return None
            snapshot = ref.get()
            return _to_dict(snapshot) if snapshot.exists else None

        return await self._run(_get)

    async def query(self, collection: str, field: str, value: Any) -> list[dict]:
        def _query():
            query = self._db.collection(collection).where(filter=FieldFilter(field, "==", value))
            return [_to_dict(d) for d in query.stream()]

        return await self._run(_query)

    async def set_document(self, collection: str, doc_id: str, data: dict) -> None:
        await self._run(lambda: self._db.collection(collection).document(doc_id).set(data))

    async def update_document(self, collection: str, doc_id: str, fields: dict) -> None:
        try:
            await self._run(
                lambda: self._db.collection(collection).document(doc_id).update(fields)
            )
        except RecordStoreError as e:
            if isinstance(e.__cause__, google_exceptions.NotFound):
                raise DocumentMissingError(f"{collection}/{doc_id} does not exist") from e
            raise

    async def delete_document(self, collection: str, doc_id: str) -> None:
        await self._run(lambda: self._db.collection(collection).document(doc_id).delete())

    async def create_if_slot_free(
        self,
        collection: str,
        doc_id: str,
        data: dict,
        slot_fields: tuple[str, ...],
        released_statuses: tuple[str, ...],
    ) -> None:
        col = self._db.collection(collection)
        reserve = firestore.transactional(reserve_slot)

        await self._run(
            lambda: reserve(
                self._db.transaction(), col, doc_id, data, slot_fields, released_statuses
            )
        )

    def close(self) -> None:
        with self._lock:
            registrations, self._registrations = self._registrations, []
        for reg in registrations:
            self._cancel(reg)

    # ------------------------------------------------------------------

    def _register(self, reg: _WatchRegistration) -> Unsubscribe:
        with self._lock:
            self._registrations.append(reg)
        self._open(reg)

        def unsubscribe():
            with self._lock:
                if reg in self._registrations:
                    self._registrations.remove(reg)
            self._cancel(reg)

        return unsubscribe

    def _open(self, reg: _WatchRegistration) -> None:
        try:
            watch = reg.open_watch()
        except Exception as e:
            logger.error(f"❌ Failed to watch {reg.label}: {e}")
            reg.on_error(RecordStoreError(str(e)))
            return

        with self._lock:
            stale = reg.cancelled
            if not stale:
                reg.watch = watch
        if stale:
            watch.unsubscribe()
            return
        logger.info(f"👀 Watching {reg.label}")

    def _cancel(self, reg: _WatchRegistration) -> None:
        with self._lock:
            reg.cancelled = True
            watch, reg.watch = reg.watch, None
        if watch is None:
            return
        try:
            watch.unsubscribe()
        except Exception as e:
            logger.warning(f"⚠️ Failed to close Firestore watch on {reg.label}: {e}")

    async def _run(self, func):
        try:
            return await asyncio.to_thread(func)
        except SlotTakenError:
            raise
        except google_exceptions.GoogleAPICallError as e:
            raise RecordStoreError(str(e)) from e
        except google_exceptions.RetryError as e:
            raise RecordStoreError(str(e)) from e
