"""
Realtime synchronization layer.

One standing subscription per watched resource. Store callbacks may fire on
foreign threads, so they only hand a message to the event loop; a single
consumer task drains the channel in arrival order and applies each snapshot
to the mirror. Stopping bumps the generation so any push still in flight is
dropped instead of landing on a torn-down session.
"""

import asyncio
import contextlib
import logging
from datetime import datetime, timezone
from typing import NamedTuple, Optional

from ..config import WATCH_CHECK_INTERVAL_SECONDS
from ..store import APPOINTMENTS, CONFIG, PROMO_DOC, SERVICES, SITE_SETTINGS_DOC, STAFF
from ..store.base import RecordStore
from .mirror import MirrorState, Resource, Snapshot

logger = logging.getLogger(__name__)

COLLECTION_RESOURCES = {
    Resource.APPOINTMENTS: APPOINTMENTS,
    Resource.SERVICES: SERVICES,
    Resource.STAFF: STAFF,
}
DOCUMENT_RESOURCES = {
    Resource.SITE_SETTINGS: (CONFIG, SITE_SETTINGS_DOC),
    Resource.PROMO: (CONFIG, PROMO_DOC),
}


class SyncMessage(NamedTuple):
    generation: int
    resource: Resource
    snapshot: Snapshot = None
    error: Optional[Exception] = None


_CLOSE = object()


class SyncLayer:
    def __init__(
        self,
        store: RecordStore,
        mirror: Optional[MirrorState] = None,
        watch_check_interval: float = WATCH_CHECK_INTERVAL_SECONDS,
    ):
        self.store = store
        self.mirror = mirror or MirrorState()
        self.watch_check_interval = watch_check_interval
        # Resource -> ISO time its mirrored state last changed (push applied or feed failed)
        self.last_change: dict[Resource, str] = {}
        self.mirror.subscribe(self._record_change)
        self._generation = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._channel: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None
        self._watch_task: Optional[asyncio.Task] = None
        self._unsubscribes = []

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return

        self._loop = asyncio.get_running_loop()
        self._channel = asyncio.Queue()
        self._generation += 1
        generation = self._generation
        self._task = asyncio.create_task(self._consume(generation), name="glamflow-sync")

        for resource, collection in COLLECTION_RESOURCES.items():
            self._unsubscribes.append(
                self.store.watch_collection(
                    collection,
                    self._snapshot_handler(generation, resource),
                    self._error_handler(generation, resource),
                )
            )
        for resource, (collection, doc_id) in DOCUMENT_RESOURCES.items():
            self._unsubscribes.append(
                self.store.watch_document(
                    collection,
                    doc_id,
                    self._snapshot_handler(generation, resource),
                    self._error_handler(generation, resource),
                )
            )
        if self.watch_check_interval > 0:
            self._watch_task = asyncio.create_task(
                self._check_watches(generation), name="glamflow-watch-check"
            )
        logger.info(f"🔄 Sync layer started with {len(self._unsubscribes)} subscriptions")

    async def stop(self) -> None:
        if self._task is None:
            return

        if self._watch_task is not None:
            self._watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._watch_task
            self._watch_task = None

        for unsubscribe in self._unsubscribes:
            try:
                unsubscribe()
            except Exception as e:
                logger.warning(f"⚠️ Failed to cancel subscription: {e}")
        self._unsubscribes = []

        # Anything tagged with the old generation is now discarded
        self._generation += 1
        self._channel.put_nowait(_CLOSE)
        await self._task
        self._task = None
        self._channel = None
        logger.info("🛑 Sync layer stopped")

    async def settle(self) -> None:
        """Wait until every push delivered so far has been applied"""
        if self._channel is None:
            return
        await asyncio.sleep(0)
        await self._channel.join()

    # ------------------------------------------------------------------

    def _record_change(self, resource: Resource) -> None:
        self.last_change[resource] = datetime.now(timezone.utc).isoformat()

    async def _check_watches(self, generation: int) -> None:
        """Periodically let the store surface watch streams that died without an error"""
        while generation == self._generation:
            await asyncio.sleep(self.watch_check_interval)
            try:
                await asyncio.to_thread(self.store.check_watches)
            except Exception as e:
                logger.error(f"❌ Watch check failed: {e}")

    def _snapshot_handler(self, generation: int, resource: Resource):
        def handle(snapshot: Snapshot):
            self._post(SyncMessage(generation, resource, snapshot=snapshot))

        return handle

    def _error_handler(self, generation: int, resource: Resource):
        def handle(error: Exception):
            self._post(SyncMessage(generation, resource, error=error))

        return handle

    def _post(self, message: SyncMessage) -> None:
        loop = self._loop
        if loop is None or message.generation != self._generation:
            return
        try:
            loop.call_soon_threadsafe(self._deliver, message)
        except RuntimeError:
            # Loop already closed at shutdown
            logger.debug(f"Dropped late {message.resource.value} push")

    def _deliver(self, message: SyncMessage) -> None:
        if self._channel is None or message.generation != self._generation:
            return
        self._channel.put_nowait(message)

    async def _consume(self, generation: int) -> None:
        channel = self._channel
        while True:
            message = await channel.get()
            try:
                if message is _CLOSE:
                    return
                if message.generation != self._generation or message.generation != generation:
                    logger.debug(f"Discarded stale {message.resource.value} push")
                    continue
                if message.error is not None:
                    self.mirror.mark_failed(message.resource, message.error)
                else:
                    self.mirror.apply(message.resource, message.snapshot)
            except Exception as e:
                logger.error(f"❌ Failed to apply {getattr(message, 'resource', '?')} push: {e}")
            finally:
                channel.task_done()
