import asyncio

import pytest

from glamflow.store import APPOINTMENTS, CONFIG, SERVICES
from glamflow.store.base import RecordStoreError
from glamflow.store.memory import InMemoryRecordStore
from glamflow.sync import Resource, SyncLayer

from .conftest import make_appointment


class LeakyStore(InMemoryRecordStore):
    """Keeps delivering to callbacks after unsubscribe, like a push already in flight"""

    def __init__(self):
        super().__init__()
        self.callbacks = {}

    def watch_collection(self, collection, on_snapshot, on_error):
        self.callbacks[collection] = (on_snapshot, on_error)
        super().watch_collection(collection, on_snapshot, on_error)
        return lambda: None


class FailableStore(InMemoryRecordStore):
    """Lets a test deliver a feed failure to every watcher of a collection"""

    def __init__(self):
        super().__init__()
        self.error_callbacks = {}

    def watch_collection(self, collection, on_snapshot, on_error):
        self.error_callbacks.setdefault(collection, []).append(on_error)
        return super().watch_collection(collection, on_snapshot, on_error)

    def fail(self, collection, error):
        for on_error in self.error_callbacks.get(collection, []):
            on_error(error)


class SilentlyClosingStore(InMemoryRecordStore):
    """The appointments stream dies without an error; only a watch check notices"""

    def __init__(self):
        super().__init__()
        self.checks = 0
        self.appointments_error = None

    def watch_collection(self, collection, on_snapshot, on_error):
        if collection == APPOINTMENTS:
            self.appointments_error = on_error
        return super().watch_collection(collection, on_snapshot, on_error)

    def check_watches(self):
        if self.checks == 0:
            self.appointments_error(RecordStoreError("Watch on collection appointments closed"))
        self.checks += 1


@pytest.fixture
async def failable():
    store = FailableStore()
    layer = SyncLayer(store)
    await layer.start()
    await layer.settle()
    yield store, layer
    await layer.stop()


async def test_start_opens_one_subscription_per_resource(store):
    layer = SyncLayer(store)
    await layer.start()
    await layer.start()

    assert layer.running
    assert len(layer._unsubscribes) == 5

    await layer.stop()
    assert not layer.running


async def test_writes_reach_the_mirror(store, sync):
    await store.set_document(APPOINTMENTS, "GLAM-AB12CD", make_appointment().to_document())
    await sync.settle()

    assert [a.id for a in sync.mirror.appointments] == ["GLAM-AB12CD"]
    assert Resource.APPOINTMENTS in sync.mirror.received


async def test_pushes_apply_in_arrival_order(store, sync):
    for i in range(5):
        await store.set_document(
            APPOINTMENTS, f"GLAM-00000{i}", make_appointment(id=f"GLAM-00000{i}").to_document()
        )
    await store.delete_document(APPOINTMENTS, "GLAM-000000")
    await sync.settle()

    assert sorted(a.id for a in sync.mirror.appointments) == [f"GLAM-00000{i}" for i in range(1, 5)]


async def test_empty_services_feed_keeps_seed_catalog(sync):
    # The store starts with no services documents at all
    assert len(sync.mirror.services) == 10
    assert Resource.SERVICES not in sync.mirror.received


async def test_service_push_replaces_catalog(store, sync):
    await store.set_document(
        SERVICES, "s1", {"name": "Signature Haircut", "duration": 45, "price": 999}
    )
    await sync.settle()

    assert [(s.id, s.price) for s in sync.mirror.services] == [("s1", 999)]


async def test_settings_document_is_mirrored(store, sync):
    await store.set_document(CONFIG, "siteSettings", {"bookingOpen": False})
    await sync.settle()

    assert sync.mirror.site_settings.accepts_bookings is False


async def test_feed_error_marks_disconnected_and_keeps_data(failable):
    store, sync = failable
    await store.set_document(APPOINTMENTS, "GLAM-AB12CD", make_appointment().to_document())
    await sync.settle()

    store.fail(APPOINTMENTS, RecordStoreError("permission-denied"))
    await sync.settle()

    assert sync.mirror.connected is False
    assert [a.id for a in sync.mirror.appointments] == ["GLAM-AB12CD"]

    await store.set_document(APPOINTMENTS, "GLAM-ZZ99ZZ", make_appointment(id="GLAM-ZZ99ZZ").to_document())
    await sync.settle()
    assert sync.mirror.connected is True


async def test_errors_on_one_feed_leave_others_running(failable):
    store, sync = failable
    store.fail(SERVICES, RecordStoreError("unavailable"))
    await store.set_document(APPOINTMENTS, "GLAM-AB12CD", make_appointment().to_document())
    await sync.settle()

    assert sync.mirror.failures == {"services": "unavailable"}
    assert len(sync.mirror.appointments) == 1


async def test_watch_check_surfaces_silently_closed_stream():
    store = SilentlyClosingStore()
    layer = SyncLayer(store, watch_check_interval=0.01)
    await layer.start()
    await layer.settle()
    assert layer.mirror.connected is True

    for _ in range(200):
        await asyncio.sleep(0.01)
        await layer.settle()
        if not layer.mirror.connected:
            break

    assert layer.mirror.failures == {"appointments": "Watch on collection appointments closed"}
    await layer.stop()
    # A check already running in its worker thread may still finish
    await asyncio.sleep(0.02)

    checks = store.checks
    await asyncio.sleep(0.05)
    assert store.checks == checks


async def test_last_change_tracks_mirror_updates(store, sync):
    assert Resource.APPOINTMENTS in sync.last_change
    before = sync.last_change[Resource.APPOINTMENTS]

    await store.set_document(APPOINTMENTS, "GLAM-AB12CD", make_appointment().to_document())
    await sync.settle()

    assert sync.last_change[Resource.APPOINTMENTS] >= before
    assert Resource.SERVICES not in sync.last_change


async def test_pushes_after_stop_are_discarded():
    store = LeakyStore()
    layer = SyncLayer(store)
    await layer.start()
    await layer.settle()
    on_snapshot, on_error = store.callbacks[APPOINTMENTS]

    await layer.stop()
    on_snapshot([make_appointment().to_document()])
    on_error(RecordStoreError("late failure"))
    await asyncio.sleep(0)

    assert layer.mirror.appointments == []
    assert layer.mirror.connected is True


async def test_restart_resumes_with_fresh_subscriptions(store):
    layer = SyncLayer(store)
    await layer.start()
    await layer.stop()

    await store.set_document(APPOINTMENTS, "GLAM-AB12CD", make_appointment().to_document())
    await layer.start()
    await layer.settle()

    assert [a.id for a in layer.mirror.appointments] == ["GLAM-AB12CD"]
    await layer.stop()
