import os

# Keep tests away from Redis and the Gemini API
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["GEMINI_API_KEY"] = ""

from datetime import date  # noqa: E402

import pytest  # noqa: E402

from glamflow.domain.bookings.repository import AppointmentRepository  # noqa: E402
from glamflow.domain.bookings.service import BookingService  # noqa: E402
from glamflow.models import Appointment  # noqa: E402
from glamflow.services.concierge_service import ConciergeService  # noqa: E402
from glamflow.store.memory import InMemoryRecordStore  # noqa: E402
from glamflow.sync import SyncLayer  # noqa: E402

TODAY = date(2025, 3, 1)


def make_appointment(**overrides) -> Appointment:
    data = {
        "id": "GLAM-AB12CD",
        "clientName": "Ana Reyes",
        "clientPhone": "09171234567",
        "serviceId": "s1",
        "staffId": "st1",
        "date": "2025-03-10",
        "time": "10:00 AM",
        "status": "PENDING",
        "paymentMethod": "GCASH",
        "totalAmount": 850,
        "createdAt": "2025-03-01T08:00:00+00:00",
    }
    data.update(overrides)
    return Appointment.model_validate(data)


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
async def sync(store):
    layer = SyncLayer(store)
    await layer.start()
    await layer.settle()
    yield layer
    await layer.stop()


@pytest.fixture
def mirror(sync):
    return sync.mirror


@pytest.fixture
def repo(store):
    return AppointmentRepository(store, timeout=1, retries=3, backoff=0)


@pytest.fixture
def booking_service(mirror, repo):
    return BookingService(mirror, repo, ConciergeService(api_key=None), today=lambda: TODAY)
