"""FastAPI dependencies exposing the session-wide store, mirror and helpers"""

from fastapi import Request

from .services.concierge_service import ConciergeService
from .store.base import RecordStore
from .sync import MirrorState, SyncLayer


def get_sync_layer(request: Request) -> SyncLayer:
    return request.app.state.sync


def get_mirror(request: Request) -> MirrorState:
    return request.app.state.sync.mirror


def get_store(request: Request) -> RecordStore:
    return request.app.state.sync.store


def get_concierge(request: Request) -> ConciergeService:
    return request.app.state.concierge
