"""Realtime mirror of the record store"""

from .layer import SyncLayer
from .mirror import MirrorState, Resource

__all__ = ["MirrorState", "Resource", "SyncLayer"]
