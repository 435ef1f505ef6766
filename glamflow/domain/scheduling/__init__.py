"""Scheduling domain - the fixed daily slot grid and per-staff availability"""

from .router import router

__all__ = ["router"]
