"""Tracking domain - booking lookup by id, reference code or phone"""

from .router import router

__all__ = ["router"]
