"""
Bookings domain.

Client self-booking, admin blocks / walk-ins, validated status transitions,
feedback and the admin dashboard views.
"""

from .router import admin_router, router

__all__ = ["router", "admin_router"]
