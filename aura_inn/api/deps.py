"""Shared API dependencies — single import point for all routers.

Re-exports the database session, authentication and service dependencies so
that router modules can import everything they need from one place::

    from aura_inn.api.deps import get_bookings, get_current_admin
"""

from collections.abc import AsyncIterator

from fastapi import Depends

from aura_inn.auth.dependencies import get_current_admin, get_current_user
from aura_inn.database import get_db
from aura_inn.services.activity_log import get_activity_log
from aura_inn.services.booking_repository import BookingRepository, BookingStore, get_booking_store
from aura_inn.services.notifications import get_dispatcher


async def get_bookings(store: BookingStore = Depends(get_booking_store)) -> AsyncIterator[BookingRepository]:
    """Yield a booking repository for the duration of the request."""
    async with store.open() as bookings:
        yield bookings


__all__ = [
    "get_db",
    "get_current_user",
    "get_current_admin",
    "get_booking_store",
    "get_bookings",
    "get_dispatcher",
    "get_activity_log",
]
