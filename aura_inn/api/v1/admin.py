"""Admin booking management API.

All endpoints require an admin bearer token. The status-change endpoint also
serves form-style callers: unless the request accepts ``application/json`` it
answers with a redirect back to the admin dashboard carrying a short message.
"""

from __future__ import annotations

import json
import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from aura_inn.api.deps import (
    get_activity_log,
    get_booking_store,
    get_bookings,
    get_current_admin,
    get_db,
    get_dispatcher,
)
from aura_inn.config import settings
from aura_inn.models.booking import Booking
from aura_inn.models.user import User
from aura_inn.schemas.analytics import ActivityEntry
from aura_inn.schemas.booking import (
    BookingListResponse,
    BookingRecord,
    BookingStatusChange,
    ClearBookingsResponse,
    ConfirmBookingResponse,
)
from aura_inn.services.activity_log import ActivityLog
from aura_inn.services.booking_repository import BookingPersistenceError, BookingRepository, BookingStore
from aura_inn.services.booking_workflow import (
    BookingNotFoundError,
    change_booking_status,
    clear_all_bookings,
    confirm_booking,
)
from aura_inn.services.notifications import NotificationDispatcher
from aura_inn.services.reminders import send_pre_arrival_reminders
from aura_inn.services.site_content import build_export

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin"],
    dependencies=[Depends(get_current_admin)],
)

EXPORT_FILENAME = "the-aura-inn-backup.json"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("accept", "")


def _dashboard_redirect(message: str) -> RedirectResponse:
    query = urlencode({"tab": "bookings", "msg": message})
    return RedirectResponse(url=f"{settings.admin_dashboard_url}?{query}", status_code=status.HTTP_303_SEE_OTHER)


def _persistence_failed() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Could not save booking changes",
    )


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


@router.get("/bookings", response_model=BookingListResponse, summary="List bookings, newest first")
async def list_bookings(
    status_filter: str | None = Query(None, alias="status", description="Filter by booking status"),
    bookings: BookingRepository = Depends(get_bookings),
) -> dict:
    items = await bookings.list_all(status=status_filter)
    return {"items": items, "total": len(items)}


@router.get("/bookings/{booking_id}", response_model=BookingRecord, summary="Get a booking")
async def get_booking(
    booking_id: int,
    bookings: BookingRepository = Depends(get_bookings),
) -> Booking:
    booking = await bookings.get(booking_id)
    if booking is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


@router.post(
    "/bookings/{booking_id}/confirm",
    response_model=ConfirmBookingResponse,
    summary="Confirm a booking and email the guest",
)
async def confirm(
    booking_id: int,
    bookings: BookingRepository = Depends(get_bookings),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    activity: ActivityLog = Depends(get_activity_log),
) -> ConfirmBookingResponse:
    """Persist the ``Confirmed`` status, then attempt the guest confirmation.

    A failed email does not fail the request; ``guestNotified`` reports it.
    """
    try:
        _, notified = await confirm_booking(bookings, dispatcher, activity, booking_id)
    except BookingNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found") from None
    except BookingPersistenceError:
        raise _persistence_failed() from None

    return ConfirmBookingResponse(
        success=True,
        message="Booking Confirmed Successfully",
        guest_notified=notified,
    )


@router.post("/bookings/status", summary="Change a booking's status")
async def update_booking_status(
    body: BookingStatusChange,
    request: Request,
    bookings: BookingRepository = Depends(get_bookings),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    activity: ActivityLog = Depends(get_activity_log),
) -> Response:
    """Set ``Pending``, ``Confirmed`` or ``Cancelled``; cancelling emails the guest."""
    wants_json = _wants_json(request)
    try:
        await change_booking_status(bookings, dispatcher, activity, body.booking_id, body.status)
    except BookingNotFoundError:
        if wants_json:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"success": False, "message": "Booking not found"},
            )
        return _dashboard_redirect("Error: Booking Not Found")
    except BookingPersistenceError:
        if wants_json:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"success": False, "message": "Could not save booking changes"},
            )
        return _dashboard_redirect("Error")

    if wants_json:
        return JSONResponse(content={"success": True, "message": f"Booking status updated to {body.status}"})
    return _dashboard_redirect("Booking Updated")


@router.delete("/bookings", response_model=ClearBookingsResponse, summary="Delete every booking")
async def clear_bookings(
    bookings: BookingRepository = Depends(get_bookings),
    activity: ActivityLog = Depends(get_activity_log),
) -> ClearBookingsResponse:
    try:
        cleared = await clear_all_bookings(bookings, activity)
    except BookingPersistenceError:
        raise _persistence_failed() from None
    return ClearBookingsResponse(
        success=True,
        message="All booking records cleared successfully!",
        cleared=cleared,
    )


# ---------------------------------------------------------------------------
# Reminders, activity, export
# ---------------------------------------------------------------------------


@router.post("/reminders/run", summary="Send due pre-arrival reminders now")
async def run_reminders(
    store: BookingStore = Depends(get_booking_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    activity: ActivityLog = Depends(get_activity_log),
) -> dict[str, int]:
    counts = await send_pre_arrival_reminders(store, dispatcher)
    activity.record(f"Pre-arrival reminder sweep run manually ({counts['sent']} sent)")
    return counts


@router.get("/activity", response_model=list[ActivityEntry], summary="Recent admin activity")
async def get_activity(activity: ActivityLog = Depends(get_activity_log)) -> list[dict[str, str]]:
    return activity.entries()


@router.get("/export", summary="Download a full data backup")
async def export_all_data(
    db: AsyncSession = Depends(get_db),
    bookings: BookingRepository = Depends(get_bookings),
    current_user: User = Depends(get_current_admin),
) -> Response:
    """Bookings, reviews, room types, floors and page content as one JSON file."""
    data = await build_export(db, await bookings.list_all())
    logger.info("Data export downloaded by %s", current_user.email)
    return Response(
        content=json.dumps(data, indent=4),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
