"""Public booking intake API.

A submission is priced and stored before the response is returned; the owner
alert and guest acknowledgement are sent afterwards in a background task so
the guest never waits on the mail relay.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from aura_inn.api.deps import get_booking_store, get_bookings, get_db, get_dispatcher
from aura_inn.config import settings
from aura_inn.schemas.booking import BookingSubmission, BookingSubmitResponse
from aura_inn.services.booking_repository import BookingPersistenceError, BookingRepository, BookingStore
from aura_inn.services.booking_workflow import BookingValidationError, send_submission_notices, submit_booking
from aura_inn.services.notifications import NotificationDispatcher
from aura_inn.services.site_content import get_admin_email, get_room_type_by_name

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.post(
    "",
    response_model=BookingSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a booking request",
)
async def create_booking(
    body: BookingSubmission,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    bookings: BookingRepository = Depends(get_bookings),
    store: BookingStore = Depends(get_booking_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> BookingSubmitResponse:
    """Store a ``Pending`` booking and return its id.

    Returns 400 when ``guestName``, ``checkIn``, ``checkOut`` or ``roomType``
    is missing, when check-out precedes check-in, or for an unknown room type.
    """
    room_type = await get_room_type_by_name(db, body.room_type)
    try:
        booking = await submit_booking(
            bookings,
            body,
            room_type,
            allow_unknown_room_types=settings.allow_unknown_room_types,
        )
    except BookingValidationError as exc:
        logger.warning("Booking rejected: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from None
    except BookingPersistenceError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error",
        ) from None

    owner_email = settings.owner_email or await get_admin_email(db)
    background_tasks.add_task(send_submission_notices, store, dispatcher, booking, owner_email)
    return BookingSubmitResponse(message="Booking Request Received!", booking_id=booking.id)
