"""Booking workflow — intake, status transitions and their notifications.

Bookings start ``Pending`` and an admin moves them to ``Confirmed`` or
``Cancelled``. Transitions are not guarded: applying one always overwrites the
status, so repeating a transition is a no-op success.

Every transition persists first and notifies second. Notification outcomes
never change the result of the transition.
"""

import logging
from datetime import datetime, timezone

from aura_inn.models.booking import Booking
from aura_inn.models.room_type import RoomType
from aura_inn.schemas.booking import BookingSubmission
from aura_inn.services.activity_log import ActivityLog
from aura_inn.services.booking_repository import BookingRepository, BookingStore
from aura_inn.services.notifications import NotificationDispatcher, NotificationKind, dispatch
from aura_inn.services.pricing import calculate_total_price

logger = logging.getLogger(__name__)

PENDING = "Pending"
CONFIRMED = "Confirmed"
CANCELLED = "Cancelled"

REQUIRED_FIELDS = ("guest_name", "check_in", "check_out", "room_type")


class BookingValidationError(Exception):
    """The submitted booking is incomplete or inconsistent."""


class BookingNotFoundError(Exception):
    """No booking exists with the requested id."""

    def __init__(self, booking_id: int) -> None:
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


def validate_submission(submission: BookingSubmission) -> None:
    """Raise ``BookingValidationError`` for missing fields or inverted dates."""
    missing = [name for name in REQUIRED_FIELDS if getattr(submission, name) is None]
    if missing:
        raise BookingValidationError("Missing required fields")
    if submission.check_out < submission.check_in:
        raise BookingValidationError("Check-out date cannot be before check-in date")


async def submit_booking(
    bookings: BookingRepository,
    submission: BookingSubmission,
    room_type: RoomType | None,
    allow_unknown_room_types: bool = False,
) -> Booking:
    """Price and store a new ``Pending`` booking.

    ``room_type`` is the record matching ``submission.room_type`` or ``None``.
    Unknown room types are rejected unless ``allow_unknown_room_types`` is set,
    in which case the room contributes nothing to the price.
    """
    validate_submission(submission)

    if room_type is None:
        if not allow_unknown_room_types:
            raise BookingValidationError(f"Unknown room type: {submission.room_type}")
        logger.warning("Booking for unknown room type %r priced without a room rate", submission.room_type)

    total_price = calculate_total_price(
        room_type.price if room_type is not None else None,
        submission.check_in,
        submission.check_out,
        breakfast=submission.breakfast,
        pickup=submission.pickup,
        is_direct_booking=submission.is_direct_booking,
    )

    booking = Booking(
        guest_name=submission.guest_name,
        phone=submission.phone,
        email=submission.email,
        check_in=submission.check_in,
        check_out=submission.check_out,
        adults=submission.adults,
        children=submission.children,
        room_type=submission.room_type,
        breakfast=submission.breakfast,
        pickup=submission.pickup,
        flight_no=submission.flight_no,
        arrival_time=submission.arrival_time,
        special_requests=submission.special_requests,
        total_price=total_price,
        utr=submission.utr,
        status=PENDING,
        created_at=datetime.now(timezone.utc),
        pre_arrival_email_sent=False,
    )
    booking = await bookings.create(booking)
    logger.info("Booking %s saved for %s (%s, total %s)", booking.id, booking.guest_name, booking.room_type, total_price)
    return booking


async def send_submission_notices(
    store: BookingStore,
    dispatcher: NotificationDispatcher,
    booking: Booking,
    owner_email: str | None = None,
) -> None:
    """Alert the owner and acknowledge the guest. Runs after the response is sent."""
    async with store.open() as bookings:
        await dispatch(bookings, dispatcher, NotificationKind.OWNER_ALERT, booking, owner_email)
        if booking.email:
            await dispatch(bookings, dispatcher, NotificationKind.GUEST_ACK, booking)


async def confirm_booking(
    bookings: BookingRepository,
    dispatcher: NotificationDispatcher,
    activity: ActivityLog,
    booking_id: int,
) -> tuple[Booking, bool]:
    """Mark a booking ``Confirmed``, then send the guest confirmation.

    Returns the booking and whether the confirmation email went out.
    """
    booking = await bookings.update_status(booking_id, CONFIRMED)
    if booking is None:
        raise BookingNotFoundError(booking_id)
    activity.record(f"Booking #{booking_id} confirmed for {booking.guest_name}")

    notified = await dispatch(bookings, dispatcher, NotificationKind.GUEST_CONFIRMATION, booking)
    return booking, notified


async def change_booking_status(
    bookings: BookingRepository,
    dispatcher: NotificationDispatcher,
    activity: ActivityLog,
    booking_id: int,
    status: str,
) -> Booking:
    """Overwrite a booking's status; cancellations also notify the guest."""
    booking = await bookings.update_status(booking_id, status)
    if booking is None:
        raise BookingNotFoundError(booking_id)
    activity.record(f"Booking #{booking_id} status set to {status}")

    if status == CANCELLED:
        await dispatch(bookings, dispatcher, NotificationKind.GUEST_CANCELLATION, booking)
    return booking


async def clear_all_bookings(bookings: BookingRepository, activity: ActivityLog) -> int:
    """Delete every booking. Irreversible."""
    cleared = await bookings.clear_all()
    activity.record(f"Cleared all booking records ({cleared} removed)")
    return cleared
