"""Tests for booking intake and status transitions."""

from datetime import date

import pytest

from aura_inn.models.room_type import RoomType
from aura_inn.schemas.booking import BookingSubmission
from aura_inn.services.booking_repository import JsonBookingStore
from aura_inn.services.booking_workflow import (
    CANCELLED,
    CONFIRMED,
    PENDING,
    BookingNotFoundError,
    BookingValidationError,
    change_booking_status,
    clear_all_bookings,
    confirm_booking,
    send_submission_notices,
    submit_booking,
    validate_submission,
)
from aura_inn.services.notifications import NotificationKind

DELUXE = RoomType(name="Deluxe", price=5000)


def _submission(**overrides) -> BookingSubmission:
    payload = {
        "guestName": "Asha Verma",
        "phone": "+91 90000 00000",
        "email": "asha@guestmail.com",
        "checkIn": "2024-03-01",
        "checkOut": "2024-03-03",
        "adults": "2",
        "roomType": "Deluxe",
        "breakfast": True,
        "pickup": False,
        "isDirectBooking": True,
    }
    payload.update(overrides)
    return BookingSubmission.model_validate(payload)


class TestValidateSubmission:
    @pytest.mark.parametrize("field", ["guestName", "checkIn", "checkOut", "roomType"])
    def test_missing_required_field(self, field):
        with pytest.raises(BookingValidationError, match="Missing required fields"):
            validate_submission(_submission(**{field: None}))

    def test_blank_strings_count_as_missing(self):
        with pytest.raises(BookingValidationError, match="Missing required fields"):
            validate_submission(_submission(guestName="   ", checkIn=""))

    def test_check_out_before_check_in(self):
        with pytest.raises(BookingValidationError, match="Check-out date cannot be before check-in date"):
            validate_submission(_submission(checkIn="2024-03-05", checkOut="2024-03-01"))

    def test_same_day_is_allowed(self):
        validate_submission(_submission(checkOut="2024-03-01"))


class TestSubmitBooking:
    async def test_stores_priced_pending_booking(self, booking_store):
        async with booking_store.open() as bookings:
            booking = await submit_booking(bookings, _submission(), DELUXE)
            stored = await bookings.get(booking.id)

        assert stored.status == PENDING
        assert stored.total_price == 9000
        assert stored.check_in == date(2024, 3, 1)
        assert stored.pre_arrival_email_sent is False
        assert stored.created_at is not None

    async def test_unknown_room_type_rejected(self, booking_store):
        async with booking_store.open() as bookings:
            with pytest.raises(BookingValidationError, match="Unknown room type: Penthouse"):
                await submit_booking(bookings, _submission(roomType="Penthouse"), None)
            assert await bookings.list_all() == []

    async def test_unknown_room_type_allowed_prices_addons_only(self, booking_store):
        async with booking_store.open() as bookings:
            booking = await submit_booking(
                bookings,
                _submission(roomType="Penthouse", pickup=True),
                None,
                allow_unknown_room_types=True,
            )

        assert booking.total_price == 2 * 500 + 800

    async def test_invalid_submission_not_stored(self, booking_store):
        async with booking_store.open() as bookings:
            with pytest.raises(BookingValidationError):
                await submit_booking(bookings, _submission(guestName=None), DELUXE)
            assert await bookings.list_all() == []


class TestSubmissionNotices:
    async def test_owner_alert_then_guest_ack(self, booking_store, dispatcher, stored_booking):
        await send_submission_notices(booking_store, dispatcher, stored_booking)

        assert dispatcher.kinds() == [NotificationKind.OWNER_ALERT, NotificationKind.GUEST_ACK]
        async with booking_store.open() as bookings:
            booking = await bookings.get(stored_booking.id)
        assert booking.last_notification_kind == NotificationKind.GUEST_ACK.value
        assert booking.last_notification_ok is True

    async def test_owner_alert_can_be_redirected(self, booking_store, dispatcher, stored_booking):
        await send_submission_notices(booking_store, dispatcher, stored_booking, owner_email="desk@theaurainn.com")

        assert dispatcher.sent[0] == (NotificationKind.OWNER_ALERT, stored_booking.id, "desk@theaurainn.com")
        assert dispatcher.sent[1][2] == "asha@guestmail.com"

    async def test_no_guest_ack_without_email(self, booking_store, dispatcher, new_booking):
        async with booking_store.open() as bookings:
            booking = await bookings.create(new_booking(email=None))

        await send_submission_notices(booking_store, dispatcher, booking)

        assert dispatcher.kinds() == [NotificationKind.OWNER_ALERT]

    async def test_guest_ack_sent_even_if_owner_alert_fails(self, booking_store, dispatcher, stored_booking):
        dispatcher.succeed = False

        await send_submission_notices(booking_store, dispatcher, stored_booking)

        assert dispatcher.kinds() == [NotificationKind.OWNER_ALERT, NotificationKind.GUEST_ACK]


class TestConfirmBooking:
    async def test_confirms_and_notifies(self, booking_store, dispatcher, activity_log, stored_booking):
        async with booking_store.open() as bookings:
            booking, notified = await confirm_booking(bookings, dispatcher, activity_log, stored_booking.id)

        assert booking.status == CONFIRMED
        assert notified is True
        assert dispatcher.sent == [
            (NotificationKind.GUEST_CONFIRMATION, stored_booking.id, "asha@guestmail.com")
        ]
        assert "confirmed" in activity_log.entries()[0]["message"]

    async def test_confirmed_even_when_email_fails(self, booking_store, dispatcher, activity_log, stored_booking):
        dispatcher.succeed = False

        async with booking_store.open() as bookings:
            _, notified = await confirm_booking(bookings, dispatcher, activity_log, stored_booking.id)
        async with booking_store.open() as bookings:
            stored = await bookings.get(stored_booking.id)

        assert notified is False
        assert stored.status == CONFIRMED
        assert stored.last_notification_kind == "guest_confirmation"
        assert stored.last_notification_ok is False

    async def test_confirm_twice_notifies_twice(self, booking_store, dispatcher, activity_log, stored_booking):
        async with booking_store.open() as bookings:
            await confirm_booking(bookings, dispatcher, activity_log, stored_booking.id)
            booking, _ = await confirm_booking(bookings, dispatcher, activity_log, stored_booking.id)

        assert booking.status == CONFIRMED
        assert booking.total_price == stored_booking.total_price
        assert booking.guest_name == stored_booking.guest_name
        assert booking.email == stored_booking.email
        assert (booking.check_in, booking.check_out) == (stored_booking.check_in, stored_booking.check_out)
        assert len(dispatcher.sent) == 2

    async def test_missing_booking(self, booking_store, dispatcher, activity_log):
        async with booking_store.open() as bookings:
            with pytest.raises(BookingNotFoundError):
                await confirm_booking(bookings, dispatcher, activity_log, 42)
        assert dispatcher.sent == []
        assert len(activity_log) == 0


class TestChangeBookingStatus:
    async def test_cancel_notifies_guest(self, booking_store, dispatcher, activity_log, stored_booking):
        async with booking_store.open() as bookings:
            booking = await change_booking_status(
                bookings, dispatcher, activity_log, stored_booking.id, CANCELLED
            )

        assert booking.status == CANCELLED
        assert dispatcher.kinds() == [NotificationKind.GUEST_CANCELLATION]

    @pytest.mark.parametrize("backend", ["sql", "json"])
    async def test_cancel_keeps_the_record(
        self, backend, booking_store, dispatcher, activity_log, new_booking, tmp_path
    ):
        store = booking_store if backend == "sql" else JsonBookingStore(tmp_path / "data")
        async with store.open() as bookings:
            booking = await bookings.create(new_booking())
            await bookings.create(new_booking(guest_name="Other Guest"))
            before = len(await bookings.list_all())
            await change_booking_status(bookings, dispatcher, activity_log, booking.id, CANCELLED)
            after = await bookings.list_all()

        assert len(after) == before == 2
        assert {b.id: b.status for b in after}[booking.id] == CANCELLED

    @pytest.mark.parametrize("status", [PENDING, CONFIRMED])
    async def test_other_statuses_send_nothing(self, booking_store, dispatcher, activity_log, stored_booking, status):
        async with booking_store.open() as bookings:
            booking = await change_booking_status(bookings, dispatcher, activity_log, stored_booking.id, status)

        assert booking.status == status
        assert dispatcher.sent == []

    async def test_cancelled_booking_can_be_reconfirmed(
        self, booking_store, dispatcher, activity_log, stored_booking
    ):
        async with booking_store.open() as bookings:
            await change_booking_status(bookings, dispatcher, activity_log, stored_booking.id, CANCELLED)
            booking, _ = await confirm_booking(bookings, dispatcher, activity_log, stored_booking.id)

        assert booking.status == CONFIRMED

    async def test_missing_booking(self, booking_store, dispatcher, activity_log):
        async with booking_store.open() as bookings:
            with pytest.raises(BookingNotFoundError):
                await change_booking_status(bookings, dispatcher, activity_log, 42, CANCELLED)


class TestClearAllBookings:
    async def test_clears_and_logs(self, booking_store, activity_log, new_booking):
        async with booking_store.open() as bookings:
            await bookings.create(new_booking())
            await bookings.create(new_booking())
            cleared = await clear_all_bookings(bookings, activity_log)
            assert await bookings.list_all() == []

        assert cleared == 2
        assert "2 removed" in activity_log.entries()[0]["message"]
