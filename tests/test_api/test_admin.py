"""Tests for the admin booking management endpoints."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from aura_inn.auth.jwt import create_token_pair
from aura_inn.config import settings
from aura_inn.services.notifications import NotificationKind
from aura_inn.services.reminders import hotel_today
from aura_inn.services.site_content import put_document

pytestmark = pytest.mark.asyncio

ADMIN = "/api/v1/admin"
JSON_ACCEPT = {"Accept": "application/json"}


class TestAdminAuth:
    async def test_no_token_rejected(self, client: AsyncClient):
        response = await client.get(f"{ADMIN}/bookings")
        assert response.status_code in (401, 403)

    async def test_invalid_token_rejected(self, client: AsyncClient):
        response = await client.get(f"{ADMIN}/bookings", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    async def test_non_admin_forbidden(self, client: AsyncClient, staff_user):
        tokens = create_token_pair(str(staff_user.id))
        response = await client.get(
            f"{ADMIN}/bookings", headers={"Authorization": f"Bearer {tokens['access_token']}"}
        )
        assert response.status_code == 403

    async def test_mutations_require_auth(self, client: AsyncClient, stored_booking, booking_store):
        response = await client.delete(f"{ADMIN}/bookings")
        assert response.status_code in (401, 403)
        async with booking_store.open() as bookings:
            assert len(await bookings.list_all()) == 1


class TestListBookings:
    async def test_list_newest_first(self, client: AsyncClient, auth_headers, booking_store, new_booking):
        async with booking_store.open() as bookings:
            await bookings.create(new_booking(guest_name="Older"))
            await bookings.create(new_booking(guest_name="Newer", status="Confirmed"))

        response = await client.get(f"{ADMIN}/bookings", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [b["guestName"] for b in data["items"]] == ["Newer", "Older"]
        assert "totalPrice" in data["items"][0]

    async def test_filter_by_status(self, client: AsyncClient, auth_headers, booking_store, new_booking):
        async with booking_store.open() as bookings:
            await bookings.create(new_booking(guest_name="Waiting"))
            await bookings.create(new_booking(guest_name="Done", status="Confirmed"))

        response = await client.get(f"{ADMIN}/bookings", params={"status": "Pending"}, headers=auth_headers)

        assert [b["guestName"] for b in response.json()["items"]] == ["Waiting"]

    async def test_get_one(self, client: AsyncClient, auth_headers, stored_booking):
        response = await client.get(f"{ADMIN}/bookings/{stored_booking.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["id"] == stored_booking.id

    async def test_get_missing(self, client: AsyncClient, auth_headers):
        response = await client.get(f"{ADMIN}/bookings/1", headers=auth_headers)
        assert response.status_code == 404


class TestConfirmBooking:
    async def test_confirm(self, client: AsyncClient, auth_headers, stored_booking, dispatcher, booking_store):
        response = await client.post(f"{ADMIN}/bookings/{stored_booking.id}/confirm", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Booking Confirmed Successfully",
            "guestNotified": True,
        }
        assert dispatcher.kinds() == [NotificationKind.GUEST_CONFIRMATION]
        async with booking_store.open() as bookings:
            assert (await bookings.get(stored_booking.id)).status == "Confirmed"

    async def test_confirm_persists_when_email_fails(
        self, client: AsyncClient, auth_headers, stored_booking, dispatcher, booking_store
    ):
        dispatcher.succeed = False

        response = await client.post(f"{ADMIN}/bookings/{stored_booking.id}/confirm", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["guestNotified"] is False
        async with booking_store.open() as bookings:
            booking = await bookings.get(stored_booking.id)
        assert booking.status == "Confirmed"
        assert booking.last_notification_ok is False

    async def test_confirm_twice(self, client: AsyncClient, auth_headers, stored_booking, booking_store):
        url = f"{ADMIN}/bookings/{stored_booking.id}/confirm"
        first = await client.post(url, headers=auth_headers)
        second = await client.post(url, headers=auth_headers)

        assert first.status_code == second.status_code == 200
        async with booking_store.open() as bookings:
            booking = await bookings.get(stored_booking.id)
        assert booking.status == "Confirmed"
        assert booking.total_price == stored_booking.total_price
        assert booking.guest_name == stored_booking.guest_name
        assert booking.email == stored_booking.email
        assert booking.check_in == stored_booking.check_in
        assert booking.check_out == stored_booking.check_out

    async def test_confirm_missing(self, client: AsyncClient, auth_headers, dispatcher):
        response = await client.post(f"{ADMIN}/bookings/404/confirm", headers=auth_headers)

        assert response.status_code == 404
        assert dispatcher.sent == []


class TestUpdateStatus:
    async def test_cancel_json(self, client: AsyncClient, auth_headers, stored_booking, dispatcher):
        response = await client.post(
            f"{ADMIN}/bookings/status",
            json={"bookingId": stored_booking.id, "status": "Cancelled"},
            headers={**auth_headers, **JSON_ACCEPT},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Booking status updated to Cancelled"}
        assert dispatcher.kinds() == [NotificationKind.GUEST_CANCELLATION]

    async def test_redirects_without_json_accept(self, client: AsyncClient, auth_headers, stored_booking):
        response = await client.post(
            f"{ADMIN}/bookings/status",
            json={"bookingId": stored_booking.id, "status": "Confirmed"},
            headers={**auth_headers, "Accept": "text/html"},
        )

        assert response.status_code == 303
        assert response.headers["location"] == f"{settings.admin_dashboard_url}?tab=bookings&msg=Booking+Updated"

    async def test_pending_sends_nothing(self, client: AsyncClient, auth_headers, stored_booking, dispatcher):
        response = await client.post(
            f"{ADMIN}/bookings/status",
            json={"bookingId": stored_booking.id, "status": "Pending"},
            headers={**auth_headers, **JSON_ACCEPT},
        )

        assert response.status_code == 200
        assert dispatcher.sent == []

    async def test_missing_booking_json(self, client: AsyncClient, auth_headers):
        response = await client.post(
            f"{ADMIN}/bookings/status",
            json={"bookingId": 1, "status": "Confirmed"},
            headers={**auth_headers, **JSON_ACCEPT},
        )

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Booking not found"}

    async def test_missing_booking_redirect(self, client: AsyncClient, auth_headers):
        response = await client.post(
            f"{ADMIN}/bookings/status",
            json={"bookingId": 1, "status": "Confirmed"},
            headers={**auth_headers, "Accept": "text/html"},
        )

        assert response.status_code == 303
        assert "msg=Error%3A+Booking+Not+Found" in response.headers["location"]

    async def test_unknown_status_rejected(self, client: AsyncClient, auth_headers, stored_booking):
        response = await client.post(
            f"{ADMIN}/bookings/status",
            json={"bookingId": stored_booking.id, "status": "Archived"},
            headers={**auth_headers, **JSON_ACCEPT},
        )

        assert response.status_code == 422


class TestClearBookings:
    async def test_clear(self, client: AsyncClient, auth_headers, booking_store, new_booking, activity_log):
        async with booking_store.open() as bookings:
            await bookings.create(new_booking())
            await bookings.create(new_booking())

        response = await client.delete(f"{ADMIN}/bookings", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "All booking records cleared successfully!",
            "cleared": 2,
        }
        async with booking_store.open() as bookings:
            assert await bookings.list_all() == []
        assert len(activity_log) == 1


class TestReminders:
    async def test_run_now(self, client: AsyncClient, auth_headers, booking_store, new_booking, dispatcher):
        tomorrow = hotel_today(settings.timezone) + timedelta(days=1)
        async with booking_store.open() as bookings:
            await bookings.create(new_booking(status="Confirmed", check_in=tomorrow, check_out=tomorrow + timedelta(days=2)))

        first = await client.post(f"{ADMIN}/reminders/run", headers=auth_headers)
        second = await client.post(f"{ADMIN}/reminders/run", headers=auth_headers)

        assert first.status_code == 200
        assert first.json()["sent"] == 1
        assert second.json()["sent"] == 0
        assert dispatcher.kinds() == [NotificationKind.PRE_ARRIVAL_REMINDER]


class TestActivity:
    async def test_records_admin_actions(self, client: AsyncClient, auth_headers, stored_booking):
        await client.post(f"{ADMIN}/bookings/{stored_booking.id}/confirm", headers=auth_headers)
        await client.post(
            f"{ADMIN}/bookings/status",
            json={"bookingId": stored_booking.id, "status": "Cancelled"},
            headers={**auth_headers, **JSON_ACCEPT},
        )

        response = await client.get(f"{ADMIN}/activity", headers=auth_headers)

        assert response.status_code == 200
        messages = [entry["message"] for entry in response.json()]
        assert messages[0] == f"Booking #{stored_booking.id} status set to Cancelled"
        assert "confirmed" in messages[1]


class TestExport:
    async def test_export_download(self, client: AsyncClient, auth_headers, db_session, deluxe_room, stored_booking):
        await put_document(db_session, "floors", [{"name": "First", "rooms": ["201"]}])
        await db_session.commit()

        response = await client.get(f"{ADMIN}/export", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-disposition"] == "attachment; filename=the-aura-inn-backup.json"
        data = response.json()
        assert [b["id"] for b in data["bookings"]] == [stored_booking.id]
        assert data["roomTypes"][0]["name"] == "Deluxe"
        assert data["floors"] == [{"name": "First", "rooms": ["201"]}]
        assert data["reviews"] == []
        assert data["homeData"] == {}
