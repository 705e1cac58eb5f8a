"""Email notifications for booking events.

Sending is always best effort: ``NotificationDispatcher.send`` never raises.
A failed send is logged and reported as ``False``; there is no retry queue.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from enum import Enum
from functools import lru_cache

from aura_inn.config import Settings, settings
from aura_inn.models.booking import Booking
from aura_inn.services.booking_repository import BookingRepository

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    OWNER_ALERT = "owner_alert"
    GUEST_ACK = "guest_ack"
    GUEST_CONFIRMATION = "guest_confirmation"
    GUEST_CANCELLATION = "guest_cancellation"
    PRE_ARRIVAL_REMINDER = "pre_arrival_reminder"


TEMPLATES = {
    NotificationKind.OWNER_ALERT: {
        "subject": "New Booking Request: {guest_name} (#{booking_id})",
        "body": (
            "A new reservation is waiting for confirmation.\n\n"
            "Guest Details:\n"
            "- Name: {guest_name}\n"
            "- Phone: {phone}\n"
            "- Email: {email}\n\n"
            "Stay Details:\n"
            "- Room: {room_type}\n"
            "- Check-in: {check_in}\n"
            "- Check-out: {check_out}\n"
            "- Total: {total_price}\n"
            "- Payment reference: {utr}\n\n"
            "Confirm it in the admin dashboard."
        ),
    },
    NotificationKind.GUEST_ACK: {
        "subject": "Your Stay at {hotel_name} - Processing Request",
        "body": (
            "Hello {guest_name},\n\n"
            "We've received your request for the {room_type} "
            "({check_in} to {check_out}). You will receive a confirmation once verified.\n\n"
            "Warm regards,\n{hotel_name} Management"
        ),
    },
    NotificationKind.GUEST_CONFIRMATION: {
        "subject": "Your Booking at {hotel_name} is Confirmed! (Booking ID: #{booking_id})",
        "body": (
            "Hello {guest_name},\n\n"
            "We are thrilled to confirm your booking at {hotel_name}.\n\n"
            "Booking Details:\n"
            "- Booking ID: #{booking_id}\n"
            "- Room Type: {room_type}\n"
            "- Check-in: {check_in}\n"
            "- Check-out: {check_out}\n\n"
            "Find us on the map: {location_url}\n\n"
            "We look forward to welcoming you!\n\n"
            "Warm regards,\nTeam - {hotel_name}"
        ),
    },
    NotificationKind.GUEST_CANCELLATION: {
        "subject": "Update: Your Booking Request at {hotel_name}",
        "body": (
            "Hello {guest_name},\n\n"
            "Your booking request (#{booking_id}) for {room_type} has been cancelled.\n\n"
            "This may be due to unavailability or other internal reasons. If you believe "
            "this is an error, please reach out to us.\n\n"
            "Warm regards,\nTeam - {hotel_name}"
        ),
    },
    NotificationKind.PRE_ARRIVAL_REMINDER: {
        "subject": "Your stay at {hotel_name} is just 24 hours away!",
        "body": (
            "Hello {guest_name},\n\n"
            "This is a friendly reminder that your check-in at {hotel_name} is scheduled "
            "for tomorrow, {check_in}.\n\n"
            "Quick Reminders:\n"
            "- Check-in Time: After 2:00 PM\n"
            "- Our Location: {location_url}\n"
            "- Airport Pickup: If you've booked our pickup service, our driver will contact you.\n\n"
            "See you soon!\n\n"
            "Warm regards,\nTeam - {hotel_name}"
        ),
    },
}


def render(kind: NotificationKind, booking: Booking, hotel_name: str, location_url: str) -> tuple[str, str]:
    """Render ``(subject, body)`` for a booking."""
    template_vars = {
        "booking_id": booking.id,
        "guest_name": booking.guest_name or "Guest",
        "phone": booking.phone or "N/A",
        "email": booking.email or "N/A",
        "room_type": booking.room_type,
        "check_in": booking.check_in.isoformat(),
        "check_out": booking.check_out.isoformat(),
        "total_price": booking.total_price,
        "utr": booking.utr or "N/A",
        "hotel_name": hotel_name,
        "location_url": location_url,
    }
    tmpl = TEMPLATES[kind]
    return tmpl["subject"].format(**template_vars), tmpl["body"].format(**template_vars)


class SmtpMailer:
    """Blocking SMTP sender; run it off the event loop."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        sender: str = "",
        use_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.host)

    def send(self, to_email: str, subject: str, body: str, reply_to: str | None = None) -> None:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to_email
        msg["Subject"] = subject
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(body)

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)


class NotificationDispatcher:
    """Renders and sends booking notifications, swallowing every failure."""

    def __init__(self, mailer: SmtpMailer, owner_email: str, hotel_name: str, location_url: str) -> None:
        self.mailer = mailer
        self.owner_email = owner_email
        self.hotel_name = hotel_name
        self.location_url = location_url

    @classmethod
    def from_settings(cls, config: Settings) -> NotificationDispatcher:
        mailer = SmtpMailer(
            host=config.smtp_host,
            port=config.smtp_port,
            username=config.smtp_username,
            password=config.smtp_password,
            sender=f'"{config.hotel_name}" <{config.smtp_from}>',
            use_tls=config.smtp_use_tls,
            timeout=config.smtp_timeout_seconds,
        )
        return cls(mailer, config.owner_address, config.hotel_name, config.hotel_location_url)

    def recipient(self, kind: NotificationKind, booking: Booking, owner_email: str | None = None) -> str | None:
        if kind is NotificationKind.OWNER_ALERT:
            return owner_email or self.owner_email or None
        return booking.email or None

    async def send(self, kind: NotificationKind, booking: Booking, owner_email: str | None = None) -> bool:
        """Send one notification. Returns True only when the mail relay accepted it.

        ``owner_email`` replaces the configured owner address for owner alerts.
        """
        to_email = self.recipient(kind, booking, owner_email)
        if not to_email:
            logger.debug("No recipient for %s on booking %s; skipped", kind.value, booking.id)
            return False
        if not self.mailer.configured:
            logger.warning("SMTP is not configured; %s for booking %s not sent", kind.value, booking.id)
            return False

        subject, body = render(kind, booking, self.hotel_name, self.location_url)
        reply_to = booking.email if kind is NotificationKind.OWNER_ALERT else None
        try:
            await asyncio.to_thread(self.mailer.send, to_email, subject, body, reply_to)
        except Exception as exc:
            logger.error("Failed to send %s for booking %s to %s: %s", kind.value, booking.id, to_email, exc)
            return False

        logger.info("Sent %s for booking %s to %s", kind.value, booking.id, to_email)
        return True


async def dispatch(
    bookings: BookingRepository,
    dispatcher: NotificationDispatcher,
    kind: NotificationKind,
    booking: Booking,
    owner_email: str | None = None,
) -> bool:
    """Send a notification and record the attempt's outcome on the booking."""
    ok = await dispatcher.send(kind, booking, owner_email)
    try:
        await bookings.record_notification(booking.id, kind.value, ok)
    except Exception:
        logger.exception("Could not record %s outcome for booking %s", kind.value, booking.id)
    return ok


@lru_cache
def get_dispatcher() -> NotificationDispatcher:
    """Process-wide dispatcher built from settings (FastAPI dependency)."""
    return NotificationDispatcher.from_settings(settings)
