"""Pre-arrival reminder sweep.

Sends one reminder to every confirmed guest arriving tomorrow. Each booking's
``pre_arrival_email_sent`` flag is written right after its reminder goes out,
so running the sweep again the same day sends nothing new. Delivery is
at-least-once: a crash between a send and its flag write re-sends that
reminder on the next run.
"""

import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from aura_inn.config import settings
from aura_inn.services.booking_repository import BookingStore
from aura_inn.services.booking_workflow import CONFIRMED
from aura_inn.services.notifications import NotificationDispatcher, NotificationKind, dispatch

logger = logging.getLogger(__name__)


def hotel_today(tz_name: str) -> date:
    """Today's date in the hotel's timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()


async def send_pre_arrival_reminders(
    store: BookingStore,
    dispatcher: NotificationDispatcher,
    today: date | None = None,
) -> dict[str, int]:
    """Remind confirmed guests whose check-in is the day after ``today``.

    ``today`` defaults to the current date in the hotel's timezone.
    """
    if today is None:
        today = hotel_today(settings.timezone)
    tomorrow = today + timedelta(days=1)
    logger.info("Checking for pre-arrival reminders (arrivals on %s)", tomorrow)

    counts = {"checked": 0, "sent": 0, "failed": 0, "skipped_no_email": 0}
    async with store.open() as bookings:
        for booking in await bookings.list_all(status=CONFIRMED):
            counts["checked"] += 1
            if booking.check_in != tomorrow or booking.pre_arrival_email_sent:
                continue
            if not booking.email:
                counts["skipped_no_email"] += 1
                continue

            if await dispatch(bookings, dispatcher, NotificationKind.PRE_ARRIVAL_REMINDER, booking):
                await bookings.mark_pre_arrival_sent(booking.id)
                counts["sent"] += 1
            else:
                counts["failed"] += 1

    if counts["sent"]:
        logger.info("Pre-arrival reminders sent: %d", counts["sent"])
    else:
        logger.info("No pre-arrival reminders needed")
    return counts
