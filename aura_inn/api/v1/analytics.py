"""Admin dashboard analytics — revenue, pending work and daily activity."""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aura_inn.api.deps import get_bookings, get_current_admin, get_db
from aura_inn.config import settings
from aura_inn.models.booking import Booking
from aura_inn.schemas.analytics import DashboardStats, MonthlySeries, RevenueDetails
from aura_inn.schemas.booking import BookingRecord
from aura_inn.services.booking_repository import BookingRepository
from aura_inn.services.booking_workflow import CONFIRMED, PENDING
from aura_inn.services.site_content import get_document, occupancy_percent

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["analytics"],
    dependencies=[Depends(get_current_admin)],
)


def _confirmed_revenue(bookings: list[Booking]) -> int:
    return sum(b.total_price or 0 for b in bookings if b.status == CONFIRMED)


def _current_month_series(bookings: list[Booking], now: datetime) -> dict[str, list]:
    """Bookings created per day of ``now``'s month, with their revenue.

    Revenue counts Pending and Confirmed bookings; cancelled ones only count
    as clients.
    """
    days_in_month = calendar.monthrange(now.year, now.month)[1]
    month_name = now.strftime("%b")
    clients = [0] * days_in_month
    revenue = [0] * days_in_month

    for booking in bookings:
        created = booking.created_at
        if now.tzinfo is not None:
            # SQLite hands back naive UTC timestamps
            if created.tzinfo is None:
                created = created.replace(tzinfo=timezone.utc)
            created = created.astimezone(now.tzinfo)
        if (created.year, created.month) != (now.year, now.month):
            continue
        day_index = created.day - 1
        clients[day_index] += 1
        if booking.status in (CONFIRMED, PENDING):
            revenue[day_index] += booking.total_price or 0

    return {
        "labels": [f"{day} {month_name}" for day in range(1, days_in_month + 1)],
        "clients": clients,
        "revenue": revenue,
    }


def _monthly_revenue(bookings: list[Booking]) -> dict[str, int]:
    """Confirmed revenue keyed by check-in month, e.g. ``"March 2024"``."""
    totals: dict[str, int] = defaultdict(int)
    for booking in bookings:
        totals[booking.check_in.strftime("%B %Y")] += booking.total_price or 0
    return dict(totals)


@router.get("/stats", response_model=DashboardStats, summary="Dashboard headline numbers")
async def get_stats(
    db: AsyncSession = Depends(get_db),
    bookings: BookingRepository = Depends(get_bookings),
) -> DashboardStats:
    all_bookings = await bookings.list_all()
    floors = await get_document(db, "floors")
    return DashboardStats(
        revenue=_confirmed_revenue(all_bookings),
        pending_count=sum(1 for b in all_bookings if b.status == PENDING),
        total_bookings=len(all_bookings),
        occupancy=occupancy_percent(floors),
    )


@router.get("/analytics/current-month", response_model=MonthlySeries, summary="Daily bookings this month")
async def get_current_month(bookings: BookingRepository = Depends(get_bookings)) -> MonthlySeries:
    now = datetime.now(ZoneInfo(settings.timezone))
    return MonthlySeries(**_current_month_series(await bookings.list_all(), now))


@router.get("/revenue", response_model=RevenueDetails, summary="Confirmed revenue breakdown")
async def get_revenue(bookings: BookingRepository = Depends(get_bookings)) -> RevenueDetails:
    confirmed = await bookings.list_all(status=CONFIRMED)
    return RevenueDetails(
        bookings=[BookingRecord.model_validate(b) for b in confirmed],
        revenue=_confirmed_revenue(confirmed),
        monthly_revenue=_monthly_revenue(confirmed),
    )
