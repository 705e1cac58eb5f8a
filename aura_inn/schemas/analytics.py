"""Pydantic v2 schemas for admin dashboard analytics."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from aura_inn.schemas.booking import BookingRecord

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DashboardStats(BaseModel):
    """Headline numbers for the admin dashboard."""

    model_config = _CAMEL

    revenue: int
    pending_count: int
    total_bookings: int
    occupancy: int  # percentage of rooms marked Occupied, 0–100


class MonthlySeries(BaseModel):
    """Per-day client and revenue counts for the current month."""

    labels: list[str]
    clients: list[int]
    revenue: list[int]


class RevenueDetails(BaseModel):
    """Confirmed bookings with total and per-month revenue."""

    model_config = _CAMEL

    bookings: list[BookingRecord]
    revenue: int
    monthly_revenue: dict[str, int]


class ActivityEntry(BaseModel):
    """One admin activity log line."""

    timestamp: str
    message: str
