"""Pydantic v2 request/response schemas for booking endpoints.

Booking payloads use camelCase on the wire (``guestName``, ``checkIn``,
``totalPrice``) so the legacy booking form and exported documents keep
working unchanged.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _free_text(value: Any) -> Any:
    """Accept numbers and nulls for free-form text fields."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingSubmission(BaseModel):
    """Guest-facing booking form.

    Required fields are checked by the booking workflow rather than here so a
    missing field produces the same 400 response the booking form expects.
    """

    model_config = _CAMEL

    guest_name: str | None = None
    phone: str = ""
    email: str | None = None
    check_in: date | None = None
    check_out: date | None = None
    adults: str = ""
    children: str = ""
    room_type: str | None = None
    breakfast: bool = False
    pickup: bool = False
    special_requests: str = ""
    flight_no: str = ""
    arrival_time: str = ""
    utr: str = ""
    is_direct_booking: bool = False

    @field_validator("phone", "adults", "children", "special_requests", "flight_no", "arrival_time", "utr", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _free_text(value)

    @field_validator("email", "guest_name", "room_type", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def _blank_date_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class BookingStatusChange(BaseModel):
    """Admin status change for a single booking."""

    model_config = _CAMEL

    booking_id: int
    status: str = Field(..., pattern="^(Pending|Confirmed|Cancelled)$")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingRecord(BaseModel):
    """Full booking record as returned to admins, exported, and stored by the
    flat-file backend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )

    id: int
    guest_name: str
    phone: str = ""
    email: str | None = None
    check_in: date
    check_out: date
    adults: str = ""
    children: str = ""
    room_type: str
    breakfast: bool = False
    pickup: bool = False
    flight_no: str = ""
    arrival_time: str = ""
    special_requests: str = ""
    total_price: int = 0
    utr: str = ""
    status: str = "Pending"
    created_at: datetime
    pre_arrival_email_sent: bool = False
    last_notification_kind: str | None = None
    last_notification_ok: bool | None = None
    last_notification_at: datetime | None = None

    @field_validator("phone", "adults", "children", "flight_no", "arrival_time", "special_requests", "utr", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _free_text(value)

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("total_price", mode="before")
    @classmethod
    def _null_price(cls, value: Any) -> Any:
        return 0 if value is None else value


class BookingListResponse(BaseModel):
    """List of bookings, newest first."""

    items: list[BookingRecord]
    total: int


class BookingSubmitResponse(BaseModel):
    """Acknowledgement returned to the guest right after a booking is stored."""

    model_config = _CAMEL

    success: bool = True
    message: str
    booking_id: int


class ActionResponse(BaseModel):
    """Generic success/message payload for admin actions."""

    success: bool
    message: str


class ClearBookingsResponse(ActionResponse):
    """Result of wiping the booking collection."""

    cleared: int


class ConfirmBookingResponse(ActionResponse):
    """Result of confirming a booking, including whether the guest was emailed."""

    model_config = _CAMEL

    guest_notified: bool
