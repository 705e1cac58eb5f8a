"""Booking model — guest reservation requests and their lifecycle."""

from datetime import date, datetime

from sqlalchemy import BigInteger, Boolean, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from aura_inn.database import Base

BOOKING_STATUSES = ("Pending", "Confirmed", "Cancelled")


class Booking(Base):
    """A guest's reservation for a room type over a date range.

    The primary key is the creation timestamp in milliseconds, so ids sort in
    insertion order.
    """

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    guest_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), default="")
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    adults: Mapped[str] = mapped_column(String(20), default="")
    children: Mapped[str] = mapped_column(String(20), default="")

    room_type: Mapped[str] = mapped_column(String(255), nullable=False)
    breakfast: Mapped[bool] = mapped_column(Boolean, default=False)
    pickup: Mapped[bool] = mapped_column(Boolean, default=False)
    flight_no: Mapped[str] = mapped_column(String(50), default="")
    arrival_time: Mapped[str] = mapped_column(String(50), default="")
    special_requests: Mapped[str] = mapped_column(Text, default="")

    total_price: Mapped[int] = mapped_column(Integer, default=0)
    utr: Mapped[str] = mapped_column(String(100), default="")
    status: Mapped[str] = mapped_column(String(20), default="Pending", index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    pre_arrival_email_sent: Mapped[bool] = mapped_column(Boolean, default=False)

    # Outcome of the most recent notification attempt for this booking
    last_notification_kind: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_notification_ok: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    last_notification_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_bookings_check_in", "check_in"),)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, guest_name={self.guest_name!r}, status={self.status})>"
