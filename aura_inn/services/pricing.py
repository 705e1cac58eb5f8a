"""Booking price calculation.

Prices are whole units of the local currency. The calculation is pure: the
caller looks up the room type's nightly price and passes it in.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

DIRECT_BOOKING_DISCOUNT = Decimal("0.20")
BREAKFAST_PRICE_PER_NIGHT = 500
PICKUP_PRICE = 800


def calculate_nights(check_in: date, check_out: date) -> int:
    """Number of nights charged for a stay, never less than one.

    Same-day and inverted ranges are charged as a single night.
    """
    return max(1, (check_out - check_in).days)


def calculate_total_price(
    base_price: int | Decimal | None,
    check_in: date,
    check_out: date,
    breakfast: bool = False,
    pickup: bool = False,
    is_direct_booking: bool = False,
) -> int:
    """Compute the total price of a stay.

    Args:
        base_price: Nightly price of the room type. ``None`` (no matching room
            type) contributes nothing to the total.
        check_in: Arrival date.
        check_out: Departure date.
        breakfast: Breakfast add-on, charged per night.
        pickup: Airport pickup add-on, charged once.
        is_direct_booking: Applies the direct-booking discount to the room
            subtotal (not to add-ons).

    Returns:
        The total rounded half-up to a whole unit.
    """
    nights = calculate_nights(check_in, check_out)

    subtotal = Decimal(base_price or 0) * nights
    discount = subtotal * DIRECT_BOOKING_DISCOUNT if is_direct_booking else Decimal(0)

    addons = Decimal(0)
    if breakfast:
        addons += BREAKFAST_PRICE_PER_NIGHT * nights
    if pickup:
        addons += PICKUP_PRICE

    total = subtotal - discount + addons
    return int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
