from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone

from .exceptions import ValidationError

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StayQuote:
    check_in: date
    check_out: date
    nights: int
    price_per_night: Decimal
    total_price: Decimal

    @property
    def amount_cents(self) -> int:
        return to_minor_units(self.total_price)


def to_minor_units(value) -> int:
    """Convert a currency amount to integer cents, rounding half up."""
    return int((Decimal(value) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def normalize_stay_date(value: date | datetime) -> date:
    """Drop time-of-day, keeping the calendar date in the local timezone."""
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    return value


def calculate_nights(check_in: date | datetime, check_out: date | datetime) -> int:
    if check_in is None or check_out is None:
        raise ValidationError("Check-in and check-out dates are required.")
    start = normalize_stay_date(check_in)
    end = normalize_stay_date(check_out)
    if end <= start:
        raise ValidationError("Check-out date must be after check-in date.")
    return math.ceil((end - start) / ONE_DAY)


def quote_stay(price_per_night, check_in: date | datetime, check_out: date | datetime) -> StayQuote:
    nights = calculate_nights(check_in, check_out)
    price = Decimal(price_per_night)
    return StayQuote(
        check_in=normalize_stay_date(check_in),
        check_out=normalize_stay_date(check_out),
        nights=nights,
        price_per_night=price,
        total_price=price * nights,
    )


def amount_cents_for(price_per_night, nights: int) -> int:
    # bool is an int subclass; True must not count as one night
    if isinstance(nights, bool) or not isinstance(nights, int) or nights < 1:
        raise ValidationError("Nights must be a positive whole number.")
    return to_minor_units(Decimal(price_per_night) * nights)
