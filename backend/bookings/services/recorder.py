from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction

from bookings.exceptions import (
    AuthenticationError,
    NotFoundError,
    PaymentProcessorError,
    PersistenceError,
    ValidationError,
)
from bookings.models import Booking
from bookings.pricing import StayQuote, quote_stay
from bookings.services.payments import SUCCEEDED, PaymentGateway
from hotels.services import get_hotel

logger = logging.getLogger(__name__)


def _coerce_total(value) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Total price must be a number.")


INTENT_ALREADY_USED = "This payment has already been used for a booking."


def _verify_payment(gateway: PaymentGateway | None, payment_intent_id: str, hotel, quote: StayQuote):
    if not payment_intent_id:
        raise ValidationError("A payment intent id is required to record a booking.")
    if gateway is None:
        raise PaymentProcessorError("No payment gateway available to verify payment.")
    if Booking.objects.filter(payment_intent_id=payment_intent_id).exists():
        raise ValidationError(INTENT_ALREADY_USED)
    intent = gateway.retrieve_intent(payment_intent_id)
    if intent.status != SUCCEEDED:
        raise PaymentProcessorError("Payment has not been completed.")
    if intent.amount != quote.amount_cents:
        raise PaymentProcessorError("Payment amount does not match the booking total.")
    metadata = intent.metadata or {}
    if metadata.get("hotelId") != str(hotel.id) or metadata.get("nights") != str(quote.nights):
        raise PaymentProcessorError("Payment was made for a different stay.")


def record_booking(
    *,
    user,
    hotel_id,
    check_in,
    check_out,
    total_price=None,
    payment_intent_id: str = "",
    gateway: PaymentGateway | None = None,
) -> Booking:
    """
    Persist one pending booking for ``user``.

    Callers are expected to invoke this only after the payment confirmed.
    The processor is not consulted unless ``BOOKING_VERIFY_PAYMENT`` is on.
    A non-blank ``payment_intent_id`` may back only one booking; calls
    without one are not deduplicated and every such call inserts a new row.
    """

    if user is None or not user.is_authenticated:
        raise AuthenticationError()

    hotel = get_hotel(hotel_id)
    if hotel is None:
        raise NotFoundError("Hotel not found")

    quote = quote_stay(hotel.price_per_night, check_in, check_out)
    if total_price is not None and _coerce_total(total_price) != quote.total_price:
        raise ValidationError(
            f"Total price {total_price} does not match {quote.total_price} for {quote.nights} night(s)."
        )

    if settings.BOOKING_VERIFY_PAYMENT:
        _verify_payment(gateway, payment_intent_id, hotel, quote)

    try:
        with transaction.atomic():
            booking = Booking.objects.create(
                user=user,
                hotel=hotel,
                check_in=quote.check_in,
                check_out=quote.check_out,
                total_price=quote.total_price,
                status=Booking.PENDING,
                payment_intent_id=payment_intent_id or "",
            )
    except IntegrityError as exc:
        if payment_intent_id and Booking.objects.filter(payment_intent_id=payment_intent_id).exists():
            logger.warning("Payment %s was already used for a booking", payment_intent_id)
            raise ValidationError(INTENT_ALREADY_USED) from exc
        logger.error("Failed to record booking for user %s at hotel %s: %s", user.pk, hotel.id, exc)
        raise PersistenceError() from exc
    except DatabaseError as exc:
        logger.error(
            "Failed to record booking for user %s at hotel %s after payment %s: %s",
            user.pk,
            hotel.id,
            payment_intent_id or "<unknown>",
            exc,
        )
        raise PersistenceError() from exc

    logger.info("Recorded booking %s for user %s at hotel %s", booking.id, user.pk, hotel.id)
    return booking


def get_user_bookings(user):
    return Booking.objects.filter(user=user).select_related("hotel").order_by("-created_at", "-id")
