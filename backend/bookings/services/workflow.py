from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings

from bookings.exceptions import (
    BookingError,
    NotFoundError,
    PaymentProcessorError,
    ValidationError,
    WorkflowStateError,
)
from bookings.models import Booking
from bookings.pricing import StayQuote, quote_stay
from bookings.services.payments import IssuedIntent, PaymentConfirmation, PaymentGateway, create_payment_intent
from bookings.services.recorder import record_booking
from hotels.services import get_hotel

logger = logging.getLogger(__name__)


class BookingAttempt:
    """
    One pass through the booking flow for a single user:

        idle -> form_filled -> intent_created -> payment_confirmed -> booking_persisted
                                              \\-> payment_failed

    A booking is only recorded after the processor reports a successful
    confirmation. Any failure discards the form so the user starts over.
    """

    IDLE = "idle"
    FORM_FILLED = "form_filled"
    INTENT_CREATED = "intent_created"
    PAYMENT_CONFIRMED = "payment_confirmed"
    BOOKING_PERSISTED = "booking_persisted"
    PAYMENT_FAILED = "payment_failed"

    def __init__(self, *, user, gateway: PaymentGateway):
        self.user = user
        self.gateway = gateway
        self.state = self.IDLE
        self.hotel_id = None
        self.quote: Optional[StayQuote] = None
        self.intent: Optional[IssuedIntent] = None
        self.confirmation: Optional[PaymentConfirmation] = None
        self.booking: Optional[Booking] = None
        self.error: Optional[BookingError] = None

    @property
    def redirect_url(self) -> Optional[str]:
        if self.confirmation is not None and self.confirmation.requires_redirect:
            return self.confirmation.redirect_url
        return None

    def _require(self, *states: str):
        if self.state not in states:
            raise WorkflowStateError(f"Cannot continue from state '{self.state}'.")

    def _discard_form(self):
        self.hotel_id = None
        self.quote = None
        self.intent = None
        self.confirmation = None

    def fill_form(self, *, hotel_id, check_in, check_out) -> StayQuote:
        self._require(self.IDLE, self.FORM_FILLED)
        try:
            hotel = get_hotel(hotel_id)
            if hotel is None:
                raise NotFoundError("Hotel not found")
            quote = quote_stay(hotel.price_per_night, check_in, check_out)
        except BookingError as exc:
            # A rejected re-fill must not leave the earlier quote chargeable.
            self.error = exc
            self._discard_form()
            self.state = self.IDLE
            raise
        self.hotel_id = hotel.id
        self.quote = quote
        self.error = None
        self.state = self.FORM_FILLED
        return quote

    def create_intent(self) -> IssuedIntent:
        self._require(self.FORM_FILLED)
        try:
            self.intent = create_payment_intent(
                hotel_id=self.hotel_id,
                nights=self.quote.nights,
                gateway=self.gateway,
            )
        except BookingError as exc:
            self.error = exc
            self._discard_form()
            self.state = self.IDLE
            raise
        self.state = self.INTENT_CREATED
        return self.intent

    def confirm(self, return_url: Optional[str] = None) -> PaymentConfirmation:
        self._require(self.INTENT_CREATED)
        target = return_url or settings.FRONTEND_URL
        try:
            confirmation = self.gateway.confirm(self.intent.client_secret, return_url=target)
        except PaymentProcessorError as exc:
            self._fail(exc)
            raise

        self.confirmation = confirmation
        if confirmation.requires_redirect:
            logger.info("Payment %s requires a redirect before it can complete", confirmation.intent_id)
            return confirmation
        if not confirmation.succeeded:
            self._fail(PaymentProcessorError(confirmation.error_message or "Payment was not completed."))
            raise self.error
        self._persist()
        return confirmation

    def complete_redirect(self, redirect_status: str) -> Booking:
        """Resume after the processor's redirect returned with ``redirect_status``."""
        self._require(self.INTENT_CREATED)
        if self.redirect_url is None:
            raise WorkflowStateError("No payment redirect is pending.")
        if redirect_status != "succeeded":
            self._fail(PaymentProcessorError("Payment was not completed."))
            raise self.error
        return self._persist()

    def _fail(self, exc: BookingError):
        logger.warning("Payment failed for user %s: %s", getattr(self.user, "pk", None), exc)
        self.error = exc
        self._discard_form()
        self.state = self.PAYMENT_FAILED

    def _persist(self) -> Booking:
        self.state = self.PAYMENT_CONFIRMED
        # PersistenceError leaves the attempt in payment_confirmed: paid but not booked.
        try:
            self.booking = record_booking(
                user=self.user,
                hotel_id=self.hotel_id,
                check_in=self.quote.check_in,
                check_out=self.quote.check_out,
                total_price=self.quote.total_price,
                payment_intent_id=self.intent.intent_id,
                gateway=self.gateway,
            )
        except (PaymentProcessorError, ValidationError) as exc:
            self._fail(exc)
            raise
        self.state = self.BOOKING_PERSISTED
        return self.booking

    def reset(self):
        self._discard_form()
        self.booking = None
        self.error = None
        self.state = self.IDLE
