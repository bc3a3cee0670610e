from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from uuid import uuid4

import stripe
from django.apps import apps
from django.conf import settings

from bookings.exceptions import NotFoundError, PaymentProcessorError
from bookings.pricing import amount_cents_for
from hotels.services import get_hotel

logger = logging.getLogger(__name__)

SUCCEEDED = "succeeded"
REQUIRES_ACTION = "requires_action"
REQUIRES_CONFIRMATION = "requires_confirmation"


@dataclass
class PaymentIntent:
    """The subset of a processor payment intent the booking workflow reads."""

    id: str
    client_secret: str
    amount: int
    currency: str
    status: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentConfirmation:
    intent_id: str
    status: str
    redirect_url: Optional[str] = None
    error_message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCEEDED

    @property
    def requires_redirect(self) -> bool:
        return self.status == REQUIRES_ACTION and bool(self.redirect_url)


@dataclass(frozen=True)
class IssuedIntent:
    intent_id: str
    client_secret: str
    amount: int


def intent_id_from_client_secret(client_secret: str) -> str:
    if not client_secret or "_secret_" not in client_secret:
        raise PaymentProcessorError("Invalid client secret.")
    return client_secret.split("_secret_", 1)[0]


class PaymentGateway:
    """Operations the booking workflow needs from a payment processor."""

    def create_intent(self, *, amount_cents: int, currency: str, metadata: Dict[str, Any]) -> PaymentIntent:
        raise NotImplementedError

    def confirm(self, client_secret: str, *, return_url: str) -> PaymentConfirmation:
        raise NotImplementedError

    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        raise NotImplementedError


class StripePaymentGateway(PaymentGateway):
    """
    Stripe-backed gateway. The API key is passed on every request instead of
    being assigned to ``stripe.api_key`` so separate gateways never share state.
    """

    def __init__(self, api_key: str):
        if not api_key:
            raise RuntimeError("Stripe secret key is not configured.")
        self.api_key = api_key

    def create_intent(self, *, amount_cents, currency, metadata):
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_cents,
                currency=currency,
                metadata=metadata,
                automatic_payment_methods={"enabled": True},
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            logger.warning("Stripe rejected payment intent creation: %s", exc)
            raise PaymentProcessorError(_stripe_message(exc)) from exc
        return _from_stripe_intent(intent)

    def confirm(self, client_secret, *, return_url):
        intent_id = intent_id_from_client_secret(client_secret)
        try:
            intent = stripe.PaymentIntent.confirm(
                intent_id,
                return_url=return_url,
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            logger.warning("Stripe rejected confirmation of %s: %s", intent_id, exc)
            raise PaymentProcessorError(_stripe_message(exc)) from exc

        status = getattr(intent, "status", "")
        redirect_url = None
        next_action = getattr(intent, "next_action", None)
        if status == REQUIRES_ACTION and next_action is not None:
            redirect = getattr(next_action, "redirect_to_url", None)
            redirect_url = getattr(redirect, "url", None)
        error = getattr(intent, "last_payment_error", None)
        return PaymentConfirmation(
            intent_id=intent.id,
            status=status,
            redirect_url=redirect_url,
            error_message=getattr(error, "message", "") or "",
        )

    def retrieve_intent(self, intent_id):
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            logger.warning("Unable to retrieve payment intent %s: %s", intent_id, exc)
            raise PaymentProcessorError(_stripe_message(exc)) from exc
        return _from_stripe_intent(intent)


class StubPaymentGateway(PaymentGateway):
    """
    In-memory stand-in for Stripe used when no secret key is configured.

    Local development does not hit Stripe; instead, we return predictable
    identifiers and every confirmation of a known client secret succeeds.

    Intents live in process memory: only the newest ``max_intents`` are kept,
    and a multi-worker server cannot confirm or verify an intent issued by
    another worker. Use a Stripe test key for anything beyond a single
    development process.
    """

    MAX_INTENTS = 1000

    def __init__(self, max_intents: int = MAX_INTENTS):
        self.max_intents = max_intents
        self.intents: "OrderedDict[str, PaymentIntent]" = OrderedDict()

    def create_intent(self, *, amount_cents, currency, metadata):
        intent_id = f"pi_test_{uuid4().hex}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex}",
            amount=amount_cents,
            currency=currency,
            status=REQUIRES_CONFIRMATION,
            metadata=dict(metadata),
        )
        self.intents[intent_id] = intent
        while len(self.intents) > self.max_intents:
            self.intents.popitem(last=False)
        return intent

    def confirm(self, client_secret, *, return_url):
        intent_id = intent_id_from_client_secret(client_secret)
        intent = self.intents.get(intent_id)
        if intent is None or intent.client_secret != client_secret:
            raise PaymentProcessorError(f"No such payment_intent: '{intent_id}'")
        intent.status = SUCCEEDED
        return PaymentConfirmation(intent_id=intent.id, status=intent.status)

    def retrieve_intent(self, intent_id):
        intent = self.intents.get(intent_id)
        if intent is None:
            raise PaymentProcessorError(f"No such payment_intent: '{intent_id}'")
        return intent


def _stripe_message(exc: stripe.StripeError) -> str:
    return getattr(exc, "user_message", None) or str(exc) or "Payment processor error."


def _from_stripe_intent(intent) -> PaymentIntent:
    metadata = getattr(intent, "metadata", None) or {}
    return PaymentIntent(
        id=intent.id,
        client_secret=intent.client_secret,
        amount=intent.amount,
        currency=intent.currency,
        status=intent.status,
        metadata=dict(metadata),
    )


def _should_use_stub() -> bool:
    if getattr(settings, "STRIPE_USE_STUB", False):
        return True
    return not getattr(settings, "STRIPE_SECRET_KEY", "")


def build_payment_gateway() -> PaymentGateway:
    if _should_use_stub():
        logger.info("Using stub payment gateway.")
        return StubPaymentGateway()
    return StripePaymentGateway(settings.STRIPE_SECRET_KEY)


def get_payment_gateway() -> PaymentGateway:
    """Return the gateway constructed once when the bookings app loaded."""
    return apps.get_app_config("bookings").payment_gateway


def create_payment_intent(*, hotel_id, nights: int, gateway: PaymentGateway) -> IssuedIntent:
    """
    Reserve a charge for ``nights`` at the hotel's stored nightly price.

    The amount is always recomputed from the hotel record; callers cannot
    influence it. Nothing is written locally, so a failed call leaves no state
    behind and retrying simply issues a fresh intent.
    """

    hotel = get_hotel(hotel_id)
    if hotel is None:
        raise NotFoundError("Hotel not found")

    amount = amount_cents_for(hotel.price_per_night, nights)
    intent = gateway.create_intent(
        amount_cents=amount,
        currency=settings.PAYMENT_CURRENCY,
        metadata={
            "hotelId": str(hotel.id),
            "hotelName": hotel.name,
            "nights": str(nights),
        },
    )
    logger.info("Created payment intent %s for hotel %s (%s nights, %s cents)", intent.id, hotel.id, nights, amount)
    return IssuedIntent(intent_id=intent.id, client_secret=intent.client_secret, amount=amount)
