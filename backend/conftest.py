from decimal import Decimal

import pytest
from django.apps import apps
from rest_framework.test import APIClient

from accounts.models import User
from bookings.exceptions import PaymentProcessorError
from bookings.services.payments import (
    SUCCEEDED,
    PaymentConfirmation,
    StubPaymentGateway,
)
from hotels.models import Hotel


class FakePaymentGateway(StubPaymentGateway):
    """Stub gateway that records calls and can be told to fail."""

    def __init__(self):
        super().__init__()
        self.created = []
        self.confirmed = []
        self.create_error = None
        self.confirm_error = None
        self.confirm_status = SUCCEEDED
        self.redirect_url = None

    def create_intent(self, *, amount_cents, currency, metadata):
        self.created.append({"amount_cents": amount_cents, "currency": currency, "metadata": metadata})
        if self.create_error:
            raise PaymentProcessorError(self.create_error)
        return super().create_intent(amount_cents=amount_cents, currency=currency, metadata=metadata)

    def confirm(self, client_secret, *, return_url):
        self.confirmed.append({"client_secret": client_secret, "return_url": return_url})
        if self.confirm_error:
            raise PaymentProcessorError(self.confirm_error)
        if self.redirect_url:
            intent_id = client_secret.split("_secret_", 1)[0]
            return PaymentConfirmation(intent_id=intent_id, status="requires_action", redirect_url=self.redirect_url)
        if self.confirm_status != SUCCEEDED:
            intent_id = client_secret.split("_secret_", 1)[0]
            return PaymentConfirmation(
                intent_id=intent_id,
                status=self.confirm_status,
                error_message="Your card was declined.",
            )
        return super().confirm(client_secret, return_url=return_url)


@pytest.fixture
def gateway(monkeypatch):
    fake = FakePaymentGateway()
    monkeypatch.setattr(apps.get_app_config("bookings"), "payment_gateway", fake)
    return fake


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="traveller",
        email="traveller@example.com",
        password="password123",
    )


@pytest.fixture
def hotel(db):
    return Hotel.objects.create(
        name="Harbour Lights Inn",
        description="Boutique rooms by the river.",
        location="Lisbon, Portugal",
        image_url="https://images.example.com/harbour.jpg",
        price_per_night=Decimal("120.00"),
        rating=Decimal("4.6"),
        amenities=["wifi", "breakfast"],
    )


@pytest.fixture
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user)
    return client


@pytest.fixture
def anon_client():
    return APIClient()
