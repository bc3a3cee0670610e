from django.apps import AppConfig


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "bookings"

    payment_gateway = None

    def ready(self):
        from bookings.services.payments import build_payment_gateway

        self.payment_gateway = build_payment_gateway()
