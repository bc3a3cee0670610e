from rest_framework import serializers

from bookings.models import Booking


class PaymentIntentRequestSerializer(serializers.Serializer):
    hotelId = serializers.IntegerField(source="hotel_id")
    nights = serializers.IntegerField(min_value=1)


class BookingCreateSerializer(serializers.Serializer):
    hotelId = serializers.IntegerField(source="hotel_id")
    checkIn = serializers.DateField(source="check_in")
    checkOut = serializers.DateField(source="check_out")
    totalPrice = serializers.DecimalField(
        source="total_price",
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )
    paymentIntentId = serializers.CharField(
        source="payment_intent_id",
        max_length=255,
        required=False,
        allow_blank=True,
        default="",
    )


class BookingSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    hotelId = serializers.IntegerField(source="hotel_id", read_only=True)
    hotelName = serializers.CharField(source="hotel.name", read_only=True)
    checkIn = serializers.DateField(source="check_in", read_only=True)
    checkOut = serializers.DateField(source="check_out", read_only=True)
    totalPrice = serializers.DecimalField(source="total_price", max_digits=10, decimal_places=2, read_only=True)
    paymentIntentId = serializers.CharField(source="payment_intent_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "userId",
            "hotelId",
            "hotelName",
            "checkIn",
            "checkOut",
            "totalPrice",
            "status",
            "paymentIntentId",
            "createdAt",
        ]
        read_only_fields = fields


def flatten_errors(errors) -> str:
    """Collapse DRF's nested error dict into a single human readable line."""
    messages = []
    if isinstance(errors, dict):
        for field, value in errors.items():
            text = flatten_errors(value)
            messages.append(text if field == "non_field_errors" else f"{field}: {text}")
    elif isinstance(errors, (list, tuple)):
        messages.extend(flatten_errors(item) for item in errors)
    else:
        messages.append(str(errors))
    return "; ".join(messages)
