from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.exceptions import (
    NotFoundError,
    PaymentProcessorError,
    PersistenceError,
    ValidationError,
)
from bookings.serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    PaymentIntentRequestSerializer,
    flatten_errors,
)
from bookings.services.payments import create_payment_intent, get_payment_gateway
from bookings.services.recorder import get_user_bookings, record_booking


def _error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> Response:
    return Response({"error": message}, status=status_code)


class PaymentIntentView(APIView):
    """Reserve a charge for a stay; the amount comes from the stored nightly price."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = PaymentIntentRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return _error(flatten_errors(serializer.errors))

        try:
            intent = create_payment_intent(
                hotel_id=serializer.validated_data["hotel_id"],
                nights=serializer.validated_data["nights"],
                gateway=get_payment_gateway(),
            )
        except (NotFoundError, ValidationError, PaymentProcessorError) as exc:
            return _error(str(exc))

        return Response({"clientSecret": intent.client_secret, "amount": intent.amount})


class BookingListCreateView(APIView):
    """List the caller's bookings or record a new one after payment."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        serializer = BookingSerializer(get_user_bookings(request.user), many=True)
        return Response(serializer.data)

    def post(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return _error(flatten_errors(serializer.errors))

        data = serializer.validated_data
        try:
            booking = record_booking(
                user=request.user,
                hotel_id=data["hotel_id"],
                check_in=data["check_in"],
                check_out=data["check_out"],
                total_price=data.get("total_price"),
                payment_intent_id=data.get("payment_intent_id", ""),
                gateway=get_payment_gateway(),
            )
        except (NotFoundError, ValidationError, PaymentProcessorError) as exc:
            return _error(str(exc))
        except PersistenceError as exc:
            return _error(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)
