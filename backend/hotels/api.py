from django.http import HttpResponse
from rest_framework import permissions, viewsets
from rest_framework.response import Response

from .serializers import HotelSerializer
from .services import get_hotel, get_hotels


class HotelViewSet(viewsets.ReadOnlyModelViewSet):
    """Public, read-only hotel catalogue."""

    serializer_class = HotelSerializer
    permission_classes = [permissions.AllowAny]
    filterset_fields = {
        "location": ["exact", "icontains"],
        "price_per_night": ["gte", "lte"],
    }
    search_fields = ["name", "location", "description"]
    ordering_fields = ["price_per_night", "rating", "name"]

    def get_queryset(self):
        return get_hotels()

    def retrieve(self, request, *args, **kwargs):
        hotel = get_hotel(kwargs.get("pk"))
        if hotel is None:
            return HttpResponse("Hotel not found", status=404, content_type="text/plain")
        return Response(self.get_serializer(hotel).data)
