from __future__ import annotations

from django.db.models import QuerySet

from .models import Hotel


def get_hotels() -> QuerySet[Hotel]:
    return Hotel.objects.select_related("owner").order_by("id")


def get_hotel(hotel_id) -> Hotel | None:
    """Return the hotel for ``hotel_id`` or None when the id is unknown or malformed."""
    try:
        pk = int(hotel_id)
    except (TypeError, ValueError):
        return None
    return Hotel.objects.filter(pk=pk).first()
