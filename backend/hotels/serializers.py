from rest_framework import serializers

from .models import Hotel


class HotelSerializer(serializers.ModelSerializer):
    imageUrl = serializers.URLField(source="image_url", read_only=True)
    pricePerNight = serializers.DecimalField(source="price_per_night", max_digits=10, decimal_places=2, read_only=True)
    ownerId = serializers.IntegerField(source="owner_id", read_only=True, allow_null=True)
    virtualTourUrl = serializers.URLField(source="virtual_tour_url", read_only=True, allow_null=True)
    additionalImages = serializers.ListField(
        source="additional_images",
        child=serializers.URLField(),
        read_only=True,
    )
    subscriptionStatus = serializers.CharField(source="subscription_status", read_only=True)
    subscriptionEndDate = serializers.DateTimeField(source="subscription_end_date", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Hotel
        fields = [
            "id",
            "name",
            "description",
            "location",
            "imageUrl",
            "pricePerNight",
            "rating",
            "amenities",
            "ownerId",
            "virtualTourUrl",
            "additionalImages",
            "subscriptionStatus",
            "subscriptionEndDate",
            "createdAt",
        ]
        read_only_fields = fields
