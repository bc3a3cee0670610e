from django.contrib import admin

from .models import Hotel


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ("name", "location", "price_per_night", "rating", "owner", "subscription_status")
    list_filter = ("subscription_status",)
    search_fields = ("name", "location", "owner__username")
    ordering = ("name",)
