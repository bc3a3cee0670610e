from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("hotel", "user", "check_in", "check_out", "total_price", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("hotel__name", "user__username", "payment_intent_id")
    readonly_fields = ("payment_intent_id", "created_at")
