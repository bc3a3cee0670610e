from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class StayfinderUserAdmin(UserAdmin):
    list_display = ("username", "email", "is_hotel_owner", "is_staff", "date_joined")
    list_filter = ("is_hotel_owner", "is_staff", "is_active")
    fieldsets = UserAdmin.fieldsets + (("Marketplace", {"fields": ("is_hotel_owner",)}),)
