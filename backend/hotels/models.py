from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Hotel(models.Model):
    SUBSCRIPTION_TRIAL = "trial"
    SUBSCRIPTION_ACTIVE = "active"
    SUBSCRIPTION_EXPIRED = "expired"
    SUBSCRIPTION_CANCELLED = "cancelled"
    SUBSCRIPTION_STATUSES = [
        (SUBSCRIPTION_TRIAL, "Trial"),
        (SUBSCRIPTION_ACTIVE, "Active"),
        (SUBSCRIPTION_EXPIRED, "Expired"),
        (SUBSCRIPTION_CANCELLED, "Cancelled"),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField()
    location = models.CharField(max_length=200)
    image_url = models.URLField(max_length=500)
    price_per_night = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    rating = models.DecimalField(
        max_digits=3,
        decimal_places=1,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    amenities = models.JSONField(default=list)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="hotels",
    )
    virtual_tour_url = models.URLField(max_length=500, blank=True, null=True)
    additional_images = models.JSONField(default=list, blank=True)
    subscription_status = models.CharField(
        max_length=20,
        choices=SUBSCRIPTION_STATUSES,
        default=SUBSCRIPTION_TRIAL,
    )
    subscription_end_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} @ {self.location}"
