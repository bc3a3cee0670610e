from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import User
from hotels.models import Hotel


SEED_PASSWORD = "Stayfinder123!"
SUPERUSER_USERNAME = "admin"
SUPERUSER_PASSWORD = "AdminStayfinder123!"

SAMPLE_HOTELS = [
    {
        "name": "Harbour Lights Inn",
        "location": "Lisbon, Portugal",
        "description": "Boutique rooms a short walk from the river front.",
        "image_url": "https://images.stayfinder.test/harbour-lights.jpg",
        "price_per_night": Decimal("120.00"),
        "rating": Decimal("4.6"),
        "amenities": ["wifi", "breakfast", "air conditioning"],
        "virtual_tour_url": "https://tours.stayfinder.test/harbour-lights",
        "additional_images": [
            "https://images.stayfinder.test/harbour-lights-lobby.jpg",
            "https://images.stayfinder.test/harbour-lights-suite.jpg",
        ],
    },
    {
        "name": "Alpine Meadow Lodge",
        "location": "Zermatt, Switzerland",
        "description": "Timber chalet with mountain views and a spa.",
        "image_url": "https://images.stayfinder.test/alpine-meadow.jpg",
        "price_per_night": Decimal("289.50"),
        "rating": Decimal("4.8"),
        "amenities": ["spa", "ski storage", "restaurant"],
        "virtual_tour_url": None,
        "additional_images": [],
    },
    {
        "name": "Desert Bloom Motel",
        "location": "Tucson, USA",
        "description": "Retro motel with a pool and late check-in.",
        "image_url": "https://images.stayfinder.test/desert-bloom.jpg",
        "price_per_night": Decimal("79.99"),
        "rating": Decimal("3.9"),
        "amenities": ["pool", "parking"],
        "virtual_tour_url": None,
        "additional_images": [],
    },
]


class Command(BaseCommand):
    help = "Populate the local development database with sample hotels and users."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            self.stdout.write(self.style.MIGRATE_HEADING("Creating users"))
            owner = self._ensure_user("owner", "owner@stayfinder.test", is_hotel_owner=True)
            self._ensure_user("traveller", "traveller@stayfinder.test", is_hotel_owner=False)

            self.stdout.write(self.style.MIGRATE_HEADING("Ensuring admin superuser"))
            self._ensure_superuser()

            self.stdout.write(self.style.MIGRATE_HEADING("Creating hotels"))
            for data in SAMPLE_HOTELS:
                self._ensure_hotel(owner=owner, **data)

        self.stdout.write(self.style.SUCCESS("Development seed data created."))
        self.stdout.write(self.style.NOTICE(f"Sample login accounts use password: {SEED_PASSWORD}"))
        self.stdout.write(self.style.NOTICE(f"Admin superuser {SUPERUSER_USERNAME} password: {SUPERUSER_PASSWORD}"))

    def _ensure_user(self, username: str, email: str, *, is_hotel_owner: bool) -> User:
        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": email, "is_hotel_owner": is_hotel_owner},
        )
        if created or not user.has_usable_password():
            user.set_password(SEED_PASSWORD)
            user.save(update_fields=["password"])
        if user.is_hotel_owner != is_hotel_owner:
            user.is_hotel_owner = is_hotel_owner
            user.save(update_fields=["is_hotel_owner"])
        return user

    def _ensure_hotel(self, *, owner: User, name: str, **fields) -> Hotel:
        hotel, created = Hotel.objects.update_or_create(
            name=name,
            defaults={"owner": owner, **fields},
        )
        if created:
            self.stdout.write(self.style.NOTICE(f"Added {hotel.name} ({hotel.location})"))
        return hotel

    def _ensure_superuser(self) -> User:
        user, created = User.objects.get_or_create(
            username=SUPERUSER_USERNAME,
            defaults={
                "email": "admin@stayfinder.test",
                "is_staff": True,
                "is_superuser": True,
            },
        )
        flag_updates = {}
        if not user.is_staff:
            flag_updates["is_staff"] = True
        if not user.is_superuser:
            flag_updates["is_superuser"] = True
        if flag_updates:
            for attr, value in flag_updates.items():
                setattr(user, attr, value)
            user.save(update_fields=list(flag_updates.keys()))
        if created or not user.has_usable_password():
            user.set_password(SUPERUSER_PASSWORD)
            user.save(update_fields=["password"])
        return user
