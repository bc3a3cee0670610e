from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from accounts.api import CurrentUserView, LoginView, RegisterView
from bookings.api import BookingListCreateView, PaymentIntentView
from hotels.api import HotelViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r"hotels", HotelViewSet, basename="hotel")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/register", RegisterView.as_view(), name="auth-register"),
    path("api/login", LoginView.as_view(), name="auth-login"),
    path("api/token/refresh", TokenRefreshView.as_view(), name="auth-refresh"),
    path("api/user", CurrentUserView.as_view(), name="auth-user"),
    path("api/bookings", BookingListCreateView.as_view(), name="bookings"),
    path(
        "api/create-payment-intent",
        PaymentIntentView.as_view(),
        name="create-payment-intent",
    ),
    path("api/", include(router.urls)),
]
