from django.conf import settings
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from .views import AnalyticsView
from .views import BookingViewSet
from .views import DashboardOverviewView
from .views import OfferViewSet
from .views import SalonViewSet
from .views import ServiceViewSet
from .views import StaffViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("salons", SalonViewSet, basename="salons")
router.register("services", ServiceViewSet, basename="services")
router.register("staff", StaffViewSet, basename="staff")
router.register("bookings", BookingViewSet, basename="bookings")
router.register("offers", OfferViewSet, basename="offers")

app_name = "dashboard"
urlpatterns = [
    path("overview/", DashboardOverviewView.as_view(), name="overview"),
    path("analytics/<str:section>/", AnalyticsView.as_view(), name="analytics"),
    *router.urls,
]
