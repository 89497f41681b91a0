from django.urls import include
from django.urls import path

app_name = "api"
urlpatterns = [
    path("auth/", include("salon_admin.accounts.api.urls")),
    path("dashboard/", include("salon_admin.dashboard.api.urls")),
]
