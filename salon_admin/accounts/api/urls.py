from django.urls import path

from .views import LoginView
from .views import LogoutView
from .views import MeView

app_name = "auth"
urlpatterns = [
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),
]
