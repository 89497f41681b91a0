from __future__ import annotations

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import AdminUserSerializer
from .serializers import LoginSerializer


class LoginView(APIView):
    """Exchange credentials for a token pair kept in cookies and the session.

    The tokens never appear in the response body.
    """

    authentication_classes: list = []
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        admin_session = request._request.admin_session  # noqa: SLF001
        user, _ = async_to_sync(admin_session.login)(
            serializer.validated_data["email"],
            serializer.validated_data["password"],
        )
        # New session key once tokens are stored in it.
        request.session.cycle_key()
        return Response({"user": AdminUserSerializer(user).data}, status=status.HTTP_200_OK)


class LogoutView(APIView):
    """End the admin session; CSRF-checked when the caller is signed in."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        admin_session = request._request.admin_session  # noqa: SLF001
        async_to_sync(admin_session.logout)()
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return Response(AdminUserSerializer(request.user).data)
