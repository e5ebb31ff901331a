# users/views/auth.py
"""
AUTH VIEWS

- Register creates the user AND the tenant profile in one transaction.
- Login returns a SimpleJWT access/refresh pair.
- Targeted throttling on the anonymous endpoints.
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework_simplejwt.tokens import RefreshToken

from users.serializers import LoginSerializer, RegisterSerializer, UserSerializer
from users.services.profile_service import ensure_profile

logger = logging.getLogger(__name__)

User = get_user_model()


class AuthAnonThrottle(AnonRateThrottle):
    """
    Anonymous register/login throttling.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['anon'].
    """
    scope = "anon"


def _tokens_for(user) -> dict:
    refresh = RefreshToken.for_user(user)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}


# ---------------- REGISTER ----------------
class RegisterView(generics.GenericAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthAnonThrottle]

    @extend_schema(
        tags=["auth"],
        request=RegisterSerializer,
        responses={201: dict},
        description="Register a new mess owner and create the tenant profile",
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        with transaction.atomic():
            user = User.objects.create_user(
                email=data["email"],
                password=data["password"],
                full_name=data.get("full_name", ""),
            )
            profile = ensure_profile(user)

            business_name = (data.get("business_name") or "").strip()
            if business_name:
                profile.business_name = business_name
            if data.get("currency"):
                profile.currency = data["currency"]
            profile.save()

        logger.info("User registered", extra={"user_id": str(user.id)})

        return Response(
            {
                "message": "User registered successfully",
                "user": UserSerializer(user).data,
                **_tokens_for(user),
            },
            status=status.HTTP_201_CREATED,
        )


# ---------------- LOGIN (JWT + EMAIL) ----------------
class LoginView(generics.GenericAPIView):
    serializer_class = LoginSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthAnonThrottle]

    @extend_schema(
        tags=["auth"],
        request=LoginSerializer,
        responses={200: dict, 400: dict, 403: dict},
        description="Authenticate with email and password",
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data["email"]
        password = serializer.validated_data["password"]

        user = User.objects.filter(email__iexact=email).first()
        if user is None or not user.check_password(password):
            return Response(
                {"detail": "Invalid email or password"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        if not user.is_active:
            return Response(
                {"detail": "User account is disabled"},
                status=status.HTTP_403_FORBIDDEN,
            )

        return Response(
            {
                **_tokens_for(user),
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )
