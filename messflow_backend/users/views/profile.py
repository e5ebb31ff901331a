# users/views/profile.py

"""
TENANT PROFILE API

GET   /api/auth/profile/  -> business settings + counters + tenant config version
PATCH /api/auth/profile/  -> update business settings (name, address, currency, tax)

Plan, subscription and counters are read-only here; they change through
the subscriptions app.
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import ServiceErrorMixin
from users.serializers import ProfileSerializer, ProfileUpdateSerializer
from users.services.profile_service import ensure_profile, update_business_settings


class ProfileView(ServiceErrorMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProfileUpdateSerializer

    @extend_schema(tags=["auth"], responses={200: ProfileSerializer})
    def get(self, request):
        profile = ensure_profile(request.user)
        return Response(ProfileSerializer(profile).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["auth"],
        request=ProfileUpdateSerializer,
        responses={200: ProfileSerializer, 400: dict},
    )
    def patch(self, request):
        s = self.get_serializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        profile = update_business_settings(owner=request.user, **s.validated_data)
        return Response(ProfileSerializer(profile).data, status=status.HTTP_200_OK)
