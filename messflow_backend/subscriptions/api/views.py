# subscriptions/api/views.py

"""
SUBSCRIPTION API

GET  /api/subscription/status/         -> status, expiry, warnings, payment link
GET  /api/subscription/limits/         -> free-tier gate snapshot
POST /api/subscription/promo/apply/    -> redeem a promo code
POST /api/subscription/invoice-number/ -> reserve the next invoice number (gated)

Super admin only:
GET/POST /api/subscription/promo-codes/
POST     /api/subscription/plan/
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api import ServiceErrorMixin
from subscriptions.api.serializers import (
    ApplyPromoCodeSerializer,
    PromoCodeCreateSerializer,
    PromoCodeSerializer,
    SetPlanSerializer,
)
from subscriptions.models import PromoCode
from subscriptions.permissions import CanGenerateInvoice, HasActiveSubscription
from subscriptions.services.limits import get_limits
from subscriptions.services.subscription import (
    apply_promo_code,
    create_promo_code,
    get_subscription_state,
    issue_invoice_number,
    set_plan,
)
from users.models import Profile
from users.permissions import IsSuperAdmin
from users.serializers import ProfileSerializer

User = get_user_model()


class SubscriptionStatusView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["subscription"], responses={200: dict})
    def get(self, request):
        return Response(get_subscription_state(request.user).as_dict())


class PlanLimitsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["subscription"], responses={200: dict})
    def get(self, request):
        return Response(get_limits(request.user).as_dict())


class ApplyPromoCodeView(ServiceErrorMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ApplyPromoCodeSerializer

    @extend_schema(
        tags=["subscription"],
        request=ApplyPromoCodeSerializer,
        responses={200: dict, 400: dict},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        result = apply_promo_code(owner=request.user, code=s.validated_data["code"])
        return Response(
            {
                "message": f"Subscription extended by {result['days_added']} days",
                **result,
            },
            status=status.HTTP_200_OK,
        )


class InvoiceNumberView(ServiceErrorMixin, APIView):
    permission_classes = [IsAuthenticated, HasActiveSubscription, CanGenerateInvoice]

    @extend_schema(tags=["subscription"], request=None, responses={201: dict, 403: dict})
    def post(self, request):
        number = issue_invoice_number(owner=request.user)
        return Response({"invoice_number": number}, status=status.HTTP_201_CREATED)


class PromoCodeAdminView(ServiceErrorMixin, GenericAPIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin]
    serializer_class = PromoCodeCreateSerializer

    @extend_schema(tags=["subscription-admin"], responses=PromoCodeSerializer(many=True))
    def get(self, request):
        qs = PromoCode.objects.all().order_by("-created_at")
        return Response(PromoCodeSerializer(qs, many=True).data)

    @extend_schema(
        tags=["subscription-admin"],
        request=PromoCodeCreateSerializer,
        responses={201: PromoCodeSerializer, 400: dict},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        profiles = list(Profile.objects.filter(id__in=data.get("profile_ids") or []))
        promo = create_promo_code(
            code=data["code"],
            days_to_add=data["days_to_add"],
            profiles=profiles,
        )
        return Response(PromoCodeSerializer(promo).data, status=status.HTTP_201_CREATED)


class SetPlanView(ServiceErrorMixin, GenericAPIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin]
    serializer_class = SetPlanSerializer

    @extend_schema(
        tags=["subscription-admin"],
        request=SetPlanSerializer,
        responses={200: ProfileSerializer, 404: dict},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        owner = User.objects.filter(id=data["user_id"]).first()
        if owner is None:
            return Response({"detail": "User not found"}, status=status.HTTP_404_NOT_FOUND)

        profile = set_plan(
            owner=owner,
            plan_type=data.get("plan_type"),
            subscription_status=data.get("subscription_status"),
            subscription_expiry=data.get("subscription_expiry"),
        )
        return Response(ProfileSerializer(profile).data)
