# members/api/views.py

"""
MEMBERS API

/api/members/members/                 CRUD (create gated by free-tier member limit)
/api/members/members/summary/         active count + outstanding balance
/api/members/members/{id}/renew/      renew plan + record payment (+ invoice)
/api/members/members/{id}/transactions/  member payment history
/api/members/transactions/            CRUD
/api/members/transactions/stats/      today's collections + weekly series

Writes are refused once the tenant's subscription has expired.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import OwnedRecordViewSet
from core.events import Entity
from members.api.serializers import MemberSerializer, RenewalSerializer, TransactionSerializer
from members.models import Member, Transaction
from members.services.member_service import create_member, member_summary
from members.services.renewal_service import renew_member
from members.services.transaction_service import (
    member_history,
    record_transaction,
    today_collections,
    weekly_collections,
)
from subscriptions.permissions import CanAddMember, HasActiveSubscription


class MemberViewSet(OwnedRecordViewSet):
    model = Member
    entity = Entity.MEMBER
    ordering = ("-created_at",)
    serializer_class = MemberSerializer
    permission_classes = [IsAuthenticated, HasActiveSubscription, CanAddMember]
    filterset_fields = ["status", "meal_plan"]

    def perform_create(self, serializer):
        serializer.instance = create_member(owner=self.request.user, **serializer.validated_data)

    @extend_schema(tags=["members"], responses={200: dict})
    @action(detail=False, methods=["get"])
    def summary(self, request):
        return Response(member_summary(request.user))

    @extend_schema(
        tags=["members"],
        request=RenewalSerializer,
        responses={200: dict, 400: dict, 403: dict},
    )
    @action(detail=True, methods=["post"])
    def renew(self, request, pk=None):
        s = RenewalSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        result = renew_member(
            owner=request.user,
            member_id=pk,
            start_date=s.validated_data.get("start_date"),
            end_date=s.validated_data.get("end_date"),
            amount=s.validated_data.get("amount"),
            generate_invoice=s.validated_data.get("generate_invoice", False),
        )
        return Response(
            {
                "member": MemberSerializer(result["member"]).data,
                "transaction": TransactionSerializer(result["transaction"]).data,
                "invoice": result["invoice"],
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(tags=["members"], responses=TransactionSerializer(many=True))
    @action(detail=True, methods=["get"])
    def transactions(self, request, pk=None):
        member = self.get_store().get(pk)
        qs = member_history(owner=request.user, member_id=member.pk)
        return Response(TransactionSerializer(qs, many=True).data)


class TransactionViewSet(OwnedRecordViewSet):
    model = Transaction
    entity = Entity.TRANSACTION
    ordering = ("-date", "-created_at")
    serializer_class = TransactionSerializer
    permission_classes = [IsAuthenticated, HasActiveSubscription]
    filterset_fields = ["type", "member"]

    def get_queryset(self):
        return super().get_queryset().select_related("member")

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = record_transaction(
            owner=self.request.user,
            member=data.get("member"),
            txn_type=data.get("type", Transaction.TYPE_PAYMENT),
            amount=data["amount"],
            when=data.get("date"),
            notes=data.get("notes", ""),
        )

    @extend_schema(tags=["members"], responses={200: dict})
    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(
            {
                "today_collections": today_collections(request.user),
                "weekly": weekly_collections(request.user),
            }
        )
