# PATH: pettycash/api/views.py

"""
PETTY CASH API

GET    /api/petty-cash/                 entries, newest first
GET    /api/petty-cash/balance/         current balance
GET    /api/petty-cash/summary/         refills / spent / closing (optional ?month=YYYY-MM)
POST   /api/petty-cash/refill/          add cash (optionally withdrawn from the main ledger)
POST   /api/petty-cash/expense/         spend cash
DELETE /api/petty-cash/{id}/            remove an entry (later balances recomputed)
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import ServiceErrorMixin
from core.dates import month_bounds, parse_month
from core.exceptions import ValidationFailure
from pettycash.api.serializers import (
    PettyCashTransactionSerializer,
    RefillSerializer,
    SmallExpenseSerializer,
)
from pettycash.services.ledger_service import (
    add_refill,
    add_small_expense,
    current_balance,
    delete_entry,
    list_entries,
    summary,
)
from subscriptions.permissions import HasActiveSubscription


class PettyCashViewSet(
    ServiceErrorMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = PettyCashTransactionSerializer
    permission_classes = [IsAuthenticated, HasActiveSubscription]
    filterset_fields = ["type"]

    def get_queryset(self):
        return list_entries(self.request.user)

    def perform_destroy(self, instance):
        delete_entry(owner=self.request.user, entry_id=instance.pk)

    @extend_schema(tags=["petty-cash"], responses={200: dict})
    @action(detail=False, methods=["get"])
    def balance(self, request):
        return Response({"balance": current_balance(request.user)})

    @extend_schema(tags=["petty-cash"], responses={200: dict})
    @action(detail=False, methods=["get"], url_path="summary")
    def window_summary(self, request):
        month = request.query_params.get("month")
        if not month:
            return Response(summary(request.user))
        try:
            first = parse_month(month)
        except ValueError as exc:
            raise ValidationFailure(str(exc)) from exc
        start, end = month_bounds(first)
        return Response(summary(request.user, start=start, end=end))

    @extend_schema(
        tags=["petty-cash"],
        request=RefillSerializer,
        responses={201: PettyCashTransactionSerializer},
    )
    @action(detail=False, methods=["post"])
    def refill(self, request):
        s = RefillSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        entry = add_refill(owner=request.user, **s.validated_data)
        return Response(
            PettyCashTransactionSerializer(entry).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        tags=["petty-cash"],
        request=SmallExpenseSerializer,
        responses={201: PettyCashTransactionSerializer, 400: dict},
    )
    @action(detail=False, methods=["post"])
    def expense(self, request):
        s = SmallExpenseSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        entry = add_small_expense(owner=request.user, **s.validated_data)
        return Response(
            PettyCashTransactionSerializer(entry).data, status=status.HTTP_201_CREATED
        )
