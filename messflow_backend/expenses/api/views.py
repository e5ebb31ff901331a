# PATH: expenses/api/views.py

"""
EXPENSES API

/api/expenses/                        CRUD (receipt attach gated by plan)
/api/expenses/stats/                  today / month / weekly / by-category
/api/expenses/{id}/clear-receipt/     drop one receipt reference
/api/expenses/clear-receipts/         drop receipts dated before a day
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import OwnedRecordViewSet
from core.events import Entity
from expenses.api.serializers import ClearReceiptsSerializer, ExpenseSerializer
from expenses.models import Expense
from expenses.services.expense_service import (
    clear_receipt,
    clear_receipts_before,
    create_expense,
    delete_expense,
    update_expense,
)
from expenses.services.expense_stats import expense_stats
from subscriptions.permissions import CanUploadReceipt, HasActiveSubscription


class ExpenseViewSet(OwnedRecordViewSet):
    model = Expense
    entity = Entity.EXPENSE
    ordering = ("-date", "-created_at")
    serializer_class = ExpenseSerializer
    permission_classes = [IsAuthenticated, HasActiveSubscription, CanUploadReceipt]
    filterset_fields = ["category", "date"]

    def perform_create(self, serializer):
        serializer.instance = create_expense(
            owner=self.request.user, **serializer.validated_data
        )

    def perform_update(self, serializer):
        serializer.instance = update_expense(
            owner=self.request.user,
            expense_id=serializer.instance.pk,
            **serializer.validated_data,
        )

    def perform_destroy(self, instance):
        delete_expense(owner=self.request.user, expense_id=instance.pk)

    @extend_schema(tags=["expenses"], responses={200: dict})
    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(expense_stats(request.user))

    @extend_schema(tags=["expenses"], request=None, responses=ExpenseSerializer)
    @action(detail=True, methods=["post"], url_path="clear-receipt")
    def clear_receipt(self, request, pk=None):
        expense = clear_receipt(owner=request.user, expense_id=pk)
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(tags=["expenses"], request=ClearReceiptsSerializer, responses={200: dict})
    @action(detail=False, methods=["post"], url_path="clear-receipts")
    def clear_receipts(self, request):
        s = ClearReceiptsSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response(
            clear_receipts_before(owner=request.user, before=s.validated_data["before"])
        )
