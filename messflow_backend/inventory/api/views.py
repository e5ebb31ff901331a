# PATH: inventory/api/views.py

"""
INVENTORY API

/api/inventory/                       CRUD, ordered by item name
/api/inventory/{id}/quantity/         POST stock correction
/api/inventory/{id}/consume/          POST usage (decrements stock)
/api/inventory/{id}/consumption/      GET usage log
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import OwnedRecordViewSet
from core.events import Entity
from inventory.api.serializers import (
    ConsumptionSerializer,
    InventoryItemSerializer,
    QuantitySerializer,
)
from inventory.models import InventoryItem
from inventory.services.inventory_service import (
    consumption_history,
    record_consumption,
    set_quantity,
)
from subscriptions.permissions import HasActiveSubscription


class InventoryItemViewSet(OwnedRecordViewSet):
    model = InventoryItem
    entity = Entity.INVENTORY
    ordering = ("item_name",)
    serializer_class = InventoryItemSerializer
    permission_classes = [IsAuthenticated, HasActiveSubscription]
    filterset_fields = ["unit"]

    @extend_schema(tags=["inventory"], request=QuantitySerializer, responses=InventoryItemSerializer)
    @action(detail=True, methods=["post"])
    def quantity(self, request, pk=None):
        s = QuantitySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        item = set_quantity(owner=request.user, item_id=pk, quantity=s.validated_data["quantity"])
        return Response(InventoryItemSerializer(item).data)

    @extend_schema(tags=["inventory"], request=ConsumptionSerializer, responses=ConsumptionSerializer)
    @action(detail=True, methods=["post"])
    def consume(self, request, pk=None):
        s = ConsumptionSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        entry = record_consumption(
            owner=request.user,
            item_id=pk,
            quantity_used=s.validated_data["quantity_used"],
            notes=s.validated_data.get("notes", ""),
            day=s.validated_data.get("date"),
        )
        return Response(ConsumptionSerializer(entry).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["inventory"], responses=ConsumptionSerializer(many=True))
    @action(detail=True, methods=["get"])
    def consumption(self, request, pk=None):
        rows = consumption_history(owner=request.user, item_id=pk)
        return Response(ConsumptionSerializer(rows, many=True).data)
