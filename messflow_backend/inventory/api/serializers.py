from rest_framework import serializers

from inventory.models import InventoryConsumption, InventoryItem


class InventoryItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryItem
        fields = ["id", "item_name", "quantity", "unit", "description", "created_at", "updated_at"]
        read_only_fields = ("id", "created_at", "updated_at")


class QuantitySerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0)


class ConsumptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryConsumption
        fields = ["id", "item", "quantity_used", "date", "notes", "created_at"]
        read_only_fields = ("id", "item", "created_at")
