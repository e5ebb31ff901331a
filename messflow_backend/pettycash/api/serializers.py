from rest_framework import serializers

from pettycash.models import PettyCashTransaction


class PettyCashTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = PettyCashTransaction
        fields = [
            "id",
            "type",
            "amount",
            "description",
            "balance_after",
            "date",
            "linked_expense",
            "created_at",
        ]
        read_only_fields = fields


class RefillSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    withdraw_from_ledger = serializers.BooleanField(required=False, default=False)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("amount must be > 0")
        return value


class SmallExpenseSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = serializers.CharField()

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("amount must be > 0")
        return value
