from rest_framework import serializers

from expenses.models import Expense, ExpenseCategory


class ExpenseSerializer(serializers.ModelSerializer):
    category = serializers.ChoiceField(
        choices=ExpenseCategory.choices, required=False, default=ExpenseCategory.OTHER
    )
    has_receipt = serializers.BooleanField(read_only=True)

    class Meta:
        model = Expense
        fields = [
            "id",
            "description",
            "amount",
            "category",
            "date",
            "receipt_url",
            "file_size_bytes",
            "has_receipt",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "has_receipt", "created_at", "updated_at")

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("amount must be > 0")
        return value


class ClearReceiptsSerializer(serializers.Serializer):
    before = serializers.DateField()
