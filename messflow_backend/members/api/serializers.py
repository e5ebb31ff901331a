# members/api/serializers.py

from rest_framework import serializers

from core.api import OwnedPrimaryKeyRelatedField
from members.models import Member, Transaction


class MemberSerializer(serializers.ModelSerializer):
    class Meta:
        model = Member
        fields = [
            "id",
            "name",
            "phone",
            "monthly_fee",
            "balance",
            "status",
            "meal_plan",
            "selected_menu_week",
            "joining_date",
            "plan_expiry_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "created_at", "updated_at")


class TransactionSerializer(serializers.ModelSerializer):
    member = OwnedPrimaryKeyRelatedField(
        queryset=Member.objects.all(), required=False, allow_null=True
    )
    member_name = serializers.CharField(source="member.name", read_only=True, default=None)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "member",
            "member_name",
            "type",
            "amount",
            "date",
            "notes",
            "created_at",
        ]
        read_only_fields = ("id", "member_name", "created_at")

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("amount must be > 0")
        return value


class RenewalSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    generate_invoice = serializers.BooleanField(required=False, default=False)
