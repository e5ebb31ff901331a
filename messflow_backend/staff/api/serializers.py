from rest_framework import serializers

from staff.models import SalaryAdvance, SalaryPayment, Staff, StaffAttendance


class StaffSerializer(serializers.ModelSerializer):
    class Meta:
        model = Staff
        fields = [
            "id",
            "name",
            "role",
            "phone",
            "base_salary",
            "is_active",
            "joining_date",
            "bank_name",
            "account_number",
            "iban",
            "swift_code",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "is_active", "created_at", "updated_at")


class AttendanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = StaffAttendance
        fields = ["id", "staff", "date", "status", "updated_at"]
        read_only_fields = fields


class SetAttendanceSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=StaffAttendance.STATUS_CHOICES)
    date = serializers.DateField(required=False)


class AdvanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalaryAdvance
        fields = ["id", "staff", "amount", "date", "notes", "created_at"]
        read_only_fields = ("id", "staff", "created_at")

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("amount must be > 0")
        return value


class SalaryPaymentSerializer(serializers.ModelSerializer):
    staff_name = serializers.CharField(source="staff.name", read_only=True, default=None)

    class Meta:
        model = SalaryPayment
        fields = ["id", "staff", "staff_name", "amount", "month_year", "paid_at", "expense"]
        read_only_fields = fields


class PaySalarySerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    month = serializers.CharField(required=False, help_text="YYYY-MM, defaults to the current month")

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("amount must be > 0")
        return value
