# users/serializers.py

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from core.currency import GCC_CURRENCIES
from users.models import Profile

User = get_user_model()


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={"input_type": "password"},
    )
    business_name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    currency = serializers.ChoiceField(choices=list(GCC_CURRENCIES), required=False)

    class Meta:
        model = User
        fields = [
            "email",
            "password",
            "full_name",
            "business_name",
            "currency",
        ]


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    """
    Input validation only.
    Authentication is handled in the view.
    """
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "full_name",
            "role",
        ]


# ---------------- PROFILE ----------------
class ProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profile
        fields = [
            "id",
            "business_name",
            "company_address",
            "company_logo_url",
            "currency",
            "tax_name",
            "tax_rate",
            "tax_trn",
            "payment_link",
            "plan_type",
            "subscription_status",
            "subscription_expiry",
            "invoice_count",
            "next_invoice_number",
            "storage_used",
            "storage_limit",
            "settings_version",
        ]
        read_only_fields = (
            "id",
            "plan_type",
            "subscription_status",
            "subscription_expiry",
            "invoice_count",
            "next_invoice_number",
            "storage_used",
            "storage_limit",
            "settings_version",
        )


class ProfileUpdateSerializer(serializers.Serializer):
    business_name = serializers.CharField(required=False, max_length=200)
    company_address = serializers.CharField(required=False, allow_blank=True)
    company_logo_url = serializers.URLField(required=False, allow_blank=True, max_length=500)
    currency = serializers.ChoiceField(choices=list(GCC_CURRENCIES), required=False)
    tax_name = serializers.CharField(required=False, allow_blank=True, max_length=50)
    tax_rate = serializers.DecimalField(
        required=False, max_digits=5, decimal_places=2, min_value=0
    )
    tax_trn = serializers.CharField(required=False, allow_blank=True, max_length=50)
    payment_link = serializers.URLField(required=False, allow_blank=True, max_length=500)
