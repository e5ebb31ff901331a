# subscriptions/api/serializers.py

from rest_framework import serializers

from subscriptions.models import PromoCode
from users.models import Profile


class ApplyPromoCodeSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=40)


class PromoCodeSerializer(serializers.ModelSerializer):
    class Meta:
        model = PromoCode
        fields = ["id", "code", "days_to_add", "is_used", "used_by", "used_at", "created_at"]
        read_only_fields = ("id", "is_used", "used_by", "used_at", "created_at")


class PromoCodeCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=40)
    days_to_add = serializers.IntegerField(min_value=1)
    profile_ids = serializers.ListField(
        child=serializers.UUIDField(), required=False, allow_empty=True
    )


class SetPlanSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    plan_type = serializers.ChoiceField(choices=Profile.PLAN_CHOICES, required=False)
    subscription_status = serializers.ChoiceField(
        choices=Profile.STATUS_CHOICES, required=False
    )
    subscription_expiry = serializers.DateField(required=False)
