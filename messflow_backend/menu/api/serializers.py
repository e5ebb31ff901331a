from rest_framework import serializers

from menu.models import MenuEntry


class MenuEntrySerializer(serializers.ModelSerializer):
    optional_dishes = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )

    class Meta:
        model = MenuEntry
        fields = [
            "id",
            "week_number",
            "day",
            "breakfast",
            "lunch",
            "dinner",
            "optional_dishes",
            "updated_at",
        ]
        read_only_fields = ("id", "updated_at")
