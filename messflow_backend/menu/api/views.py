# PATH: menu/api/views.py

"""
MENU API

GET    /api/menu/            full rotation (optional ?week=1..4)
POST   /api/menu/            upsert one (week_number, day)
GET    /api/menu/today/      today's entry (or null)
DELETE /api/menu/{id}/
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import ServiceErrorMixin
from core.exceptions import ValidationFailure
from menu.api.serializers import MenuEntrySerializer
from menu.services.menu_service import (
    menu_store,
    todays_menu,
    upsert_menu_entry,
    weekly_menu,
)
from subscriptions.permissions import HasActiveSubscription


class MenuViewSet(
    ServiceErrorMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = MenuEntrySerializer
    permission_classes = [IsAuthenticated, HasActiveSubscription]

    def get_queryset(self):
        return menu_store(self.request.user).select()

    def perform_destroy(self, instance):
        menu_store(self.request.user).delete(instance.pk)

    @extend_schema(tags=["menu"], responses=MenuEntrySerializer(many=True))
    def list(self, request):
        week = request.query_params.get("week")
        try:
            week_number = int(week) if week else None
        except ValueError as exc:
            raise ValidationFailure("week must be 1..4") from exc
        rows = weekly_menu(request.user, week_number=week_number)
        return Response(MenuEntrySerializer(rows, many=True).data)

    @extend_schema(tags=["menu"], request=MenuEntrySerializer, responses=MenuEntrySerializer)
    def create(self, request):
        s = MenuEntrySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        entry = upsert_menu_entry(
            owner=request.user,
            week_number=data.pop("week_number", 1),
            day=data.pop("day"),
            **data,
        )
        return Response(MenuEntrySerializer(entry).data)

    @extend_schema(tags=["menu"], responses=MenuEntrySerializer)
    @action(detail=False, methods=["get"])
    def today(self, request):
        entry = todays_menu(request.user)
        return Response(MenuEntrySerializer(entry).data if entry else None)
