# core/api.py

"""
SHARED API PLUMBING

- error_response(): domain error -> {"detail": ...} with the right status
- ServiceErrorMixin: lets views raise domain errors from services directly
- OwnedRecordViewSet: ModelViewSet whose reads and writes all go through
  the tenant-scoped RecordStore (so change events are always published)
- OwnedPrimaryKeyRelatedField: FK input limited to the caller's own rows
"""

from __future__ import annotations

from rest_framework import serializers, status, viewsets
from rest_framework.response import Response

from core.exceptions import (
    LimitReached,
    MessFlowError,
    RecordNotFound,
    SubscriptionExpired,
    ValidationFailure,
)
from core.record_store import RecordStore

_STATUS_BY_ERROR = (
    (RecordNotFound, status.HTTP_404_NOT_FOUND),
    (LimitReached, status.HTTP_403_FORBIDDEN),
    (SubscriptionExpired, status.HTTP_403_FORBIDDEN),
    (ValidationFailure, status.HTTP_400_BAD_REQUEST),
)


def error_response(exc: MessFlowError) -> Response:
    for error_cls, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return Response({"detail": str(exc)}, status=code)
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class ServiceErrorMixin:
    def handle_exception(self, exc):
        if isinstance(exc, MessFlowError):
            return error_response(exc)
        return super().handle_exception(exc)


class OwnedPrimaryKeyRelatedField(serializers.PrimaryKeyRelatedField):
    def get_queryset(self):
        qs = super().get_queryset()
        request = self.context.get("request")
        if request is None or not request.user.is_authenticated:
            return qs.none()
        return qs.filter(owner=request.user)


class OwnedRecordViewSet(ServiceErrorMixin, viewsets.ModelViewSet):
    """
    Subclasses set:
        model      - Django model with an `owner` FK
        entity     - core.events.Entity member
        ordering   - default ordering tuple
    """

    model = None
    entity = None
    ordering: tuple = ()

    def get_store(self) -> RecordStore:
        return RecordStore(self.model, entity=self.entity, owner=self.request.user)

    def get_queryset(self):
        return self.get_store().select(order_by=self.ordering)

    def perform_create(self, serializer):
        serializer.instance = self.get_store().insert(**serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = self.get_store().update(
            serializer.instance.pk, **serializer.validated_data
        )

    def perform_destroy(self, instance):
        self.get_store().delete(instance.pk)
