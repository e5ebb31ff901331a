# core/record_store.py

"""
RECORD STORE ACCESS

Thin, tenant-scoped CRUD over a Django model.

Guarantees:
- Every query is filtered by owner; another tenant's rows look missing.
- insert/update run model validation (full_clean) before saving.
- Every successful write publishes a change event for its entity.

Multi-step operations that must be all-or-nothing call the store from
inside a service-level transaction.atomic block.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import models

from core.events import (
    ACTION_DELETE,
    ACTION_INSERT,
    ACTION_UPDATE,
    Entity,
    publish_change,
)
from core.exceptions import RecordNotFound, ValidationFailure

logger = logging.getLogger(__name__)


def _validation_message(exc: ValidationError) -> str:
    if hasattr(exc, "message_dict"):
        return "; ".join(
            f"{field}: {' '.join(msgs)}" if field != "__all__" else " ".join(msgs)
            for field, msgs in exc.message_dict.items()
        )
    return " ".join(exc.messages)


class RecordStore:
    def __init__(self, model: type[models.Model], *, entity, owner):
        self.model = model
        self.entity = Entity(entity)
        self.owner = owner

    @property
    def owner_id(self):
        return getattr(self.owner, "pk", self.owner)

    def _scoped(self) -> models.QuerySet:
        return self.model.objects.filter(owner_id=self.owner_id)

    def _publish(self, action: str, record_id) -> None:
        publish_change(
            entity=self.entity,
            owner_id=self.owner_id,
            action=action,
            record_id=record_id,
        )

    def _validate(self, obj: models.Model) -> None:
        try:
            obj.full_clean()
        except ValidationError as exc:
            raise ValidationFailure(_validation_message(exc)) from exc

    # ---------------- READ ----------------
    def select(self, *, order_by=None, **filters) -> models.QuerySet:
        qs = self._scoped().filter(**filters)
        if order_by:
            qs = qs.order_by(*order_by)
        return qs

    def get(self, record_id, *, for_update: bool = False) -> models.Model:
        qs = self._scoped()
        if for_update:
            qs = qs.select_for_update()
        try:
            return qs.get(pk=record_id)
        except (self.model.DoesNotExist, ValueError, ValidationError) as exc:
            raise RecordNotFound(
                f"{self.entity.label} {record_id} not found"
            ) from exc

    def count(self, **filters) -> int:
        return self._scoped().filter(**filters).count()

    # ---------------- WRITE ----------------
    def insert(self, **values) -> models.Model:
        obj = self.model(owner_id=self.owner_id, **values)
        self._validate(obj)
        obj.save()
        self._publish(ACTION_INSERT, obj.pk)
        logger.info(
            "Record inserted",
            extra={"entity": self.entity.value, "record_id": str(obj.pk)},
        )
        return obj

    def update(self, record_id, **patch) -> models.Model:
        obj = self.get(record_id)
        for field, value in patch.items():
            setattr(obj, field, value)
        self._validate(obj)
        obj.save()
        self._publish(ACTION_UPDATE, obj.pk)
        return obj

    def delete(self, record_id) -> None:
        obj = self.get(record_id)
        pk = obj.pk
        obj.delete()
        self._publish(ACTION_DELETE, pk)
        logger.info(
            "Record deleted",
            extra={"entity": self.entity.value, "record_id": str(pk)},
        )
