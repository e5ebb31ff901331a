# core/events.py

"""
CHANGE NOTIFICATION BUS

Every successful mutation publishes a ChangeEvent keyed by entity type.
Derived views (dashboards, alerts, audit reports) subscribe and drop their
cached copies for the affected tenant; the next read recomputes from the
full refreshed record set.

Rules:
- Events carry identifiers only (entity, owner, action, record id).
- Publishing is deferred until the surrounding DB transaction commits,
  so rolled-back writes never notify anyone.
- Subscriptions are explicit: subscribe(entity, handler) returns an
  unsubscribe callable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from django.db import models, transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)


class Entity(models.TextChoices):
    MEMBER = "member", "Member"
    TRANSACTION = "transaction", "Transaction"
    EXPENSE = "expense", "Expense"
    PETTY_CASH = "petty_cash", "Petty cash transaction"
    STAFF = "staff", "Staff"
    SALARY_PAYMENT = "salary_payment", "Salary payment"
    SALARY_ADVANCE = "salary_advance", "Salary advance"
    ATTENDANCE = "attendance", "Staff attendance"
    INVENTORY = "inventory", "Inventory item"
    CONSUMPTION = "consumption", "Inventory consumption"
    MENU = "menu", "Menu entry"
    PROFILE = "profile", "Profile"


ACTION_INSERT = "insert"
ACTION_UPDATE = "update"
ACTION_DELETE = "delete"


@dataclass(frozen=True)
class ChangeEvent:
    entity: Entity
    owner_id: str
    action: str
    record_id: str | None = None


# sender is always an Entity member
record_changed = Signal()


def publish_change(*, entity, owner_id, action: str, record_id=None) -> ChangeEvent:
    event = ChangeEvent(
        entity=Entity(entity),
        owner_id=str(owner_id),
        action=action,
        record_id=None if record_id is None else str(record_id),
    )

    def _send():
        logger.debug(
            "Change published",
            extra={
                "entity": event.entity.value,
                "owner_id": event.owner_id,
                "action": event.action,
                "record_id": event.record_id,
            },
        )
        for receiver, result in record_changed.send_robust(sender=event.entity, event=event):
            if isinstance(result, Exception):
                logger.error(
                    "Change handler failed",
                    exc_info=result,
                    extra={"entity": event.entity.value, "owner_id": event.owner_id},
                )

    transaction.on_commit(_send)
    return event


def subscribe(
    entity,
    handler: Callable[[ChangeEvent], None],
    *,
    owner_id=None,
) -> Callable[[], None]:
    entity = Entity(entity)
    owner_filter = None if owner_id is None else str(owner_id)

    def _receiver(sender, event: ChangeEvent, **kwargs):
        if owner_filter is not None and event.owner_id != owner_filter:
            return
        handler(event)

    record_changed.connect(_receiver, sender=entity, weak=False)

    def unsubscribe() -> None:
        record_changed.disconnect(_receiver, sender=entity)

    return unsubscribe
