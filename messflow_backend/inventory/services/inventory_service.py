# PATH: inventory/services/inventory_service.py

"""
INVENTORY SERVICE

- items are listed by name
- set_quantity(): direct stock correction
- record_consumption(): stock decrement + consumption log, atomically
  under a row lock on the item
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from django.db import transaction

from core.events import Entity
from core.exceptions import ValidationFailure
from core.record_store import RecordStore
from inventory.models import InventoryConsumption, InventoryItem

logger = logging.getLogger(__name__)


def item_store(owner) -> RecordStore:
    return RecordStore(InventoryItem, entity=Entity.INVENTORY, owner=owner)


def consumption_store(owner) -> RecordStore:
    return RecordStore(InventoryConsumption, entity=Entity.CONSUMPTION, owner=owner)


def _quantity(value) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationFailure(f"Invalid quantity: {value!r}") from exc


def set_quantity(*, owner, item_id, quantity) -> InventoryItem:
    qty = _quantity(quantity)
    if qty < 0:
        raise ValidationFailure("Quantity cannot be negative")
    return item_store(owner).update(item_id, quantity=qty)


@transaction.atomic
def record_consumption(
    *,
    owner,
    item_id,
    quantity_used,
    notes: str = "",
    day: date | None = None,
) -> InventoryConsumption:
    used = _quantity(quantity_used)
    if used <= 0:
        raise ValidationFailure("Quantity used must be > 0")

    store = item_store(owner)
    item = store.get(item_id, for_update=True)
    if used > item.quantity:
        raise ValidationFailure(
            f"Only {item.quantity} {item.unit} of {item.item_name} in stock"
        )

    values = {"item": item, "quantity_used": used, "notes": (notes or "").strip()}
    if day is not None:
        values["date"] = day
    entry = consumption_store(owner).insert(**values)
    store.update(item.pk, quantity=item.quantity - used)

    logger.info(
        "Inventory consumed",
        extra={
            "owner_id": str(owner.pk),
            "item_id": str(item.pk),
            "quantity_used": str(used),
        },
    )
    return entry


def consumption_history(*, owner, item_id):
    item = item_store(owner).get(item_id)
    return consumption_store(owner).select(item=item, order_by=("-date", "-id"))
