# PATH: expenses/services/expense_service.py

"""
EXPENSE SERVICE

Responsibilities:
- Validate expense payload (amount > 0, known category)
- Gate receipt attachment (free-tier receipt slots + storage quota)
- Keep Profile.storage_used in step with receipt bytes
- Refuse deleting an expense that backs a petty-cash refill, or changing
  its amount or category (delete the refill instead; it removes both)

All writes go through the tenant-scoped record store, so every change
publishes an invalidation event.
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import transaction

from core.events import Entity
from core.exceptions import ValidationFailure
from core.money import ZERO, money
from core.record_store import RecordStore
from expenses.models import Expense, ExpenseCategory
from subscriptions.services.limits import assert_can_upload_receipt
from users.services.profile_service import adjust_storage_used

logger = logging.getLogger(__name__)


class LinkedExpenseError(ValidationFailure):
    pass


def expense_store(owner) -> RecordStore:
    return RecordStore(Expense, entity=Entity.EXPENSE, owner=owner)


def _clean_amount(amount):
    amt = money(amount)
    if amt <= ZERO:
        raise ValidationFailure("Amount must be > 0")
    return amt


def _clean_category(category) -> str:
    value = (category or ExpenseCategory.OTHER).strip().lower()
    if value not in ExpenseCategory.values:
        raise ValidationFailure(f"Unknown expense category: {value}")
    return value


@transaction.atomic
def create_expense(
    *,
    owner,
    description: str,
    amount,
    category: str = ExpenseCategory.OTHER,
    date: date | None = None,
    receipt_url: str | None = None,
    file_size_bytes: int | None = None,
) -> Expense:
    description = (description or "").strip()
    if not description:
        raise ValidationFailure("Description is required")

    size = max(int(file_size_bytes or 0), 0)
    receipt_url = (receipt_url or "").strip() or None
    if receipt_url:
        assert_can_upload_receipt(owner, file_size_bytes=size)
    else:
        size = 0

    values = {
        "description": description,
        "amount": _clean_amount(amount),
        "category": _clean_category(category),
        "receipt_url": receipt_url,
        "file_size_bytes": size,
    }
    if date is not None:
        values["date"] = date

    expense = expense_store(owner).insert(**values)
    adjust_storage_used(owner=owner, delta_bytes=size)

    logger.info(
        "Expense recorded",
        extra={
            "owner_id": str(owner.pk),
            "expense_id": str(expense.id),
            "category": expense.category,
            "amount": str(expense.amount),
        },
    )
    return expense


@transaction.atomic
def update_expense(*, owner, expense_id, **changes) -> Expense:
    store = expense_store(owner)
    current = store.get(expense_id, for_update=True)

    if "amount" in changes:
        changes["amount"] = _clean_amount(changes["amount"])
    if "category" in changes:
        changes["category"] = _clean_category(changes["category"])
    if "description" in changes:
        changes["description"] = (changes["description"] or "").strip()
        if not changes["description"]:
            raise ValidationFailure("Description is required")

    amount_changed = "amount" in changes and changes["amount"] != current.amount
    category_changed = "category" in changes and changes["category"] != current.category
    if (amount_changed or category_changed) and is_linked_to_petty_cash(current):
        raise LinkedExpenseError(
            "This expense funds a petty cash refill. Its amount and category are fixed."
        )

    delta = 0
    if "receipt_url" in changes or "file_size_bytes" in changes:
        new_url = (changes.get("receipt_url", current.receipt_url) or "").strip() or None
        new_size = max(int(changes.get("file_size_bytes", current.file_size_bytes) or 0), 0)
        if not new_url:
            new_size = 0
        if new_url and not current.receipt_url:
            assert_can_upload_receipt(owner, file_size_bytes=new_size)
        changes["receipt_url"] = new_url
        changes["file_size_bytes"] = new_size
        delta = new_size - (current.file_size_bytes or 0)

    expense = store.update(current.pk, **changes)
    adjust_storage_used(owner=owner, delta_bytes=delta)
    return expense


def is_linked_to_petty_cash(expense: Expense) -> bool:
    return expense.petty_cash_entries.exists()


@transaction.atomic
def delete_expense(*, owner, expense_id) -> None:
    store = expense_store(owner)
    expense = store.get(expense_id, for_update=True)

    if is_linked_to_petty_cash(expense):
        raise LinkedExpenseError(
            "This expense funds a petty cash refill. Delete the refill instead."
        )

    freed = expense.file_size_bytes or 0
    store.delete(expense.pk)
    adjust_storage_used(owner=owner, delta_bytes=-freed)


@transaction.atomic
def clear_receipt(*, owner, expense_id) -> Expense:
    return update_expense(owner=owner, expense_id=expense_id, receipt_url=None)


@transaction.atomic
def clear_receipts_before(*, owner, before: date) -> dict:
    """Drop receipt references on expenses dated before `before`."""
    store = expense_store(owner)
    ids = list(
        store.select(date__lt=before, receipt_url__isnull=False)
        .exclude(receipt_url="")
        .values_list("id", flat=True)
    )

    freed = 0
    for expense_id in ids:
        expense = store.get(expense_id)
        freed += expense.file_size_bytes or 0
        store.update(expense_id, receipt_url=None, file_size_bytes=0)

    adjust_storage_used(owner=owner, delta_bytes=-freed)
    logger.info(
        "Old receipts cleared",
        extra={"owner_id": str(owner.pk), "cleared": len(ids), "bytes_freed": freed},
    )
    return {"cleared": len(ids), "bytes_freed": freed}
