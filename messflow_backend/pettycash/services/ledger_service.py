"""
======================================================
PATH: pettycash/services/ledger_service.py
======================================================
PETTY CASH LEDGER

This module is the ONLY place allowed to write PettyCashTransaction rows.

Chain rules:
- current balance = balance_after of the newest entry (date desc, id desc),
  or 0 when the tenant has no entries
- refill:  balance_after = current + amount
- expense: balance_after = current - amount (refused if amount > current)
- entry dates are assigned here, never by the caller, so the newest entry
  is always the chain head

Concurrency:
- every read-current-then-insert sequence runs in transaction.atomic while
  holding the tenant's Profile row lock (lock_profile)

Deletion:
- removing an entry recomputes balance_after for every later entry
- refused if any later balance would drop below zero
- a refill's linked main-ledger Expense is removed with it
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from core.events import Entity
from core.exceptions import ValidationFailure
from core.money import ZERO, money
from core.record_store import RecordStore
from expenses.models import ExpenseCategory
from expenses.services.expense_service import create_expense, delete_expense
from pettycash.models import PettyCashTransaction
from pettycash.services.exceptions import InsufficientBalance, PettyCashError
from users.services.profile_service import lock_profile

logger = logging.getLogger(__name__)

DEFAULT_REFILL_DESCRIPTION = "Cash Withdrawal"
DEFAULT_WITHDRAWAL_EXPENSE_DESCRIPTION = "Cash Withdrawal for Petty Cash"

CHAIN_ORDER = ("date", "id")


def petty_cash_store(owner) -> RecordStore:
    return RecordStore(PettyCashTransaction, entity=Entity.PETTY_CASH, owner=owner)


def _positive(amount) -> Decimal:
    amt = money(amount)
    if amt <= ZERO:
        raise ValidationFailure("Amount must be > 0")
    return amt


# ---------------- READS ----------------
def current_balance(owner) -> Decimal:
    head = (
        PettyCashTransaction.objects.filter(owner=owner)
        .order_by("-date", "-id")
        .values_list("balance_after", flat=True)
        .first()
    )
    return money(head if head is not None else ZERO)


def list_entries(owner):
    return petty_cash_store(owner).select(order_by=("-date", "-id"))


def summary(owner, *, start: date | None = None, end: date | None = None) -> dict:
    """
    Totals for a window of calendar days (inclusive bounds). closing_balance is the chain
    head inside the window, or 0 when the window has no entries.
    """
    qs = PettyCashTransaction.objects.filter(owner=owner)
    if start is not None:
        qs = qs.filter(date__date__gte=start)
    if end is not None:
        qs = qs.filter(date__date__lte=end)

    refills = qs.filter(type=PettyCashTransaction.TYPE_REFILL).aggregate(s=Sum("amount"))["s"]
    spent = qs.filter(type=PettyCashTransaction.TYPE_EXPENSE).aggregate(s=Sum("amount"))["s"]
    closing = qs.order_by("-date", "-id").values_list("balance_after", flat=True).first()

    return {
        "total_refills": money(refills or ZERO),
        "total_spent": money(spent or ZERO),
        "closing_balance": money(closing if closing is not None else ZERO),
        "entry_count": qs.count(),
    }


# ---------------- WRITES ----------------
@transaction.atomic
def add_refill(
    *,
    owner,
    amount,
    description: str = "",
    withdraw_from_ledger: bool = False,
) -> PettyCashTransaction:
    amt = _positive(amount)
    description = (description or "").strip()

    lock_profile(owner)

    linked = None
    if withdraw_from_ledger:
        linked = create_expense(
            owner=owner,
            description=description or DEFAULT_WITHDRAWAL_EXPENSE_DESCRIPTION,
            amount=amt,
            category=ExpenseCategory.OTHER,
        )

    entry = petty_cash_store(owner).insert(
        type=PettyCashTransaction.TYPE_REFILL,
        amount=amt,
        description=description or DEFAULT_REFILL_DESCRIPTION,
        balance_after=current_balance(owner) + amt,
        date=timezone.now(),
        linked_expense=linked,
    )

    logger.info(
        "Petty cash refilled",
        extra={
            "owner_id": str(owner.pk),
            "amount": str(amt),
            "balance_after": str(entry.balance_after),
            "linked_expense_id": str(linked.pk) if linked else None,
        },
    )
    return entry


@transaction.atomic
def add_small_expense(*, owner, amount, description: str) -> PettyCashTransaction:
    amt = _positive(amount)
    description = (description or "").strip()
    if not description:
        raise ValidationFailure("Description is required")

    lock_profile(owner)

    balance = current_balance(owner)
    if amt > balance:
        raise InsufficientBalance(
            f"Insufficient petty cash balance ({balance} available, {amt} requested)"
        )

    return petty_cash_store(owner).insert(
        type=PettyCashTransaction.TYPE_EXPENSE,
        amount=amt,
        description=description,
        balance_after=balance - amt,
        date=timezone.now(),
    )


def _recomputed_tail(entries, index: int) -> list[tuple[PettyCashTransaction, Decimal]]:
    running = entries[index - 1].balance_after if index > 0 else ZERO
    out = []
    for entry in entries[index + 1:]:
        running = running + entry.signed_amount
        if running < ZERO:
            raise PettyCashError(
                "Deleting this entry would make the petty cash balance negative."
            )
        out.append((entry, money(running)))
    return out


@transaction.atomic
def delete_entry(*, owner, entry_id) -> None:
    lock_profile(owner)

    store = petty_cash_store(owner)
    target = store.get(entry_id)

    entries = list(store.select(order_by=CHAIN_ORDER))
    index = next(i for i, e in enumerate(entries) if e.pk == target.pk)
    tail = _recomputed_tail(entries, index)

    linked_expense_id = target.linked_expense_id
    store.delete(target.pk)

    for entry, balance in tail:
        if entry.balance_after != balance:
            store.update(entry.pk, balance_after=balance)

    if linked_expense_id is not None:
        delete_expense(owner=owner, expense_id=linked_expense_id)

    logger.info(
        "Petty cash entry deleted",
        extra={
            "owner_id": str(owner.pk),
            "entry_id": entry_id,
            "recomputed": len(tail),
            "linked_expense_id": str(linked_expense_id) if linked_expense_id else None,
        },
    )
