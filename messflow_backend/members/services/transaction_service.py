# PATH: members/services/transaction_service.py

"""
MEMBER TRANSACTIONS

Payments and charges recorded against members. These rows feed revenue
in the dashboards, alerts and the monthly audit report.

Note:
- Recording a transaction does not touch Member.balance.
"""

from __future__ import annotations

from datetime import date

from django.db.models import Sum
from django.utils import timezone

from core.dates import today as local_today, week_days
from core.events import Entity
from core.exceptions import ValidationFailure
from core.money import ZERO, money
from core.record_store import RecordStore
from members.models import Member, Transaction


def transaction_store(owner) -> RecordStore:
    return RecordStore(Transaction, entity=Entity.TRANSACTION, owner=owner)


def record_transaction(
    *,
    owner,
    amount,
    txn_type: str = Transaction.TYPE_PAYMENT,
    member: Member | None = None,
    when=None,
    notes: str = "",
) -> Transaction:
    amt = money(amount)
    if amt <= ZERO:
        raise ValidationFailure("Amount must be > 0")

    if member is not None and member.owner_id != getattr(owner, "pk", owner):
        raise ValidationFailure("Member does not belong to this account")

    values = {
        "member": member,
        "type": txn_type,
        "amount": amt,
        "notes": (notes or "").strip(),
    }
    if when is not None:
        values["date"] = when
    return transaction_store(owner).insert(**values)


def member_history(*, owner, member_id):
    return transaction_store(owner).select(
        member_id=member_id, order_by=("-date", "-created_at")
    )


def today_collections(owner, *, today: date | None = None):
    day = today or local_today()
    total = Transaction.objects.filter(
        owner=owner,
        type=Transaction.TYPE_PAYMENT,
        date__date=day,
    ).aggregate(s=Sum("amount"))["s"]
    return money(total or ZERO)


def weekly_collections(owner, *, today: date | None = None) -> list[dict]:
    """Seven entries, Monday first, for the week containing `today`."""
    days = week_days(today or local_today())
    rows = Transaction.objects.filter(
        owner=owner,
        type=Transaction.TYPE_PAYMENT,
        date__date__gte=days[0],
        date__date__lte=days[-1],
    ).values_list("date", "amount")

    totals = {d: ZERO for d in days}
    for dt, amount in rows:
        day = timezone.localdate(dt)
        if day in totals:
            totals[day] += amount

    return [
        {"day": d.strftime("%a"), "date": d, "amount": money(totals[d])}
        for d in days
    ]
