"""
======================================================
PATH: reports/services/business_intelligence.py
======================================================
BUSINESS INTELLIGENCE (COST ALERTS)

Pure functions over plain rows; recomputed from scratch on every call.
Nothing here is persisted.

Alerts:
- spending_spike (warning), per category:
    avg3 = mean of the three previous calendar months
    fires iff avg3 > 0 and current > avg3 * 1.15
    percentage_over = round_half_up((current - avg3) / avg3 * 100)
- frequent_repairs (warning):
    >= 4 maintenance expenses dated on or after today - 7 days
- unnecessary_expense (info):
    current-month "other" / "miscellaneous" / "snack" spend above 5% of
    current-month payment revenue

Variance rows feed the category comparison chart.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable

from django.utils import timezone

from core.dates import month_bounds, shift_month
from core.money import ZERO, money, round_half_up
from expenses.models import Expense, ExpenseCategory
from members.models import Transaction

SPIKE_THRESHOLD = Decimal("1.15")
REPAIR_WINDOW_DAYS = 7
REPAIR_ALERT_COUNT = 4
UNNECESSARY_REVENUE_SHARE = Decimal("0.05")
UNNECESSARY_KEYWORDS = ("miscellaneous", "snack")
AVERAGE_MONTHS = 3


@dataclass(frozen=True)
class ExpenseRow:
    category: str
    amount: Decimal
    date: date
    description: str = ""


@dataclass(frozen=True)
class PaymentRow:
    amount: Decimal
    date: date


def as_day(value) -> date:
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            return timezone.localdate(value)
        return value.date()
    return value


def _spend(expenses: Iterable[ExpenseRow], category: str, start: date, end: date) -> Decimal:
    return sum(
        (e.amount for e in expenses if e.category == category and start <= e.date <= end),
        ZERO,
    )


def _category_averages(expenses: list[ExpenseRow], today: date) -> dict:
    cur_start, cur_end = month_bounds(today)
    windows = [month_bounds(shift_month(today, -i)) for i in range(1, AVERAGE_MONTHS + 1)]

    out = {}
    for category in ExpenseCategory.values:
        current = _spend(expenses, category, cur_start, cur_end)
        history = sum((_spend(expenses, category, s, e) for s, e in windows), ZERO)
        out[category] = (current, history / AVERAGE_MONTHS)
    return out


def _labels() -> dict:
    return dict(ExpenseCategory.choices)


# ---------------- ALERTS ----------------
def spending_spikes(expenses: list[ExpenseRow], today: date) -> list[dict]:
    labels = _labels()
    alerts = []
    for category, (current, avg3) in _category_averages(expenses, today).items():
        if avg3 > 0 and current > avg3 * SPIKE_THRESHOLD:
            pct = round_half_up((current - avg3) / avg3 * 100)
            label = labels[category]
            alerts.append(
                {
                    "id": f"spending-{category}",
                    "type": "spending_spike",
                    "severity": "warning",
                    "title": f"{label} Spend Alert",
                    "message": f"{label} spending is {pct}% higher than usual this month.",
                    "category": label,
                    "percentage_over": pct,
                }
            )
    return alerts


def frequent_repairs(expenses: list[ExpenseRow], today: date) -> dict | None:
    since = today - timedelta(days=REPAIR_WINDOW_DAYS)
    count = sum(
        1 for e in expenses if e.category == ExpenseCategory.MAINTENANCE and e.date >= since
    )
    if count < REPAIR_ALERT_COUNT:
        return None
    return {
        "id": "frequent-repairs",
        "type": "frequent_repairs",
        "severity": "warning",
        "title": "Frequent Repairs Detected",
        "message": (
            f"{count} repair/maintenance entries logged this week. "
            "Investigation suggested."
        ),
    }


def _is_unnecessary(expense: ExpenseRow) -> bool:
    desc = (expense.description or "").lower()
    return expense.category == ExpenseCategory.OTHER or any(
        word in desc for word in UNNECESSARY_KEYWORDS
    )


def unnecessary_expenses(
    expenses: list[ExpenseRow], payments: list[PaymentRow], today: date
) -> dict | None:
    start, end = month_bounds(today)
    revenue = sum((p.amount for p in payments if start <= p.date <= end), ZERO)
    spend = sum(
        (e.amount for e in expenses if start <= e.date <= end and _is_unnecessary(e)),
        ZERO,
    )

    if revenue <= 0 or spend <= revenue * UNNECESSARY_REVENUE_SHARE:
        return None

    pct = round_half_up(spend / revenue * 100)
    return {
        "id": "unnecessary-expenses",
        "type": "unnecessary_expense",
        "severity": "info",
        "title": "Unnecessary Expenses Flag",
        "message": (
            f"Miscellaneous/Other expenses are {pct}% of revenue. "
            "Consider reviewing these costs."
        ),
        "percentage_over": pct,
    }


def compute_alerts(
    *,
    expenses: Iterable[ExpenseRow],
    payments: Iterable[PaymentRow],
    today: date,
) -> list[dict]:
    expenses = list(expenses)
    payments = list(payments)

    alerts = spending_spikes(expenses, today)
    for alert in (frequent_repairs(expenses, today), unnecessary_expenses(expenses, payments, today)):
        if alert is not None:
            alerts.append(alert)
    return alerts


def compute_variance(*, expenses: Iterable[ExpenseRow], today: date) -> list[dict]:
    labels = _labels()
    rows = []
    for category, (current, avg3) in _category_averages(list(expenses), today).items():
        average = round_half_up(avg3)
        variance = round_half_up((current - avg3) / avg3 * 100) if avg3 > 0 else 0
        if current > 0 or average > 0:
            rows.append(
                {
                    "category": labels[category],
                    "current": money(current),
                    "average": average,
                    "variance": variance,
                }
            )
    return rows


# ---------------- DB WRAPPER ----------------
def load_rows(owner, *, today: date) -> tuple[list[ExpenseRow], list[PaymentRow]]:
    """Expenses from the three previous months onward, and this month's payments."""
    window_start = shift_month(today, -AVERAGE_MONTHS)
    month_start, month_end = month_bounds(today)

    expenses = [
        ExpenseRow(category=c, amount=a, date=d, description=desc)
        for c, a, d, desc in Expense.objects.filter(
            owner=owner, date__gte=window_start
        ).values_list("category", "amount", "date", "description")
    ]
    payments = [
        PaymentRow(amount=a, date=as_day(dt))
        for a, dt in Transaction.objects.filter(
            owner=owner,
            type=Transaction.TYPE_PAYMENT,
            date__date__gte=month_start,
            date__date__lte=month_end,
        ).values_list("amount", "date")
    ]
    return expenses, payments


def business_insights(owner, *, today: date) -> dict:
    expenses, payments = load_rows(owner, today=today)
    return {
        "alerts": compute_alerts(expenses=expenses, payments=payments, today=today),
        "variance": compute_variance(expenses=expenses, today=today),
    }
