# PATH: expenses/services/expense_stats.py

"""
EXPENSE DASHBOARD VIEWS

- today_total:        sum of expenses dated today
- month_total:        sum over the calendar month containing `today`
- weekly_series:      seven {day, date, amount} entries, Monday first
- category_breakdown: month totals per category, zero categories dropped
"""

from __future__ import annotations

from datetime import date

from django.db.models import Sum

from core.dates import month_bounds, today as local_today, week_days
from core.money import ZERO, money
from expenses.models import Expense, ExpenseCategory


def _sum(qs):
    return money(qs.aggregate(s=Sum("amount"))["s"] or ZERO)


def today_total(owner, *, today: date | None = None):
    day = today or local_today()
    return _sum(Expense.objects.filter(owner=owner, date=day))


def month_total(owner, *, today: date | None = None):
    start, end = month_bounds(today or local_today())
    return _sum(Expense.objects.filter(owner=owner, date__gte=start, date__lte=end))


def weekly_series(owner, *, today: date | None = None) -> list[dict]:
    days = week_days(today or local_today())
    rows = (
        Expense.objects.filter(owner=owner, date__gte=days[0], date__lte=days[-1])
        .values("date")
        .annotate(total=Sum("amount"))
    )
    totals = {r["date"]: r["total"] for r in rows}
    return [
        {"day": d.strftime("%a"), "date": d, "amount": money(totals.get(d) or ZERO)}
        for d in days
    ]


def category_breakdown(owner, *, today: date | None = None) -> list[dict]:
    start, end = month_bounds(today or local_today())
    rows = (
        Expense.objects.filter(owner=owner, date__gte=start, date__lte=end)
        .values("category")
        .annotate(total=Sum("amount"))
    )
    totals = {r["category"]: r["total"] for r in rows}
    labels = dict(ExpenseCategory.choices)

    return [
        {"category": value, "label": labels[value], "amount": money(totals[value])}
        for value in ExpenseCategory.values
        if totals.get(value) and totals[value] > 0
    ]


def expense_stats(owner, *, today: date | None = None) -> dict:
    day = today or local_today()
    return {
        "today_total": today_total(owner, today=day),
        "month_total": month_total(owner, today=day),
        "weekly": weekly_series(owner, today=day),
        "by_category": category_breakdown(owner, today=day),
    }
