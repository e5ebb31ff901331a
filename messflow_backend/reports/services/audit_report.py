"""
======================================================
PATH: reports/services/audit_report.py
======================================================
MONTHLY AUDIT REPORT

Window: [first day, last day] of the month, inclusive.

Numbers:
- total_revenue         = payment transactions in the window
- month expenses        = window expenses EXCEPT category "salaries"
                          (salaries come from the manifest instead)
- rent_cost             = "rent" month expenses
- total_variable_costs  = month expenses minus rent
- salary manifest       = every staff member joined on (staff, "Month YYYY")
- total_fixed_costs     = rent + sum(manifest paid amounts)
- net_profit            = revenue - fixed - variable   (exact)
- category_breakdown    = month expenses + synthetic salaries bucket,
                          nonzero categories, half-up integer percentages
- petty cash            = refills / spent in window, closing balance =
                          balance_after of the newest entry in the window

Petty-cash refills withdrawn from the main ledger are already present as
"other" expenses, so they are not added again.

build_report() is pure; generate_audit_report() loads rows for a tenant.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from core.dates import month_bounds, month_year_key
from core.money import ZERO, money, percentage_of
from expenses.models import Expense, ExpenseCategory
from members.models import Transaction
from pettycash.models import PettyCashTransaction
from reports.services.business_intelligence import ExpenseRow, PaymentRow, as_day
from staff.models import SalaryPayment, Staff
from users.tenant import get_tenant_config


@dataclass(frozen=True)
class StaffRow:
    staff_id: str
    name: str
    role: str
    base_salary: Decimal


@dataclass(frozen=True)
class SalaryRow:
    staff_id: str
    amount: Decimal
    month_year: str


@dataclass(frozen=True)
class PettyCashRow:
    type: str
    amount: Decimal
    balance_after: Decimal
    date: date
    sequence: int


@dataclass(frozen=True)
class ReportHeader:
    business_name: str = "Business"
    company_address: str = ""
    currency: str = "AED"


def _in_window(d: date, start: date, end: date) -> bool:
    return start <= d <= end


def _salary_manifest(staff: list[StaffRow], salaries: list[SalaryRow], key: str) -> list[dict]:
    paid = {}
    for s in salaries:
        if s.month_year == key and s.staff_id not in paid:
            paid[s.staff_id] = s.amount

    manifest = []
    for member in staff:
        amount = paid.get(member.staff_id)
        manifest.append(
            {
                "staff_name": member.name,
                "role": member.role,
                "base_salary": money(member.base_salary),
                "paid_amount": money(amount or ZERO),
                "status": "paid" if amount is not None else "pending",
            }
        )
    return manifest


def _category_breakdown(month_expenses: list[ExpenseRow], total_salaries: Decimal) -> list[dict]:
    totals = {c: ZERO for c in ExpenseCategory.values}
    for e in month_expenses:
        totals[e.category] = totals.get(e.category, ZERO) + e.amount
    totals[ExpenseCategory.SALARIES] += total_salaries

    grand_total = sum(totals.values(), ZERO)
    labels = dict(ExpenseCategory.choices)

    return [
        {
            "category": labels[c],
            "amount": money(totals[c]),
            "percentage": percentage_of(totals[c], grand_total),
        }
        for c in ExpenseCategory.values
        if totals[c] > 0
    ]


def _petty_cash_summary(entries: list[PettyCashRow], start: date, end: date) -> dict:
    window = [p for p in entries if _in_window(p.date, start, end)]
    refills = sum((p.amount for p in window if p.type == PettyCashTransaction.TYPE_REFILL), ZERO)
    spent = sum((p.amount for p in window if p.type == PettyCashTransaction.TYPE_EXPENSE), ZERO)
    newest = max(window, key=lambda p: (p.date, p.sequence), default=None)
    return {
        "total_refills": money(refills),
        "total_spent": money(spent),
        "closing_balance": money(newest.balance_after if newest else ZERO),
    }


def build_report(
    *,
    month: date,
    expenses: Iterable[ExpenseRow],
    payments: Iterable[PaymentRow],
    staff: Iterable[StaffRow],
    salaries: Iterable[SalaryRow],
    petty_cash: Iterable[PettyCashRow],
    header: ReportHeader | None = None,
) -> dict:
    start, end = month_bounds(month)
    key = month_year_key(start)
    header = header or ReportHeader()

    month_payments = [p for p in payments if _in_window(p.date, start, end)]
    total_revenue = sum((p.amount for p in month_payments), ZERO)

    month_expenses = [
        e
        for e in expenses
        if _in_window(e.date, start, end) and e.category != ExpenseCategory.SALARIES
    ]
    rent_cost = sum(
        (e.amount for e in month_expenses if e.category == ExpenseCategory.RENT), ZERO
    )
    total_variable = sum(
        (e.amount for e in month_expenses if e.category != ExpenseCategory.RENT), ZERO
    )

    manifest = _salary_manifest(list(staff), list(salaries), key)
    total_salaries = sum((row["paid_amount"] for row in manifest), ZERO)
    total_fixed = rent_cost + total_salaries

    return {
        "month": calendar.month_name[start.month],
        "year": start.year,
        "month_year": key,
        "period_start": start,
        "period_end": end,
        "business_name": header.business_name,
        "company_address": header.company_address,
        "currency": header.currency,
        "total_revenue": money(total_revenue),
        "rent_cost": money(rent_cost),
        "total_fixed_costs": money(total_fixed),
        "total_variable_costs": money(total_variable),
        "net_profit": money(total_revenue - total_fixed - total_variable),
        "salary_manifest": manifest,
        "category_breakdown": _category_breakdown(month_expenses, total_salaries),
        "petty_cash_summary": _petty_cash_summary(list(petty_cash), start, end),
        "member_stats": {
            "total_payments": money(total_revenue),
            "payment_count": len(month_payments),
        },
    }


# ---------------- DB WRAPPER ----------------
def generate_audit_report(owner, *, month: date) -> dict:
    start, end = month_bounds(month)
    key = month_year_key(start)
    config = get_tenant_config(owner)

    expenses = [
        ExpenseRow(category=c, amount=a, date=d, description=desc)
        for c, a, d, desc in Expense.objects.filter(
            owner=owner, date__gte=start, date__lte=end
        ).values_list("category", "amount", "date", "description")
    ]
    payments = [
        PaymentRow(amount=a, date=as_day(dt))
        for a, dt in Transaction.objects.filter(
            owner=owner,
            type=Transaction.TYPE_PAYMENT,
            date__date__gte=start,
            date__date__lte=end,
        ).values_list("amount", "date")
    ]
    staff = [
        StaffRow(staff_id=str(pk), name=name, role=role, base_salary=base)
        for pk, name, role, base in Staff.objects.filter(owner=owner)
        .order_by("name")
        .values_list("id", "name", "role", "base_salary")
    ]
    salaries = [
        SalaryRow(staff_id=str(staff_id), amount=amount, month_year=month_year)
        for staff_id, amount, month_year in SalaryPayment.objects.filter(
            owner=owner, month_year=key, staff__isnull=False
        ).values_list("staff_id", "amount", "month_year")
    ]
    petty_cash = [
        PettyCashRow(type=t, amount=a, balance_after=b, date=as_day(dt), sequence=pk)
        for pk, t, a, b, dt in PettyCashTransaction.objects.filter(
            owner=owner, date__date__gte=start, date__date__lte=end
        ).values_list("id", "type", "amount", "balance_after", "date")
    ]

    return build_report(
        month=start,
        expenses=expenses,
        payments=payments,
        staff=staff,
        salaries=salaries,
        petty_cash=petty_cash,
        header=ReportHeader(
            business_name=config.business_name,
            company_address=config.company_address,
            currency=config.currency,
        ),
    )
