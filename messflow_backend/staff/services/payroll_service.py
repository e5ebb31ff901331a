"""
======================================================
PATH: staff/services/payroll_service.py
======================================================
PAYROLL SERVICE

calculate_payroll() (read-only):
- daily rate = base_salary / 30
- absent day   -> full daily rate deducted
- half day     -> half daily rate deducted
- advances taken this month are deducted
- net_payable = max(0, base - deductions - advances)

pay_salary() (atomic, all-or-nothing):
1) create a main-ledger Expense (category "salaries")
2) create the SalaryPayment linked to it
3) clear the staff member's advances for that month

A staff member is paid at most once per "Month YYYY" period.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum

from core.dates import month_bounds, month_year_key, today as local_today
from core.events import ACTION_DELETE, Entity, publish_change
from core.exceptions import ValidationFailure
from core.money import ZERO, money
from core.record_store import RecordStore
from expenses.models import ExpenseCategory
from expenses.services.expense_service import create_expense
from staff.models import SalaryAdvance, SalaryPayment, Staff, StaffAttendance
from staff.services.staff_service import staff_store

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = Decimal("30")


class SalaryAlreadyPaid(ValidationFailure):
    pass


def salary_store(owner) -> RecordStore:
    return RecordStore(SalaryPayment, entity=Entity.SALARY_PAYMENT, owner=owner)


# ---------------- CALCULATION ----------------
def calculate_payroll(staff: Staff, *, today: date | None = None) -> dict:
    start, end = month_bounds(today or local_today())

    statuses = list(
        StaffAttendance.objects.filter(
            staff=staff, date__gte=start, date__lte=end
        ).values_list("status", flat=True)
    )
    present_days = statuses.count(StaffAttendance.STATUS_PRESENT)
    absent_days = statuses.count(StaffAttendance.STATUS_ABSENT)
    half_days = statuses.count(StaffAttendance.STATUS_HALF_DAY)

    base = money(staff.base_salary)
    daily_rate = base / DAYS_PER_MONTH
    absent_deduction = daily_rate * absent_days
    half_day_deduction = daily_rate / 2 * half_days
    total_deduction = absent_deduction + half_day_deduction

    advances = SalaryAdvance.objects.filter(
        staff=staff, date__gte=start, date__lte=end
    ).aggregate(s=Sum("amount"))["s"] or ZERO

    net = base - total_deduction - advances

    return {
        "staff_id": str(staff.pk),
        "base_salary": base,
        "daily_rate": money(daily_rate),
        "present_days": present_days,
        "absent_days": absent_days,
        "half_days": half_days,
        "absent_deduction": money(absent_deduction),
        "half_day_deduction": money(half_day_deduction),
        "total_deduction": money(total_deduction),
        "total_advances": money(advances),
        "net_payable": money(max(ZERO, net)),
    }


def is_salary_paid(staff: Staff, *, month_year: str) -> bool:
    return SalaryPayment.objects.filter(staff=staff, month_year=month_year).exists()


def payroll_overview(owner, *, today: date | None = None) -> list[dict]:
    day = today or local_today()
    key = month_year_key(day)
    rows = []
    for staff in staff_store(owner).select(is_active=True, order_by=("name",)):
        row = calculate_payroll(staff, today=day)
        row["name"] = staff.name
        row["role"] = staff.role
        row["month_year"] = key
        row["is_paid"] = is_salary_paid(staff, month_year=key)
        rows.append(row)
    return rows


def salary_history(*, owner, staff_id):
    staff = staff_store(owner).get(staff_id)
    return salary_store(owner).select(staff=staff, order_by=("-paid_at",))


# ---------------- PAYMENT ----------------
@transaction.atomic
def pay_salary(*, owner, staff_id, amount, month: date | None = None) -> SalaryPayment:
    amt = money(amount)
    if amt <= ZERO:
        raise ValidationFailure("Amount must be > 0")

    staff = staff_store(owner).get(staff_id, for_update=True)
    period = month or local_today()
    key = month_year_key(period)

    if is_salary_paid(staff, month_year=key):
        raise SalaryAlreadyPaid(f"Salary for {staff.name} is already paid for {key}")

    expense = create_expense(
        owner=owner,
        description=f"Salary payment - {staff.name} ({key})",
        amount=amt,
        category=ExpenseCategory.SALARIES,
    )

    payment = salary_store(owner).insert(
        staff=staff,
        amount=amt,
        month_year=key,
        expense=expense,
    )

    start, end = month_bounds(period)
    cleared, _ = SalaryAdvance.objects.filter(
        owner=owner, staff=staff, date__gte=start, date__lte=end
    ).delete()
    if cleared:
        publish_change(entity=Entity.SALARY_ADVANCE, owner_id=owner.pk, action=ACTION_DELETE)

    logger.info(
        "Salary paid",
        extra={
            "owner_id": str(owner.pk),
            "staff_id": str(staff.pk),
            "month_year": key,
            "amount": str(amt),
            "advances_cleared": cleared,
        },
    )
    return payment
