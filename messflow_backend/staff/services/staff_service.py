# PATH: staff/services/staff_service.py

"""
STAFF SERVICE

- staff CRUD (hard delete kept for cleanup; deactivate is the usual path)
- attendance upsert, one row per (staff, date)
- salary advances add / delete
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import transaction

from core.dates import today as local_today
from core.events import Entity
from core.exceptions import ValidationFailure
from core.money import ZERO, money
from core.record_store import RecordStore
from staff.models import SalaryAdvance, Staff, StaffAttendance

logger = logging.getLogger(__name__)


def staff_store(owner) -> RecordStore:
    return RecordStore(Staff, entity=Entity.STAFF, owner=owner)


def attendance_store(owner) -> RecordStore:
    return RecordStore(StaffAttendance, entity=Entity.ATTENDANCE, owner=owner)


def advance_store(owner) -> RecordStore:
    return RecordStore(SalaryAdvance, entity=Entity.SALARY_ADVANCE, owner=owner)


# ---------------- STAFF ----------------
def create_staff(*, owner, **values) -> Staff:
    name = (values.get("name") or "").strip()
    if not name:
        raise ValidationFailure("Name is required")
    values["name"] = name
    return staff_store(owner).insert(**values)


def set_active(*, owner, staff_id, active: bool) -> Staff:
    staff = staff_store(owner).update(staff_id, is_active=active)
    logger.info(
        "Staff reactivated" if active else "Staff deactivated",
        extra={"owner_id": str(owner.pk), "staff_id": str(staff.pk)},
    )
    return staff


def deactivate_staff(*, owner, staff_id) -> Staff:
    return set_active(owner=owner, staff_id=staff_id, active=False)


def reactivate_staff(*, owner, staff_id) -> Staff:
    return set_active(owner=owner, staff_id=staff_id, active=True)


# ---------------- ATTENDANCE ----------------
@transaction.atomic
def set_attendance(*, owner, staff_id, status: str, day: date | None = None) -> StaffAttendance:
    if status not in dict(StaffAttendance.STATUS_CHOICES):
        raise ValidationFailure(f"Unknown attendance status: {status}")

    staff = staff_store(owner).get(staff_id)
    day = day or local_today()

    store = attendance_store(owner)
    existing = store.select(staff=staff, date=day).select_for_update().first()
    if existing is not None:
        return store.update(existing.pk, status=status)
    return store.insert(staff=staff, date=day, status=status)


def attendance_for_month(owner, *, start: date, end: date, staff_id=None):
    filters = {"date__gte": start, "date__lte": end}
    if staff_id is not None:
        filters["staff_id"] = staff_id
    return attendance_store(owner).select(order_by=("date",), **filters)


# ---------------- ADVANCES ----------------
def add_advance(*, owner, staff_id, amount, notes: str = "", day: date | None = None) -> SalaryAdvance:
    amt = money(amount)
    if amt <= ZERO:
        raise ValidationFailure("Amount must be > 0")

    staff = staff_store(owner).get(staff_id)
    values = {"staff": staff, "amount": amt, "notes": (notes or "").strip()}
    if day is not None:
        values["date"] = day
    return advance_store(owner).insert(**values)


def delete_advance(*, owner, advance_id) -> None:
    advance_store(owner).delete(advance_id)
