# staff/models.py

from __future__ import annotations

import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class StaffRole(models.TextChoices):
    COOK = "cook", "Cook"
    CLEANER = "cleaner", "Cleaner"
    HELPER = "helper", "Helper"
    MANAGER = "manager", "Manager"
    DELIVERY = "delivery", "Delivery"
    OTHER = "other", "Other"


class Staff(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="staff_members",
    )

    name = models.CharField(max_length=150)
    role = models.CharField(max_length=20, choices=StaffRole.choices, default=StaffRole.OTHER)
    phone = models.CharField(max_length=30, blank=True, default="")
    base_salary = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )
    is_active = models.BooleanField(default=True)
    joining_date = models.DateField(default=timezone.localdate)

    # Optional bank details (WPS transfers)
    bank_name = models.CharField(max_length=120, blank=True, null=True)
    account_number = models.CharField(max_length=50, blank=True, null=True)
    iban = models.CharField(max_length=50, blank=True, null=True)
    swift_code = models.CharField(max_length=20, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "staff"
        indexes = [
            models.Index(fields=["owner", "is_active"], name="staff_owner_active_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.role})"


class StaffAttendance(models.Model):
    STATUS_PRESENT = "present"
    STATUS_ABSENT = "absent"
    STATUS_HALF_DAY = "half_day"

    STATUS_CHOICES = (
        (STATUS_PRESENT, "Present"),
        (STATUS_ABSENT, "Absent"),
        (STATUS_HALF_DAY, "Half day"),
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="staff_attendance",
    )
    staff = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name="attendance")
    date = models.DateField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(fields=["staff", "date"], name="uniq_attendance_staff_date"),
        ]

    def __str__(self):
        return f"{self.staff_id} {self.date} {self.status}"


class SalaryAdvance(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="salary_advances",
    )
    staff = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name="advances")
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    date = models.DateField(default=timezone.localdate)
    notes = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-id"]

    def __str__(self):
        return f"Advance {self.amount} -> {self.staff_id}"


class SalaryPayment(models.Model):
    """
    One payment per staff member per salary period.

    month_year uses the "Month YYYY" key (e.g. "March 2025"); the audit
    report joins on it.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="salary_payments",
    )
    staff = models.ForeignKey(
        Staff,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="salary_payments",
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    month_year = models.CharField(max_length=20)
    paid_at = models.DateTimeField(default=timezone.now)
    expense = models.ForeignKey(
        "expenses.Expense",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="salary_payments",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-paid_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["staff", "month_year"], name="uniq_salary_staff_month"
            ),
        ]
        indexes = [
            models.Index(fields=["owner", "month_year"], name="salary_owner_month_idx"),
        ]

    def __str__(self):
        return f"{self.month_year}: {self.amount}"
