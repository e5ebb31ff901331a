# members/models.py

from __future__ import annotations

import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class Member(models.Model):
    """
    A paying mess member.

    `balance` is a cached figure maintained by explicit member updates;
    transactions do not recompute it.
    """

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
    ]

    MEAL_PLAN_CHOICES = [
        ("1-time", "1 meal / day"),
        ("2-time", "2 meals / day"),
        ("3-time", "3 meals / day"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="members",
    )

    name = models.CharField(max_length=150)
    phone = models.CharField(max_length=30)

    monthly_fee = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )
    balance = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    meal_plan = models.CharField(max_length=10, choices=MEAL_PLAN_CHOICES, default="3-time")
    selected_menu_week = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(4)],
    )

    joining_date = models.DateField(default=timezone.localdate)
    plan_expiry_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "status"], name="member_owner_status_idx"),
            models.Index(fields=["owner", "plan_expiry_date"], name="member_owner_expiry_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.status})"


class Transaction(models.Model):
    TYPE_PAYMENT = "payment"
    TYPE_CHARGE = "charge"
    TYPE_ADJUSTMENT = "adjustment"
    TYPE_CHOICES = [
        (TYPE_PAYMENT, "Payment"),
        (TYPE_CHARGE, "Charge"),
        (TYPE_ADJUSTMENT, "Adjustment"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="member_transactions",
    )

    # Weak reference: history survives member deletion.
    member = models.ForeignKey(
        Member,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )

    type = models.CharField(max_length=12, choices=TYPE_CHOICES, default=TYPE_PAYMENT)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    date = models.DateTimeField(default=timezone.now)
    notes = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["owner", "type", "date"], name="txn_owner_type_date_idx"),
        ]

    def __str__(self):
        return f"{self.type} {self.amount} ({self.date:%Y-%m-%d})"
