# expenses/models.py

from __future__ import annotations

import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class ExpenseCategory(models.TextChoices):
    GROCERIES = "groceries", "Groceries"
    UTILITIES = "utilities", "Utilities"
    RENT = "rent", "Rent"
    SALARIES = "salaries", "Salaries"
    MAINTENANCE = "maintenance", "Maintenance"
    OTHER = "other", "Other"


class Expense(models.Model):
    """
    Main-ledger expense.

    Receipts are stored externally; only the URL and byte size are kept
    here (byte size feeds Profile.storage_used).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="expenses",
    )

    description = models.CharField(max_length=255)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    category = models.CharField(
        max_length=20,
        choices=ExpenseCategory.choices,
        default=ExpenseCategory.OTHER,
    )
    date = models.DateField(default=timezone.localdate)

    receipt_url = models.URLField(max_length=500, null=True, blank=True)
    file_size_bytes = models.PositiveBigIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["owner", "date"], name="expense_owner_date_idx"),
            models.Index(fields=["owner", "category", "date"], name="expense_owner_cat_date_idx"),
        ]

    @property
    def has_receipt(self) -> bool:
        return bool(self.receipt_url)

    def __str__(self):
        return f"{self.category} {self.amount} ({self.date})"
