# pettycash/models.py

from __future__ import annotations

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class PettyCashTransaction(models.Model):
    """
    One entry of the petty-cash chain.

    There is no stored balance anywhere else: the running balance is the
    balance_after of the newest entry (date desc, then id desc).
    """

    TYPE_REFILL = "refill"
    TYPE_EXPENSE = "expense"

    TYPE_CHOICES = (
        (TYPE_REFILL, "Refill"),
        (TYPE_EXPENSE, "Expense"),
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="petty_cash_transactions",
    )

    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    description = models.CharField(max_length=255)
    balance_after = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateTimeField(default=timezone.now)

    linked_expense = models.ForeignKey(
        "expenses.Expense",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="petty_cash_entries",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-id"]
        indexes = [
            models.Index(fields=["owner", "date"], name="petty_owner_date_idx"),
        ]

    @property
    def is_refill(self) -> bool:
        return self.type == self.TYPE_REFILL

    @property
    def signed_amount(self):
        return self.amount if self.is_refill else -self.amount

    def __str__(self):
        return f"{self.type} {self.amount} -> {self.balance_after}"
