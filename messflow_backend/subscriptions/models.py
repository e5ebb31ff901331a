# subscriptions/models.py

from __future__ import annotations

import uuid

from django.core.validators import MinValueValidator
from django.db import models


class PromoCode(models.Model):
    """
    Single-use code that extends a tenant's subscription expiry.

    If any PromoCodeAssignment rows exist for a code, only the assigned
    profiles may redeem it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    code = models.CharField(max_length=40, unique=True)
    days_to_add = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    is_used = models.BooleanField(default=False)
    used_by = models.ForeignKey(
        "users.Profile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="redeemed_promo_codes",
    )
    used_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        self.code = (self.code or "").strip().upper()
        super().save(*args, **kwargs)

    def __str__(self):
        state = "used" if self.is_used else "unused"
        return f"{self.code} (+{self.days_to_add}d, {state})"


class PromoCodeAssignment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    promo_code = models.ForeignKey(
        PromoCode,
        on_delete=models.CASCADE,
        related_name="assignments",
    )
    profile = models.ForeignKey(
        "users.Profile",
        on_delete=models.CASCADE,
        related_name="promo_code_assignments",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["promo_code", "profile"],
                name="uniq_promo_code_assignment",
            )
        ]

    def __str__(self):
        return f"{self.promo_code.code} -> {self.profile_id}"
