"""
PATH: users/models/profile.py

TENANT PROFILE

One row per tenant. Holds business identity, currency/tax options,
subscription state and the counters the free-tier gate reads.

Consumers should not read optional fields off this model directly;
use users.tenant.get_tenant_config(owner), which fills defaults and
carries a schema version.
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


def _default_storage_limit():
    return getattr(settings, "DEFAULT_STORAGE_LIMIT_BYTES", 104857600)


def _default_currency():
    return getattr(settings, "DEFAULT_CURRENCY", "AED")


class Profile(models.Model):
    PLAN_FREE = "free"
    PLAN_PRO = "pro"
    PLAN_CHOICES = [
        (PLAN_FREE, "Free"),
        (PLAN_PRO, "Professional"),
    ]

    STATUS_TRIAL = "trial"
    STATUS_ACTIVE = "active"
    STATUS_EXPIRED = "expired"
    STATUS_CHOICES = [
        (STATUS_TRIAL, "Trial"),
        (STATUS_ACTIVE, "Active"),
        (STATUS_EXPIRED, "Expired"),
    ]

    SETTINGS_VERSION = 1

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )

    # Business identity
    business_name = models.CharField(max_length=200, default="Business")
    company_address = models.TextField(blank=True, default="")
    company_logo_url = models.URLField(max_length=500, blank=True, default="")

    # Currency / tax
    currency = models.CharField(max_length=3, default=_default_currency)
    tax_name = models.CharField(max_length=50, blank=True, default="VAT")
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=5,
        validators=[MinValueValidator(0)],
    )
    tax_trn = models.CharField(max_length=50, blank=True, default="")

    # Plan + subscription
    plan_type = models.CharField(max_length=10, choices=PLAN_CHOICES, default=PLAN_FREE)
    subscription_status = models.CharField(
        max_length=10, choices=STATUS_CHOICES, default=STATUS_TRIAL
    )
    subscription_expiry = models.DateField(null=True, blank=True)
    payment_link = models.URLField(max_length=500, blank=True, default="")

    # Counters
    invoice_count = models.PositiveIntegerField(default=0)
    next_invoice_number = models.PositiveIntegerField(default=1)
    storage_used = models.PositiveBigIntegerField(default=0)
    storage_limit = models.PositiveBigIntegerField(default=_default_storage_limit)

    settings_version = models.PositiveSmallIntegerField(default=SETTINGS_VERSION)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Tenant profile"
        verbose_name_plural = "Tenant profiles"

    def __str__(self):
        return f"{self.business_name} ({self.plan_type}/{self.subscription_status})"
