# users/tenant.py

"""
TENANT CONFIG

Typed, versioned view of a tenant's options. Every consumer (limit gate,
reports, currency formatting) reads tenant settings through this record,
so a missing profile or a missing optional field always resolves to the
same defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import ClassVar

from django.conf import settings

from users.models import Profile


@dataclass(frozen=True)
class TenantConfig:
    SCHEMA_VERSION: ClassVar[int] = Profile.SETTINGS_VERSION

    schema_version: int = SCHEMA_VERSION
    profile_id: str | None = None
    business_name: str = "Business"
    company_address: str = ""
    currency: str = field(default_factory=lambda: getattr(settings, "DEFAULT_CURRENCY", "AED"))
    tax_name: str = "VAT"
    tax_rate: Decimal = Decimal("5.00")
    tax_trn: str = ""
    plan_type: str = Profile.PLAN_FREE
    subscription_status: str = Profile.STATUS_TRIAL
    subscription_expiry: date | None = None
    payment_link: str = ""
    invoice_count: int = 0
    next_invoice_number: int = 1
    storage_used: int = 0
    storage_limit: int = field(
        default_factory=lambda: getattr(settings, "DEFAULT_STORAGE_LIMIT_BYTES", 104857600)
    )

    @property
    def is_pro(self) -> bool:
        return self.plan_type == Profile.PLAN_PRO

    @classmethod
    def from_profile(cls, profile: Profile | None) -> "TenantConfig":
        if profile is None:
            return cls()

        defaults = cls()
        return cls(
            schema_version=profile.settings_version or cls.SCHEMA_VERSION,
            profile_id=str(profile.id),
            business_name=profile.business_name or defaults.business_name,
            company_address=profile.company_address or "",
            currency=(profile.currency or defaults.currency).upper(),
            tax_name=profile.tax_name or defaults.tax_name,
            tax_rate=Decimal(str(profile.tax_rate if profile.tax_rate is not None else defaults.tax_rate)),
            tax_trn=profile.tax_trn or "",
            plan_type=profile.plan_type or defaults.plan_type,
            subscription_status=profile.subscription_status or defaults.subscription_status,
            subscription_expiry=profile.subscription_expiry,
            payment_link=profile.payment_link or "",
            invoice_count=profile.invoice_count or 0,
            next_invoice_number=profile.next_invoice_number or 1,
            storage_used=profile.storage_used or 0,
            storage_limit=profile.storage_limit or defaults.storage_limit,
        )


def get_tenant_config(owner) -> TenantConfig:
    owner_id = getattr(owner, "pk", owner)
    profile = Profile.objects.filter(user_id=owner_id).first()
    return TenantConfig.from_profile(profile)
