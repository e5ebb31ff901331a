# PATH: subscriptions/services/subscription.py

"""
SUBSCRIPTION SERVICE

Status model:
- days_until_expiry: expiry - today (negative once past), None without expiry
- is_expired:        status == "expired" OR days_until_expiry < 0
- is_expiring_soon:  0 <= days_until_expiry <= EXPIRY_WARNING_DAYS

Expired tenants keep all their data; write endpoints are refused at the
route level (see subscriptions/permissions.py).

Mutations (all atomic, profile row locked):
- apply_promo_code()
- issue_invoice_number()
- set_plan() (platform super admin)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.dates import days_until, today as local_today
from core.events import ACTION_UPDATE, Entity, publish_change
from core.exceptions import LimitReached, SubscriptionExpired, ValidationFailure
from subscriptions.models import PromoCode, PromoCodeAssignment
from subscriptions.services.limits import free_tier_limits
from users.models import Profile
from users.services.profile_service import lock_profile
from users.tenant import TenantConfig, get_tenant_config

logger = logging.getLogger(__name__)


class PromoCodeError(ValidationFailure):
    pass


@dataclass(frozen=True)
class SubscriptionState:
    status: str
    expiry: date | None
    days_until_expiry: int | None
    is_expired: bool
    is_expiring_soon: bool
    payment_link: str
    plan_type: str

    def as_dict(self) -> dict:
        return {
            "status": self.status,
            "expiry": self.expiry,
            "days_until_expiry": self.days_until_expiry,
            "is_expired": self.is_expired,
            "is_expiring_soon": self.is_expiring_soon,
            "payment_link": self.payment_link or None,
            "plan_type": self.plan_type,
        }


def subscription_state(config: TenantConfig, *, today: date | None = None) -> SubscriptionState:
    warning_days = getattr(settings, "EXPIRY_WARNING_DAYS", 7)
    days = days_until(config.subscription_expiry, ref=today or local_today())

    is_expired = config.subscription_status == Profile.STATUS_EXPIRED or (
        days is not None and days < 0
    )
    is_expiring_soon = days is not None and 0 <= days <= warning_days

    return SubscriptionState(
        status=config.subscription_status,
        expiry=config.subscription_expiry,
        days_until_expiry=days,
        is_expired=is_expired,
        is_expiring_soon=is_expiring_soon,
        payment_link=config.payment_link,
        plan_type=config.plan_type,
    )


def get_subscription_state(owner, *, today: date | None = None) -> SubscriptionState:
    return subscription_state(get_tenant_config(owner), today=today)


def assert_subscription_active(owner) -> None:
    if get_subscription_state(owner).is_expired:
        raise SubscriptionExpired(
            "Your subscription has expired. Renew to continue making changes."
        )


# ---------------- PROMO CODES ----------------
@transaction.atomic
def apply_promo_code(*, owner, code: str, today: date | None = None) -> dict:
    normalized = (code or "").strip().upper()
    if not normalized:
        raise PromoCodeError("Promo code is required")

    profile = lock_profile(owner)

    promo = (
        PromoCode.objects.select_for_update()
        .filter(code=normalized, is_used=False)
        .first()
    )
    if promo is None:
        raise PromoCodeError("Invalid or already used promo code")

    assigned = PromoCodeAssignment.objects.filter(promo_code=promo)
    if assigned.exists() and not assigned.filter(profile=profile).exists():
        raise PromoCodeError("This promo code is not available for your account")

    base = profile.subscription_expiry or today or local_today()
    new_expiry = base + timedelta(days=promo.days_to_add)

    profile.subscription_status = Profile.STATUS_ACTIVE
    profile.subscription_expiry = new_expiry
    profile.save(update_fields=["subscription_status", "subscription_expiry", "updated_at"])

    promo.is_used = True
    promo.used_by = profile
    promo.used_at = timezone.now()
    promo.save(update_fields=["is_used", "used_by", "used_at"])

    publish_change(
        entity=Entity.PROFILE,
        owner_id=owner.pk,
        action=ACTION_UPDATE,
        record_id=profile.pk,
    )
    logger.info(
        "Promo code applied",
        extra={
            "owner_id": str(owner.pk),
            "promo_code_id": str(promo.id),
            "days_added": promo.days_to_add,
        },
    )
    return {"days_added": promo.days_to_add, "subscription_expiry": new_expiry}


def create_promo_code(*, code: str, days_to_add: int, profiles=None) -> PromoCode:
    normalized = (code or "").strip().upper()
    if not normalized:
        raise PromoCodeError("code is required")
    if int(days_to_add) < 1:
        raise PromoCodeError("days_to_add must be >= 1")
    if PromoCode.objects.filter(code=normalized).exists():
        raise PromoCodeError(f"Promo code {normalized} already exists")

    with transaction.atomic():
        promo = PromoCode.objects.create(code=normalized, days_to_add=int(days_to_add))
        for profile in profiles or []:
            PromoCodeAssignment.objects.create(promo_code=promo, profile=profile)
    return promo


# ---------------- INVOICE NUMBERS ----------------
@transaction.atomic
def issue_invoice_number(*, owner) -> int:
    """
    Returns the number to print on the invoice and advances both
    next_invoice_number and invoice_count. Free plans stop at the
    invoice limit.
    """
    profile = lock_profile(owner)

    limit = free_tier_limits()["INVOICES"]
    if profile.plan_type != Profile.PLAN_PRO and profile.invoice_count >= limit:
        raise LimitReached(
            f"Free plan invoice limit reached ({profile.invoice_count}/{limit}). "
            "Upgrade to generate more invoices."
        )

    number = profile.next_invoice_number or 1
    profile.next_invoice_number = number + 1
    profile.invoice_count = (profile.invoice_count or 0) + 1
    profile.save(update_fields=["next_invoice_number", "invoice_count", "updated_at"])

    publish_change(
        entity=Entity.PROFILE,
        owner_id=owner.pk,
        action=ACTION_UPDATE,
        record_id=profile.pk,
    )
    return number


# ---------------- PLAN MANAGEMENT (super admin) ----------------
@transaction.atomic
def set_plan(
    *,
    owner,
    plan_type: str | None = None,
    subscription_status: str | None = None,
    subscription_expiry: date | None = None,
) -> Profile:
    profile = lock_profile(owner)

    if plan_type is not None:
        if plan_type not in dict(Profile.PLAN_CHOICES):
            raise ValidationFailure(f"Unknown plan_type: {plan_type}")
        profile.plan_type = plan_type

    if subscription_status is not None:
        if subscription_status not in dict(Profile.STATUS_CHOICES):
            raise ValidationFailure(f"Unknown subscription_status: {subscription_status}")
        profile.subscription_status = subscription_status

    if subscription_expiry is not None:
        profile.subscription_expiry = subscription_expiry

    profile.save()
    publish_change(
        entity=Entity.PROFILE,
        owner_id=owner.pk,
        action=ACTION_UPDATE,
        record_id=profile.pk,
    )
    logger.info(
        "Plan updated",
        extra={
            "owner_id": str(owner.pk),
            "plan_type": profile.plan_type,
            "subscription_status": profile.subscription_status,
        },
    )
    return profile
