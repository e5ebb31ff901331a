# PATH: subscriptions/services/limits.py

"""
FREE-TIER LIMIT GATE

Answers "may this tenant add a member / issue an invoice / attach a receipt?"

Counts:
- members  -> Member rows owned by the tenant (any status)
- invoices -> Profile.invoice_count (via TenantConfig)
- receipts -> Expense rows with a receipt_url

Rules:
- Free plan: allowed iff count < limit
- Pro plan: always allowed; limit reported as None (unlimited)

The gate is advisory at the data layer. It is enforced by the API
permission classes on the initiating endpoints and by the assert_* helpers
that services call before starting a gated action.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.apps import apps
from django.conf import settings

from core.exceptions import LimitReached
from users.tenant import TenantConfig, get_tenant_config

DEFAULT_FREE_TIER_LIMITS = {
    "MEMBERS": 50,
    "INVOICES": 50,
    "RECEIPT_SLOTS": 10,
}


def free_tier_limits() -> dict:
    configured = getattr(settings, "FREE_TIER_LIMITS", None) or {}
    return {**DEFAULT_FREE_TIER_LIMITS, **configured}


@dataclass(frozen=True)
class LimitStatus:
    allowed: bool
    count: int
    limit: int | None

    @property
    def is_unlimited(self) -> bool:
        return self.limit is None

    def as_dict(self) -> dict:
        return {
            "allowed": self.allowed,
            "count": self.count,
            "limit": self.limit,
            "unlimited": self.is_unlimited,
        }


@dataclass(frozen=True)
class TierLimits:
    is_pro: bool
    members: LimitStatus
    invoices: LimitStatus
    receipts: LimitStatus

    @property
    def can_add_member(self) -> bool:
        return self.members.allowed

    @property
    def can_generate_invoice(self) -> bool:
        return self.invoices.allowed

    @property
    def can_upload_receipt(self) -> bool:
        return self.receipts.allowed

    def as_dict(self) -> dict:
        return {
            "is_pro": self.is_pro,
            "can_add_member": self.can_add_member,
            "can_generate_invoice": self.can_generate_invoice,
            "can_upload_receipt": self.can_upload_receipt,
            "members": self.members.as_dict(),
            "invoices": self.invoices.as_dict(),
            "receipts": self.receipts.as_dict(),
        }


def _status(count: int, limit: int, *, is_pro: bool) -> LimitStatus:
    if is_pro:
        return LimitStatus(allowed=True, count=count, limit=None)
    return LimitStatus(allowed=count < limit, count=count, limit=limit)


def evaluate_limits(
    *,
    config: TenantConfig,
    member_count: int,
    receipt_count: int,
) -> TierLimits:
    limits = free_tier_limits()
    is_pro = config.is_pro
    return TierLimits(
        is_pro=is_pro,
        members=_status(member_count, limits["MEMBERS"], is_pro=is_pro),
        invoices=_status(config.invoice_count, limits["INVOICES"], is_pro=is_pro),
        receipts=_status(receipt_count, limits["RECEIPT_SLOTS"], is_pro=is_pro),
    )


def count_members(owner) -> int:
    Member = apps.get_model("members", "Member")
    return Member.objects.filter(owner=owner).count()


def count_receipts(owner) -> int:
    Expense = apps.get_model("expenses", "Expense")
    return (
        Expense.objects.filter(owner=owner, receipt_url__isnull=False)
        .exclude(receipt_url="")
        .count()
    )


def get_limits(owner) -> TierLimits:
    return evaluate_limits(
        config=get_tenant_config(owner),
        member_count=count_members(owner),
        receipt_count=count_receipts(owner),
    )


# ---------------- SERVICE-SIDE ASSERTIONS ----------------
def assert_can_add_member(owner) -> None:
    status = get_limits(owner).members
    if not status.allowed:
        raise LimitReached(
            f"Free plan member limit reached ({status.count}/{status.limit}). "
            "Upgrade to add more members."
        )


def assert_can_generate_invoice(owner) -> None:
    status = get_limits(owner).invoices
    if not status.allowed:
        raise LimitReached(
            f"Free plan invoice limit reached ({status.count}/{status.limit}). "
            "Upgrade to generate more invoices."
        )


def assert_can_upload_receipt(owner, *, file_size_bytes: int = 0) -> None:
    status = get_limits(owner).receipts
    if not status.allowed:
        raise LimitReached(
            f"Free plan receipt limit reached ({status.count}/{status.limit}). "
            "Upgrade to attach more receipts."
        )

    config = get_tenant_config(owner)
    if config.storage_used + max(int(file_size_bytes or 0), 0) > config.storage_limit:
        raise LimitReached("Storage limit reached. Remove old receipts or upgrade.")
