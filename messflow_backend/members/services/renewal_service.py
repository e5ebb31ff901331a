# PATH: members/services/renewal_service.py

"""
MEMBER RENEWAL

One atomic step:
1) member.plan_expiry_date = end_date, status = active
2) payment transaction "Plan renewal: <start> to <end>"
3) optional invoice number, skipped when the free-tier invoice gate is closed

Defaults:
- start_date = current plan expiry (or today)
- end_date   = start_date + 1 month
- amount     = member.monthly_fee
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import transaction

from core.dates import add_months, today as local_today
from core.exceptions import ValidationFailure
from core.money import ZERO, money
from members.models import Member, Transaction
from members.services.member_service import member_store
from members.services.transaction_service import record_transaction
from subscriptions.services.limits import get_limits
from subscriptions.services.subscription import issue_invoice_number
from users.tenant import get_tenant_config

logger = logging.getLogger(__name__)


@transaction.atomic
def renew_member(
    *,
    owner,
    member_id,
    end_date: date | None = None,
    amount=None,
    start_date: date | None = None,
    generate_invoice: bool = False,
) -> dict:
    store = member_store(owner)
    member = store.get(member_id, for_update=True)

    start = start_date or member.plan_expiry_date or local_today()
    end = end_date or add_months(start, 1)
    if end <= start:
        raise ValidationFailure("end_date must be after start_date")

    amt = money(amount if amount is not None else member.monthly_fee)
    if amt <= ZERO:
        raise ValidationFailure("Amount must be > 0")

    member = store.update(member.pk, plan_expiry_date=end, status=Member.STATUS_ACTIVE)

    payment = record_transaction(
        owner=owner,
        member=member,
        txn_type=Transaction.TYPE_PAYMENT,
        amount=amt,
        notes=f"Plan renewal: {start.isoformat()} to {end.isoformat()}",
    )

    invoice = None
    if generate_invoice and not get_limits(owner).invoices.allowed:
        logger.info(
            "Renewal invoice skipped, invoice limit reached",
            extra={"owner_id": str(owner.pk), "member_id": str(member.id)},
        )
    elif generate_invoice:
        config = get_tenant_config(owner)
        invoice = {
            "invoice_number": issue_invoice_number(owner=owner),
            "member_name": member.name,
            "amount": amt,
            "business_name": config.business_name,
            "currency": config.currency,
            "tax_name": config.tax_name,
            "tax_rate": config.tax_rate,
            "tax_trn": config.tax_trn,
        }

    logger.info(
        "Member renewed",
        extra={
            "owner_id": str(owner.pk),
            "member_id": str(member.id),
            "amount": str(amt),
            "end_date": end.isoformat(),
        },
    )
    return {"member": member, "transaction": payment, "invoice": invoice}
