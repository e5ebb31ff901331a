# PATH: members/services/member_service.py

"""
MEMBER SERVICE

- create_member(): free-tier gated; default plan expiry is one month after joining
- update_member() / delete_member(): tenant-scoped via the record store
- member_summary(): active count + outstanding balance for the dashboard
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db.models import Count, Q, Sum

from core.dates import add_months, today as local_today
from core.events import Entity
from core.money import ZERO, money
from core.record_store import RecordStore
from members.models import Member
from subscriptions.services.limits import assert_can_add_member

logger = logging.getLogger(__name__)


def member_store(owner) -> RecordStore:
    return RecordStore(Member, entity=Entity.MEMBER, owner=owner)


def create_member(*, owner, **values) -> Member:
    assert_can_add_member(owner)

    joining_date = values.get("joining_date") or local_today()
    values["joining_date"] = joining_date
    values.setdefault("plan_expiry_date", add_months(joining_date, 1))

    member = member_store(owner).insert(**values)
    logger.info(
        "Member created",
        extra={"owner_id": str(owner.pk), "member_id": str(member.id)},
    )
    return member


def update_member(*, owner, member_id, **changes) -> Member:
    return member_store(owner).update(member_id, **changes)


def delete_member(*, owner, member_id) -> None:
    member_store(owner).delete(member_id)


def member_summary(owner) -> dict:
    agg = Member.objects.filter(owner=owner).aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(status=Member.STATUS_ACTIVE)),
        balance=Sum("balance"),
    )
    return {
        "total_members": agg["total"] or 0,
        "active_count": agg["active"] or 0,
        "total_balance": money(agg["balance"] or ZERO),
    }


def members_with_dues(owner, *, minimum: Decimal = ZERO):
    return Member.objects.filter(owner=owner, balance__gt=minimum).order_by("-balance")
