# PATH: users/services/profile_service.py

"""
PROFILE SERVICE

- ensure_profile(): lazily create the tenant profile with defaults
- lock_profile(): row-lock the tenant profile; used to serialize
  read-then-write sequences per tenant (petty cash, invoice numbers)
- update_business_settings(): partial update of tenant options
- adjust_storage_used(): atomic counter update for receipt bytes
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import BigIntegerField, F, Value
from django.db.models.functions import Greatest

from core.currency import is_supported_currency
from core.events import ACTION_UPDATE, Entity, publish_change
from core.exceptions import ValidationFailure
from users.models import Profile

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "business_name",
    "company_address",
    "company_logo_url",
    "currency",
    "tax_name",
    "tax_rate",
    "tax_trn",
    "payment_link",
}


def ensure_profile(owner) -> Profile:
    profile, created = Profile.objects.get_or_create(user=owner)
    if created:
        logger.info("Tenant profile created", extra={"owner_id": str(owner.pk)})
    return profile


def lock_profile(owner) -> Profile:
    """Must be called inside transaction.atomic."""
    ensure_profile(owner)
    return Profile.objects.select_for_update().get(user=owner)


@transaction.atomic
def update_business_settings(*, owner, **changes) -> Profile:
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValidationFailure(f"Unknown settings: {', '.join(sorted(unknown))}")

    if "currency" in changes:
        code = (changes["currency"] or "").strip().upper()
        if not is_supported_currency(code):
            raise ValidationFailure(f"Unsupported currency: {code or '(empty)'}")
        changes["currency"] = code

    if "business_name" in changes and not (changes["business_name"] or "").strip():
        raise ValidationFailure("business_name cannot be empty")

    profile = lock_profile(owner)
    for name, value in changes.items():
        setattr(profile, name, value)
    profile.save()

    publish_change(
        entity=Entity.PROFILE,
        owner_id=owner.pk,
        action=ACTION_UPDATE,
        record_id=profile.pk,
    )
    return profile


def adjust_storage_used(*, owner, delta_bytes: int) -> None:
    if not delta_bytes:
        return
    ensure_profile(owner)
    Profile.objects.filter(user=owner).update(
        storage_used=Greatest(
            F("storage_used") + int(delta_bytes),
            Value(0),
            output_field=BigIntegerField(),
        )
    )
    publish_change(entity=Entity.PROFILE, owner_id=owner.pk, action=ACTION_UPDATE)
