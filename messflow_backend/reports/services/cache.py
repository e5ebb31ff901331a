# PATH: reports/services/cache.py

"""
DERIVED-VIEW CACHE

Cached copies of alerts and audit reports, per tenant.

- Keys carry a per-tenant generation number; dropping a tenant's views
  bumps the generation so every older key is unreachable.
- Generations are bumped by change events (see connect_invalidation),
  never by the views themselves.
- REPORT_CACHE_TIMEOUT <= 0 disables caching entirely.
"""

from __future__ import annotations

import logging
from typing import Callable

from django.conf import settings
from django.core.cache import cache

from core.events import ChangeEvent, Entity, subscribe

logger = logging.getLogger(__name__)

# Entities each derived view is computed from.
VIEW_DEPENDENCIES = {
    "alerts": (Entity.EXPENSE, Entity.TRANSACTION),
    "audit": (
        Entity.EXPENSE,
        Entity.TRANSACTION,
        Entity.STAFF,
        Entity.SALARY_PAYMENT,
        Entity.PETTY_CASH,
        Entity.PROFILE,
    ),
}


def _timeout() -> int:
    return int(getattr(settings, "REPORT_CACHE_TIMEOUT", 0) or 0)


def _generation_key(view: str, owner_id) -> str:
    return f"reports:{owner_id}:{view}:gen"


def _generation(view: str, owner_id) -> int:
    return cache.get(_generation_key(view, owner_id), 0)


def view_key(view: str, owner_id, suffix: str) -> str:
    return f"reports:{owner_id}:{view}:{_generation(view, owner_id)}:{suffix}"


def cached_view(view: str, owner_id, suffix: str, compute: Callable[[], dict]) -> dict:
    timeout = _timeout()
    if timeout <= 0:
        return compute()

    key = view_key(view, owner_id, suffix)
    value = cache.get(key)
    if value is None:
        value = compute()
        cache.set(key, value, timeout)
    return value


def drop_views(view: str, owner_id) -> None:
    key = _generation_key(view, owner_id)
    cache.set(key, _generation(view, owner_id) + 1, None)
    logger.debug("Derived views dropped", extra={"view": view, "owner_id": str(owner_id)})


def connect_invalidation() -> list[Callable[[], None]]:
    """Subscribe every derived view to the entities it depends on."""
    unsubscribers = []
    for view, entities in VIEW_DEPENDENCIES.items():

        def _handler(event: ChangeEvent, view=view) -> None:
            drop_views(view, event.owner_id)

        for entity in entities:
            unsubscribers.append(subscribe(entity, _handler))
    return unsubscribers
