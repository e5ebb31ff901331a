# PATH: menu/services/menu_service.py

"""
WEEKLY MENU SERVICE

- weekly_menu(): entries ordered by week, then Monday..Sunday
- upsert_menu_entry(): one row per (week_number, day)
- todays_menu(): week of month = ceil(day / 7) capped at 4, falling back
  to week 1 when that week has nothing for today
"""

from __future__ import annotations

import math
from datetime import date

from django.db import transaction

from core.dates import today as local_today
from core.events import Entity
from core.exceptions import ValidationFailure
from core.record_store import RecordStore
from menu.models import WEEKDAYS, MenuEntry

MEAL_FIELDS = ("breakfast", "lunch", "dinner", "optional_dishes")


def menu_store(owner) -> RecordStore:
    return RecordStore(MenuEntry, entity=Entity.MENU, owner=owner)


def weekly_menu(owner, *, week_number: int | None = None) -> list[MenuEntry]:
    filters = {} if week_number is None else {"week_number": week_number}
    rows = list(menu_store(owner).select(**filters))
    return sorted(rows, key=lambda m: (m.week_number, m.day_index))


def _clean_dishes(value) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationFailure("optional_dishes must be a list")
    return [str(v).strip() for v in value if str(v).strip()]


@transaction.atomic
def upsert_menu_entry(*, owner, week_number: int = 1, day: str, **meals) -> MenuEntry:
    day = (day or "").strip().capitalize()
    if day not in WEEKDAYS:
        raise ValidationFailure(f"Unknown day: {day or '(empty)'}")

    unknown = set(meals) - set(MEAL_FIELDS)
    if unknown:
        raise ValidationFailure(f"Unknown menu fields: {', '.join(sorted(unknown))}")
    if "optional_dishes" in meals:
        meals["optional_dishes"] = _clean_dishes(meals["optional_dishes"])

    store = menu_store(owner)
    existing = (
        store.select(week_number=week_number, day=day).select_for_update().first()
    )
    if existing is not None:
        return store.update(existing.pk, **meals)
    return store.insert(week_number=week_number, day=day, **meals)


def week_of_month(d: date) -> int:
    return min(math.ceil(d.day / 7), 4)


def todays_menu(owner, *, today: date | None = None) -> MenuEntry | None:
    d = today or local_today()
    day = WEEKDAYS[d.weekday()]
    store = menu_store(owner)
    return (
        store.select(week_number=week_of_month(d), day=day).first()
        or store.select(week_number=1, day=day).first()
    )
