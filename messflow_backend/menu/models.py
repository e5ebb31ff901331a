# menu/models.py

from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class MenuEntry(models.Model):
    """One day of a four-week rotating menu."""

    DAY_CHOICES = tuple((d, d) for d in WEEKDAYS)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="menu_entries",
    )
    week_number = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(4)],
    )
    day = models.CharField(max_length=10, choices=DAY_CHOICES)

    breakfast = models.CharField(max_length=255, blank=True, default="")
    lunch = models.CharField(max_length=255, blank=True, default="")
    dinner = models.CharField(max_length=255, blank=True, default="")
    optional_dishes = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["week_number", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "week_number", "day"], name="uniq_menu_owner_week_day"
            ),
        ]

    @property
    def day_index(self) -> int:
        return WEEKDAYS.index(self.day)

    def __str__(self):
        return f"Week {self.week_number} {self.day}"
