# core/apps.py

"""
CORE APP CONFIG

Shared building blocks used by every tenant app:
- Record store access (owner-scoped CRUD)
- Change notification bus
- Money / currency / calendar helpers
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Core"
