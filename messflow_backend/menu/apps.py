# menu/apps.py

from django.apps import AppConfig


class MenuConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "menu"
    verbose_name = "Weekly Menu"
