# subscriptions/apps.py

"""
SUBSCRIPTIONS APP CONFIG

- Free-tier limit gate (members / invoices / receipts)
- Subscription status + expiry gating
- Promo codes (expiry extension)
- Invoice numbering
"""

from django.apps import AppConfig


class SubscriptionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "subscriptions"
    verbose_name = "Subscriptions & Plan Limits"
