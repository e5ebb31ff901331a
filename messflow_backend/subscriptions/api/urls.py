# subscriptions/api/urls.py

from django.urls import path

from subscriptions.api.views import (
    ApplyPromoCodeView,
    InvoiceNumberView,
    PlanLimitsView,
    PromoCodeAdminView,
    SetPlanView,
    SubscriptionStatusView,
)

urlpatterns = [
    path("status/", SubscriptionStatusView.as_view(), name="subscription-status"),
    path("limits/", PlanLimitsView.as_view(), name="plan-limits"),
    path("promo/apply/", ApplyPromoCodeView.as_view(), name="promo-apply"),
    path("invoice-number/", InvoiceNumberView.as_view(), name="invoice-number"),
    # Platform admin
    path("promo-codes/", PromoCodeAdminView.as_view(), name="promo-codes"),
    path("plan/", SetPlanView.as_view(), name="set-plan"),
]
