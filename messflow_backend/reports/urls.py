from django.urls import path

from reports.api.views import AuditReportView, DashboardView, InsightsView

urlpatterns = [
    path("dashboard/", DashboardView.as_view(), name="reports-dashboard"),
    path("insights/", InsightsView.as_view(), name="reports-insights"),
    path("audit/", AuditReportView.as_view(), name="reports-audit"),
]
