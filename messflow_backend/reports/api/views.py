# PATH: reports/api/views.py

"""
REPORTS API (read-only)

GET /api/reports/dashboard/          headline numbers
GET /api/reports/insights/           cost alerts + category variance
GET /api/reports/audit/?month=YYYY-MM  monthly audit report (default: this month)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api import ServiceErrorMixin
from core.dates import parse_month
from core.exceptions import ValidationFailure
from reports.services.report_service import get_audit_report, get_dashboard, get_insights


class DashboardView(ServiceErrorMixin, APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["reports"], responses={200: dict})
    def get(self, request):
        return Response(get_dashboard(request.user), status=status.HTTP_200_OK)


class InsightsView(ServiceErrorMixin, APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["reports"], responses={200: dict})
    def get(self, request):
        return Response(get_insights(request.user), status=status.HTTP_200_OK)


class AuditReportView(ServiceErrorMixin, APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["reports"],
        parameters=[
            OpenApiParameter(
                name="month",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="YYYY-MM. Defaults to the current month.",
            ),
        ],
        responses={200: dict, 400: dict},
    )
    def get(self, request):
        try:
            month = parse_month(request.query_params.get("month"))
        except ValueError as exc:
            raise ValidationFailure(str(exc)) from exc

        return Response(get_audit_report(request.user, month=month), status=status.HTTP_200_OK)
