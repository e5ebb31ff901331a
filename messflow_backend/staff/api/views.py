# PATH: staff/api/views.py

"""
STAFF & PAYROLL API

/api/staff/                                  CRUD (DELETE is a hard delete)
/api/staff/payroll/                          this month's payroll for active staff
/api/staff/{id}/deactivate/ | reactivate/    soft delete / restore
/api/staff/{id}/attendance/                  GET month list, POST upsert
/api/staff/{id}/advances/                    GET list, POST add
/api/staff/{id}/advances/{advance_id}/       DELETE
/api/staff/{id}/payroll/                     calculation for one staff member
/api/staff/{id}/pay/                         pay salary (expense + payment)
/api/staff/{id}/salary-history/              payments, newest first
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import OwnedRecordViewSet
from core.dates import month_bounds, parse_month, today as local_today
from core.events import Entity
from core.exceptions import ValidationFailure
from staff.api.serializers import (
    AdvanceSerializer,
    AttendanceSerializer,
    PaySalarySerializer,
    SalaryPaymentSerializer,
    SetAttendanceSerializer,
    StaffSerializer,
)
from staff.models import Staff
from staff.services.payroll_service import (
    calculate_payroll,
    pay_salary,
    payroll_overview,
    salary_history,
)
from staff.services.staff_service import (
    add_advance,
    advance_store,
    attendance_for_month,
    create_staff,
    deactivate_staff,
    delete_advance,
    reactivate_staff,
    set_attendance,
)
from subscriptions.permissions import HasActiveSubscription


def _month_param(request):
    try:
        return parse_month(request.query_params.get("month"))
    except ValueError as exc:
        raise ValidationFailure(str(exc)) from exc


class StaffViewSet(OwnedRecordViewSet):
    model = Staff
    entity = Entity.STAFF
    ordering = ("-created_at",)
    serializer_class = StaffSerializer
    permission_classes = [IsAuthenticated, HasActiveSubscription]
    filterset_fields = ["role", "is_active"]

    def perform_create(self, serializer):
        serializer.instance = create_staff(owner=self.request.user, **serializer.validated_data)

    @extend_schema(tags=["staff"], request=None, responses=StaffSerializer)
    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):
        return Response(StaffSerializer(deactivate_staff(owner=request.user, staff_id=pk)).data)

    @extend_schema(tags=["staff"], request=None, responses=StaffSerializer)
    @action(detail=True, methods=["post"])
    def reactivate(self, request, pk=None):
        return Response(StaffSerializer(reactivate_staff(owner=request.user, staff_id=pk)).data)

    # ---------------- ATTENDANCE ----------------
    @extend_schema(tags=["staff"], request=SetAttendanceSerializer, responses=AttendanceSerializer)
    @action(detail=True, methods=["get", "post"])
    def attendance(self, request, pk=None):
        if request.method == "GET":
            start, end = month_bounds(_month_param(request))
            rows = attendance_for_month(request.user, start=start, end=end, staff_id=pk)
            return Response(AttendanceSerializer(rows, many=True).data)

        s = SetAttendanceSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        row = set_attendance(
            owner=request.user,
            staff_id=pk,
            status=s.validated_data["status"],
            day=s.validated_data.get("date"),
        )
        return Response(AttendanceSerializer(row).data)

    # ---------------- ADVANCES ----------------
    @extend_schema(tags=["staff"], request=AdvanceSerializer, responses=AdvanceSerializer)
    @action(detail=True, methods=["get", "post"])
    def advances(self, request, pk=None):
        if request.method == "GET":
            staff = self.get_store().get(pk)
            rows = advance_store(request.user).select(staff=staff, order_by=("-date", "-id"))
            return Response(AdvanceSerializer(rows, many=True).data)

        s = AdvanceSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        advance = add_advance(
            owner=request.user,
            staff_id=pk,
            amount=s.validated_data["amount"],
            notes=s.validated_data.get("notes", ""),
            day=s.validated_data.get("date"),
        )
        return Response(AdvanceSerializer(advance).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["staff"], responses={204: None})
    @action(detail=True, methods=["delete"], url_path=r"advances/(?P<advance_id>\d+)")
    def remove_advance(self, request, pk=None, advance_id=None):
        self.get_store().get(pk)
        delete_advance(owner=request.user, advance_id=advance_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ---------------- PAYROLL ----------------
    @extend_schema(tags=["staff"], responses={200: dict})
    @action(detail=False, methods=["get"], url_path="payroll", url_name="payroll-overview")
    def payroll_list(self, request):
        return Response(payroll_overview(request.user))

    @extend_schema(tags=["staff"], responses={200: dict})
    @action(detail=True, methods=["get"])
    def payroll(self, request, pk=None):
        staff = self.get_store().get(pk)
        return Response(calculate_payroll(staff, today=local_today()))

    @extend_schema(tags=["staff"], request=PaySalarySerializer, responses=SalaryPaymentSerializer)
    @action(detail=True, methods=["post"])
    def pay(self, request, pk=None):
        s = PaySalarySerializer(data=request.data)
        s.is_valid(raise_exception=True)

        month = s.validated_data.get("month")
        try:
            period = parse_month(month) if month else None
        except ValueError as exc:
            raise ValidationFailure(str(exc)) from exc

        payment = pay_salary(
            owner=request.user,
            staff_id=pk,
            amount=s.validated_data["amount"],
            month=period,
        )
        return Response(SalaryPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["staff"], responses=SalaryPaymentSerializer(many=True))
    @action(detail=True, methods=["get"], url_path="salary-history")
    def history(self, request, pk=None):
        rows = salary_history(owner=request.user, staff_id=pk)
        return Response(SalaryPaymentSerializer(rows, many=True).data)
