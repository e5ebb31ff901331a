from django.contrib import admin

from staff.models import SalaryAdvance, SalaryPayment, Staff, StaffAttendance


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ("name", "role", "base_salary", "is_active", "owner")
    list_filter = ("role", "is_active")
    search_fields = ("name", "phone", "owner__email")


@admin.register(StaffAttendance)
class StaffAttendanceAdmin(admin.ModelAdmin):
    list_display = ("date", "staff", "status")
    list_filter = ("status",)


@admin.register(SalaryAdvance)
class SalaryAdvanceAdmin(admin.ModelAdmin):
    list_display = ("date", "staff", "amount", "notes")


@admin.register(SalaryPayment)
class SalaryPaymentAdmin(admin.ModelAdmin):
    list_display = ("month_year", "staff", "amount", "paid_at")
    search_fields = ("staff__name", "month_year")
