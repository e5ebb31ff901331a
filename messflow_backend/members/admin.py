# members/admin.py

from django.contrib import admin

from members.models import Member, Transaction


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "owner", "status", "monthly_fee", "balance", "plan_expiry_date")
    list_filter = ("status", "meal_plan")
    search_fields = ("name", "phone", "owner__email")


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("date", "type", "amount", "member", "owner")
    list_filter = ("type",)
    search_fields = ("member__name", "notes", "owner__email")
    date_hierarchy = "date"
