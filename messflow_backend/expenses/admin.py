from django.contrib import admin

from expenses.models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ("date", "description", "category", "amount", "owner", "has_receipt")
    list_filter = ("category",)
    search_fields = ("description", "owner__email")
    date_hierarchy = "date"
