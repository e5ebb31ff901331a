from django.contrib import admin

from pettycash.models import PettyCashTransaction


@admin.register(PettyCashTransaction)
class PettyCashTransactionAdmin(admin.ModelAdmin):
    list_display = ("date", "type", "amount", "balance_after", "description", "owner")
    list_filter = ("type",)
    search_fields = ("description", "owner__email")
    readonly_fields = ("balance_after", "linked_expense")

    # Balances are chained; entries change only through the ledger service.
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
