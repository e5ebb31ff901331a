from django.contrib import admin

from inventory.models import InventoryConsumption, InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("item_name", "quantity", "unit", "owner")
    search_fields = ("item_name", "owner__email")


@admin.register(InventoryConsumption)
class InventoryConsumptionAdmin(admin.ModelAdmin):
    list_display = ("date", "item", "quantity_used", "notes")
