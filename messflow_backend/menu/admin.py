from django.contrib import admin

from menu.models import MenuEntry


@admin.register(MenuEntry)
class MenuEntryAdmin(admin.ModelAdmin):
    list_display = ("week_number", "day", "breakfast", "lunch", "dinner", "owner")
    list_filter = ("week_number", "day")
